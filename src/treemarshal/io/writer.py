"""Builder-style writer producing an ElementTree document."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager

from treemarshal.exceptions import ConversionError
from treemarshal.io.naming import NameCoder

_INVALID_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
"""Characters outside the XML 1.0 `Char` production."""


class TreeWriter:
    """
    Builds a hierarchical document node by node.

    Examples:
        >>> writer = TreeWriter()
        >>> with writer.node("list"):
        ...     with writer.node("int"):
        ...         writer.set_value("1")
        >>> writer.to_string(indent=None)
        '<list><int>1</int></list>'
    """

    def __init__(self, name_coder: NameCoder | None = None) -> None:
        self._coder = name_coder or NameCoder()
        self._root: ET.Element | None = None
        self._stack: list[ET.Element] = []

    def start_node(self, name: str) -> None:
        tag = self._coder.encode_node(name)
        if self._stack:
            element = ET.SubElement(self._stack[-1], tag)
        elif self._root is None:
            element = ET.Element(tag)
            self._root = element
        else:
            raise ConversionError("A document can only have one root node")
        self._stack.append(element)

    def add_attribute(self, name: str, value: str) -> None:
        self._current().set(self._coder.encode_attribute(name), _check_text(value))

    def set_value(self, text: str) -> None:
        self._current().text = _check_text(text)

    def end_node(self) -> None:
        if not self._stack:
            raise ConversionError("end_node() called without a matching start_node()")
        self._stack.pop()

    @contextmanager
    def node(self, name: str) -> Iterator[TreeWriter]:
        self.start_node(name)
        try:
            yield self
        finally:
            self.end_node()

    @property
    def root(self) -> ET.Element:
        if self._root is None:
            raise ConversionError("Nothing has been written")
        return self._root

    def to_string(self, indent: str | None = "  ") -> str:
        """Render the document, pretty-printed with ``indent`` unless it is None."""
        if self._stack:
            raise ConversionError(f"Document still has {len(self._stack)} open node(s)")
        root = self.root
        if indent:
            ET.indent(root, space=indent)
        return ET.tostring(root, encoding="unicode")

    def _current(self) -> ET.Element:
        if not self._stack:
            raise ConversionError("No open node")
        return self._stack[-1]


def _check_text(text: str) -> str:
    match = _INVALID_XML_CHARS.search(text)
    if match is not None:
        raise ConversionError(
            f"Cannot write character {match.group()!r} at position {match.start()}: "
            "XML documents cannot contain it"
        )
    return text
