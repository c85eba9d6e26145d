"""Cursor-style reader over an ElementTree document."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager

from treemarshal.exceptions import ConversionError
from treemarshal.io.naming import NameCoder


class TreeReader:
    """
    Walks a hierarchical document one node at a time.

    The reader always sits on a *current* node. ``move_down`` enters the next unread child and
    ``move_up`` returns to the parent. Converters read the current node's name, text value and
    attributes, then descend into children as needed.

    Examples:
        >>> reader = TreeReader.from_string("<list><int>1</int><int>2</int></list>")
        >>> reader.node_name
        'list'
        >>> values = []
        >>> while reader.has_more_children():
        ...     reader.move_down()
        ...     values.append(reader.value)
        ...     reader.move_up()
        >>> values
        ['1', '2']
    """

    def __init__(self, root: ET.Element, name_coder: NameCoder | None = None) -> None:
        self._coder = name_coder or NameCoder()
        # Each frame is [element, index of the next child to read]
        self._stack: list[list] = [[root, 0]]

    @classmethod
    def from_string(cls, text: str, name_coder: NameCoder | None = None) -> TreeReader:
        """Parse ``text`` and position the reader on the document root."""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ConversionError(f"Malformed document: {e}") from e
        return cls(root, name_coder)

    @property
    def _element(self) -> ET.Element:
        return self._stack[-1][0]

    @property
    def depth(self) -> int:
        """Number of nodes between the document root and the current node."""
        return len(self._stack) - 1

    @property
    def node_name(self) -> str:
        return self._coder.decode_node(self._element.tag)

    @property
    def value(self) -> str:
        return self._element.text or ""

    def attribute(self, name: str) -> str | None:
        return self._element.get(self._coder.encode_attribute(name))

    def attribute_names(self) -> list[str]:
        return [self._coder.decode_attribute(key) for key in self._element.keys()]

    def has_more_children(self) -> bool:
        element, index = self._stack[-1]
        return index < len(element)

    def move_down(self) -> None:
        frame = self._stack[-1]
        element, index = frame
        if index >= len(element):
            raise ConversionError(f"Node '{self.node_name}' has no more children")
        frame[1] = index + 1
        self._stack.append([element[index], 0])

    def move_up(self) -> None:
        if len(self._stack) == 1:
            raise ConversionError("Cannot move above the document root")
        self._stack.pop()

    def move_up_to(self, depth: int) -> None:
        """
        Unwind to ``depth``, abandoning any partially read nodes below it.

        Used by tolerant converters to recover after a failure deep inside a child.
        """
        while self.depth > depth:
            self._stack.pop()

    @contextmanager
    def child(self) -> Iterator[TreeReader]:
        """Enter the next child for the duration of the ``with`` block."""
        depth = self.depth
        self.move_down()
        try:
            yield self
        finally:
            self.move_up_to(depth)

    def __repr__(self) -> str:
        path = "/".join(self._coder.decode_node(frame[0].tag) for frame in self._stack)
        return f"TreeReader(/{path})"
