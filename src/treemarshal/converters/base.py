"""
Converter interfaces.

A ``Converter`` claims types through ``can_convert`` and reads/writes their instances with full
access to the document tree. A ``SingleValueConverter`` is the simplified form for types whose
instances fit in one text token; the engine adapts it with ``SingleValueConverterWrapper``.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING, Any

from typing_extensions import override

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter

PRIORITY_VERY_HIGH = 10000
PRIORITY_ROBUST = 10
PRIORITY_NORMAL = 0
PRIORITY_LOW = -10
PRIORITY_VERY_LOW = -20


class Converter(ABC):
    """Reads and writes instances of the types it claims."""

    @abstractmethod
    def can_convert(self, type_: type) -> bool:
        """Whether this converter handles instances of ``type_``."""
        ...

    @abstractmethod
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        """
        Write ``source`` into the node the writer is currently positioned on.

        The node itself has already been started by the caller.
        """
        ...

    @abstractmethod
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        """
        Reconstruct an instance of ``context.required_type`` from the current node.

        The reader must be left on the same node it started on.
        """
        ...


class SingleValueConverter(ABC):
    """Converter for types whose instances are represented by a single text token."""

    @abstractmethod
    def can_convert(self, type_: type) -> bool: ...

    @abstractmethod
    def to_string(self, obj: Any) -> str: ...

    @abstractmethod
    def from_string(self, text: str) -> Any: ...


class SingleValueConverterWrapper(Converter):
    """Presents a ``SingleValueConverter`` as a full ``Converter``."""

    def __init__(self, wrapped: SingleValueConverter) -> None:
        self._wrapped = wrapped

    @property
    def wrapped(self) -> SingleValueConverter:
        return self._wrapped

    @override
    def can_convert(self, type_: type) -> bool:
        return self._wrapped.can_convert(type_)

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        writer.set_value(self._wrapped.to_string(source))

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        return self._wrapped.from_string(reader.value)

    def __repr__(self) -> str:
        return f"SingleValueConverterWrapper({self._wrapped!r})"
