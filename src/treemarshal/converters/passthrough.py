"""Structural (un)marshalling followed by a post-load callback."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from typing_extensions import override

from treemarshal.converters.base import Converter

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.engine.base import BaseEngine
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter

T = TypeVar("T")


class PassthroughConverter(Converter, Generic[T]):
    """
    Base for associated converters that only need to run code after an object is loaded.

    Reading and writing are left to the engine's structural converter; ``callback`` then gets the
    fully reconstructed object, e.g. to fill in fields added since the document was written.

    Never selected by priority matching (``can_convert`` is always False): it is only reached as
    the associated converter of a type.

    Examples:
        >>> class Job:
        ...     class ConverterImpl(PassthroughConverter["Job"]):
        ...         def callback(self, obj, context):
        ...             if not hasattr(obj, "retries"):
        ...                 obj.retries = 3
    """

    def __init__(self, engine: BaseEngine) -> None:
        self._converter = engine.reflection_converter

    @override
    def can_convert(self, type_: type) -> bool:
        return False

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        self._converter.marshal(source, writer, context)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        obj = self._converter.unmarshal(reader, context)
        self.callback(obj, context)
        return obj

    @abstractmethod
    def callback(self, obj: T, context: UnmarshallingContext) -> None:
        """Called with each freshly unmarshalled object before it is returned."""
        ...
