"""
Converters for sequences, sets and mappings.

The plain converters are registered by ``BaseEngine`` at normal priority. The ``Robust*``
variants skip items that cannot be read (for example elements naming a class that no longer
exists), record the problem on the context and keep going; ``Engine`` registers them at a
higher priority so that they take over the built-in types.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections import deque
from collections.abc import Callable
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

from typing_extensions import override

from treemarshal.collections import ConcurrentDict
from treemarshal.collections import FrozenDict
from treemarshal.converters.base import Converter
from treemarshal.exceptions import ConversionError

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter

logger = logging.getLogger(__name__)

ENTRY_NODE = "entry"

COLLECTION_TYPES: tuple[type, ...] = (list, tuple, set, frozenset, deque)
MAP_TYPES: tuple[type, ...] = (dict, OrderedDict)

# Built from a complete list of items instead of being filled in place
_IMMUTABLE_COLLECTIONS = (tuple, frozenset)


class CollectionConverter(Converter):
    """
    Writes each element of a sequence or set as a child node named after its type.

    Args:
        types: Exact collection types claimed by this converter.
    """

    def __init__(self, types: tuple[type, ...] = COLLECTION_TYPES) -> None:
        self._types = types

    @override
    def can_convert(self, type_: type) -> bool:
        return type_ in self._types

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        for item in source:
            context.write_item(item)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        type_ = context.required_type
        if type_ in _IMMUTABLE_COLLECTIONS:
            items: list[Any] = []
            self.read_items(reader, context, items.append)
            return type_(items)

        collection = type_()
        context.register_current(collection)
        add = collection.add if isinstance(collection, (set, frozenset)) else collection.append
        self.read_items(reader, context, add)
        return collection

    def read_items(
        self, reader: TreeReader, context: UnmarshallingContext, add: Callable[[Any], Any]
    ) -> None:
        while reader.has_more_children():
            add(context.read_item())


class RobustCollectionConverter(CollectionConverter):
    """Collection converter that drops unreadable elements instead of failing."""

    @override
    def read_items(
        self, reader: TreeReader, context: UnmarshallingContext, add: Callable[[Any], Any]
    ) -> None:
        while reader.has_more_children():
            try:
                item = context.read_item()
            except ConversionError as e:
                logger.warning(f"Skipping unreadable element of {context.required_type!r}: {e}")
                context.add_error(e)
                continue
            add(item)


class MapConverter(Converter):
    """
    Writes each mapping entry as an ``entry`` node holding a key node and a value node.

    Args:
        types: Exact mapping types claimed by this converter.
    """

    def __init__(self, types: tuple[type, ...] = MAP_TYPES) -> None:
        self._types = types

    @override
    def can_convert(self, type_: type) -> bool:
        return type_ in self._types

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        for key, value in source.items():
            with writer.node(ENTRY_NODE):
                context.write_item(key)
                context.write_item(value)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        type_ = context.required_type
        mapping = self.create(type_, context)
        while reader.has_more_children():
            self.read_entry(reader, context, mapping)
        return self.finish(type_, mapping)

    def create(self, type_: type, context: UnmarshallingContext) -> MutableMapping:
        mapping = type_()
        context.register_current(mapping)
        return mapping

    def finish(self, type_: type, mapping: MutableMapping) -> Any:
        return mapping

    def read_entry(
        self, reader: TreeReader, context: UnmarshallingContext, mapping: MutableMapping
    ) -> None:
        with reader.child():
            key = context.read_item()
            value = context.read_item()
        mapping[key] = value


class RobustMapConverter(MapConverter):
    """Map converter that drops unreadable entries instead of failing."""

    @override
    def read_entry(
        self, reader: TreeReader, context: UnmarshallingContext, mapping: MutableMapping
    ) -> None:
        try:
            super().read_entry(reader, context, mapping)
        except ConversionError as e:
            logger.warning(f"Skipping unreadable entry of {context.required_type!r}: {e}")
            context.add_error(e)


class FrozenDictConverter(RobustMapConverter):
    """
    Converter for ``FrozenDict`` and its subclasses.

    Entries are collected into a plain dict first, since the frozen mapping can only be built
    once all of them are known.
    """

    def __init__(self) -> None:
        super().__init__((FrozenDict,))

    @override
    def can_convert(self, type_: type) -> bool:
        return isinstance(type_, type) and issubclass(type_, FrozenDict)

    @override
    def create(self, type_: type, context: UnmarshallingContext) -> MutableMapping:
        return {}

    @override
    def finish(self, type_: type, mapping: MutableMapping) -> Any:
        return type_(mapping)


class ConcurrentDictConverter(RobustMapConverter):
    """Converter for ``ConcurrentDict``; the lock itself is never written."""

    def __init__(self) -> None:
        super().__init__((ConcurrentDict,))
