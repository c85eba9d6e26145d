"""
Mapper chain: translating between classes/members and the names written in documents.

A mapper chain is a stack of ``MapperWrapper`` layers around a ``DefaultMapper``. Each layer
overrides the calls it cares about and delegates the rest inward.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, TypeVar

from treemarshal.collections import ConcurrentDict
from treemarshal.mapper.loader import ImportTypeLoader
from treemarshal.mapper.loader import TypeLoader
from treemarshal.mapper.loader import type_name

if TYPE_CHECKING:
    from treemarshal.context import UnmarshallingContext

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="Mapper")

NONE_NAME = "none"
"""Element name used for ``None`` values."""


class Mapper:
    """Interface of every layer in a mapper chain."""

    def serialized_class(self, type_: type | None) -> str:
        """Name under which instances of ``type_`` are written."""
        raise NotImplementedError

    def real_class(self, name: str, context: UnmarshallingContext | None = None) -> type:
        """
        Class designated by an element name read from a document.

        Args:
            name: The decoded element name, exactly as written.
            context: Context of the unmarshal call doing the lookup, if any.

        Raises:
            TypeResolutionError: If nothing resolves.
        """
        raise NotImplementedError

    def serialized_member(self, owner: type, member: str) -> str:
        raise NotImplementedError

    def real_member(self, owner: type, name: str) -> str:
        raise NotImplementedError

    def should_serialize_member(self, owner: type, member: str) -> bool:
        raise NotImplementedError

    def default_implementation_of(self, type_: type) -> type:
        """Class to instantiate for a value declared (annotated) as ``type_``."""
        raise NotImplementedError

    def is_immutable_value_type(self, type_: type) -> bool:
        raise NotImplementedError

    def lookup_mapper(self, mapper_type: type[M]) -> M | None:
        """Find the layer of the given class in this chain."""
        return self if isinstance(self, mapper_type) else None


class MapperWrapper(Mapper):
    """Mapper layer that delegates everything to the mapper it wraps."""

    def __init__(self, wrapped: Mapper) -> None:
        self._wrapped = wrapped

    @property
    def wrapped(self) -> Mapper:
        return self._wrapped

    def serialized_class(self, type_: type | None) -> str:
        return self._wrapped.serialized_class(type_)

    def real_class(self, name: str, context: UnmarshallingContext | None = None) -> type:
        return self._wrapped.real_class(name, context)

    def serialized_member(self, owner: type, member: str) -> str:
        return self._wrapped.serialized_member(owner, member)

    def real_member(self, owner: type, name: str) -> str:
        return self._wrapped.real_member(owner, name)

    def should_serialize_member(self, owner: type, member: str) -> bool:
        return self._wrapped.should_serialize_member(owner, member)

    def default_implementation_of(self, type_: type) -> type:
        return self._wrapped.default_implementation_of(type_)

    def is_immutable_value_type(self, type_: type) -> bool:
        return self._wrapped.is_immutable_value_type(type_)

    def lookup_mapper(self, mapper_type: type[M]) -> M | None:
        if isinstance(self, mapper_type):
            return self
        return self._wrapped.lookup_mapper(mapper_type)


class DefaultMapper(Mapper):
    """
    Innermost mapper: aliases, value types and loader-backed name resolution.

    Aliases registered here are used in both directions. Names without an alias are written with
    ``type_name`` and read back through a ``TypeLoader``: the per-call loader carried by the
    unmarshalling context when there is one, otherwise the mapper's own.

    Examples:
        >>> mapper = DefaultMapper()
        >>> mapper.alias("int", int)
        >>> mapper.serialized_class(int)
        'int'
        >>> mapper.real_class("int")
        <class 'int'>
        >>> mapper.real_class("collections.OrderedDict")
        <class 'collections.OrderedDict'>
    """

    def __init__(self, loader: TypeLoader | None = None) -> None:
        self.loader: TypeLoader = loader or ImportTypeLoader()
        self._types_by_name: ConcurrentDict[str, type] = ConcurrentDict()
        self._names_by_type: ConcurrentDict[type, str] = ConcurrentDict()
        self._immutable_types: ConcurrentDict[type, bool] = ConcurrentDict()
        self.alias(NONE_NAME, type(None))

    def alias(self, name: str, type_: type) -> None:
        """Write ``type_`` as ``name`` and resolve ``name`` to ``type_``."""
        self._types_by_name[name] = type_
        self._names_by_type[type_] = name

    def add_immutable_type(self, type_: type) -> None:
        self._immutable_types[type_] = True

    def serialized_class(self, type_: type | None) -> str:
        if type_ is None:
            return NONE_NAME
        name = self._names_by_type.get(type_)
        return name if name is not None else type_name(type_)

    def real_class(self, name: str, context: UnmarshallingContext | None = None) -> type:
        aliased = self._types_by_name.get(name)
        if aliased is not None:
            return aliased
        loader = self.loader
        if context is not None and context.loader is not None:
            loader = context.loader
        return loader.load(name)

    def serialized_member(self, owner: type, member: str) -> str:
        return member

    def real_member(self, owner: type, name: str) -> str:
        return name

    def should_serialize_member(self, owner: type, member: str) -> bool:
        return True

    def default_implementation_of(self, type_: type) -> type:
        return type_

    def is_immutable_value_type(self, type_: type) -> bool:
        if type_ in self._immutable_types:
            return True
        return isinstance(type_, type) and issubclass(type_, enum.Enum)
