"""
Class decorators that configure how a class is written, and the mapper layer that applies them.

Markers are stored on the decorated class itself and picked up lazily by ``MarkerMapper`` the
first time the class goes through the mapper chain, so a class can be decorated before any engine
exists:

    >>> @alias("build-job")
    ... @omit_fields("cache")
    ... class BuildJob:
    ...     pass
    >>> BuildJob.__treemarshal_alias__
    'build-job'
    >>> BuildJob.__treemarshal_omit__
    frozenset({'cache'})

A class is processed once per engine. Names defined by ``alias`` only resolve on read after the
class has been processed; ``Engine.process_markers`` does that eagerly for classes that may be
read before they are ever written.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from typing_extensions import override

from treemarshal.collections import ConcurrentDict
from treemarshal.converters.base import PRIORITY_NORMAL
from treemarshal.converters.base import Converter
from treemarshal.converters.base import SingleValueConverter
from treemarshal.converters.base import SingleValueConverterWrapper
from treemarshal.exceptions import MalformedConverterDefinitionError
from treemarshal.mapper.base import DefaultMapper
from treemarshal.mapper.base import Mapper
from treemarshal.mapper.base import MapperWrapper

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.engine.base import BaseEngine
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter

logger = logging.getLogger(__name__)

ALIAS_MARKER = "__treemarshal_alias__"
CONVERTER_MARKER = "__treemarshal_converter__"
OMIT_MARKER = "__treemarshal_omit__"

C = TypeVar("C", bound=type)


# region Decorators


def alias(name: str) -> Callable[[C], C]:
    """Write the decorated class under ``name`` instead of its qualified name."""

    def decorator(cls: C) -> C:
        setattr(cls, ALIAS_MARKER, name)
        return cls

    return decorator


def use_converter(
    factory: Callable[..., Any], priority: int = PRIORITY_NORMAL
) -> Callable[[C], C]:
    """
    Convert the decorated class (and only that class) with the converter ``factory`` builds.

    The factory is instantiated like an associated converter: its constructor may ask for the
    engine and the mapper.
    """

    def decorator(cls: C) -> C:
        setattr(cls, CONVERTER_MARKER, (factory, priority))
        return cls

    return decorator


def omit_fields(*names: str) -> Callable[[C], C]:
    """Never write the given fields of the decorated class (or its subclasses)."""

    def decorator(cls: C) -> C:
        setattr(cls, OMIT_MARKER, frozenset(names))
        return cls

    return decorator


# region Mapper


class TypeBoundConverter(Converter):
    """Restricts a converter to exactly one class."""

    def __init__(self, type_: type, converter: Converter) -> None:
        self._type = type_
        self._converter = converter

    @override
    def can_convert(self, type_: type) -> bool:
        return type_ is self._type

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        self._converter.marshal(source, writer, context)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        return self._converter.unmarshal(reader, context)

    def __repr__(self) -> str:
        return f"TypeBoundConverter({self._type.__qualname__}, {self._converter!r})"


class MarkerMapper(MapperWrapper):
    """
    Applies the markers of every class passing through the mapper chain.

    Args:
        wrapped: The next mapper in the chain.
        engine: Engine that receives the converters declared with ``use_converter``.
    """

    def __init__(self, wrapped: Mapper, engine: BaseEngine) -> None:
        super().__init__(wrapped)
        self._engine = engine
        self._processed: ConcurrentDict[type, bool] = ConcurrentDict()
        self._lock = threading.RLock()

    def process(self, *types: type) -> None:
        """Apply the markers of ``types`` now rather than on first use."""
        for type_ in types:
            self._process(type_)

    @override
    def serialized_class(self, type_: type | None) -> str:
        self._process(type_)
        return super().serialized_class(type_)

    @override
    def real_class(self, name: str, context: UnmarshallingContext | None = None) -> type:
        type_ = super().real_class(name, context)
        self._process(type_)
        return type_

    @override
    def should_serialize_member(self, owner: type, member: str) -> bool:
        self._process(owner)
        for klass in owner.__mro__:
            if member in vars(klass).get(OMIT_MARKER, ()):
                return False
        return super().should_serialize_member(owner, member)

    @override
    def default_implementation_of(self, type_: type) -> type:
        self._process(type_)
        return super().default_implementation_of(type_)

    @override
    def is_immutable_value_type(self, type_: type) -> bool:
        self._process(type_)
        return super().is_immutable_value_type(type_)

    def _process(self, type_: type | None) -> None:
        if not isinstance(type_, type) or type_ in self._processed:
            return
        with self._lock:
            if type_ in self._processed:
                return
            # Marked first so that converters asking for the mapper cannot recurse into here
            self._processed[type_] = True
            own = vars(type_)

            name = own.get(ALIAS_MARKER)
            if name is not None:
                default = self.lookup_mapper(DefaultMapper)
                if default is not None:
                    logger.debug(f"Aliasing {type_!r} as '{name}'")
                    default.alias(name, type_)

            spec = own.get(CONVERTER_MARKER)
            if spec is not None:
                self._register_converter(type_, *spec)

    def _register_converter(self, type_: type, factory: Callable[..., Any], priority: int) -> None:
        # Deferred: the converters package imports this module's package
        from treemarshal.converters.associated import instantiate_converter

        converter = instantiate_converter(factory, self._engine)
        if isinstance(converter, SingleValueConverter):
            converter = SingleValueConverterWrapper(converter)
        elif not isinstance(converter, Converter):
            raise MalformedConverterDefinitionError(
                f"{factory!r} declared for {type_!r} did not produce a converter"
            )
        logger.debug(f"Registering marker converter {converter!r} for {type_!r}")
        self._engine.register_converter(TypeBoundConverter(type_, converter), priority)
