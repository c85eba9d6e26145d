"""
Per-type converters found without explicit engine registration.

A class gets its own converter in one of two ways:

* statically, by registering a converter factory for it::

      @converter_for(Job)
      class JobConverter(Converter): ...

* by convention, by defining a nested class called ``ConverterImpl``::

      class Job:
          class ConverterImpl(PassthroughConverter["Job"]):
              def callback(self, obj, context): ...

The registry is consulted first. The nested class is looked up in the type's own namespace (never
inherited from a base class), so types defined by plugins find their converters in their own
module, independent of the engine's type loader.

Factories may take the engine and/or the mapper as constructor parameters, identified by their
annotation (``Engine``/``BaseEngine``/``Mapper``) or, when unannotated, by the parameter names
``engine`` and ``mapper``. Anything else is a malformed definition.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from typing_extensions import override

from treemarshal.collections import ConcurrentDict
from treemarshal.converters.base import Converter
from treemarshal.converters.base import SingleValueConverter
from treemarshal.converters.base import SingleValueConverterWrapper
from treemarshal.exceptions import ConverterInstantiationError
from treemarshal.exceptions import ConverterNotFoundError
from treemarshal.exceptions import MalformedConverterDefinitionError
from treemarshal.mapper.base import Mapper

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.engine.base import BaseEngine
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter

logger = logging.getLogger(__name__)

NESTED_CONVERTER_NAME = "ConverterImpl"

_ENGINE_ANNOTATIONS = ("Engine", "BaseEngine")
_MAPPER_ANNOTATIONS = ("Mapper",)

F = TypeVar("F", bound=Callable[..., Any])

# type -> converter factory, filled at import time by register_associated_converter()
_ASSOCIATED_CONVERTERS: ConcurrentDict[type, Callable[..., Any]] = ConcurrentDict()


# region API


def register_associated_converter(type_: type, factory: Callable[..., Any]) -> None:
    """
    Register ``factory`` as the converter factory of ``type_``.

    Engines pick the registration up the first time they convert ``type_``. Registering after an
    engine has already looked ``type_`` up has no effect on that engine.
    """
    _ASSOCIATED_CONVERTERS[type_] = factory


def converter_for(type_: type) -> Callable[[F], F]:
    """Class decorator form of ``register_associated_converter``."""

    def decorator(factory: F) -> F:
        register_associated_converter(type_, factory)
        return factory

    return decorator


def instantiate_converter(factory: Callable[..., Any], engine: BaseEngine) -> Any:
    """
    Call ``factory`` with the engine collaborators its parameters ask for.

    Raises:
        MalformedConverterDefinitionError: If a parameter is neither the engine nor the mapper.
        ConverterInstantiationError: If the factory itself raises.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for param in _parameters(factory):
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        value = _collaborator(factory, param, engine)
        if param.kind is param.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[param.name] = value

    try:
        return factory(*args, **kwargs)
    except Exception as e:
        raise ConverterInstantiationError(f"Failed to instantiate {factory!r}: {e}") from e


# region Dispatcher


class ConverterCache:
    """
    One-shot memo of discovery results, ``type -> Converter | None``.

    ``None`` is a real, permanent entry meaning "this type has no converter of its own"; a type
    that was never looked up is simply absent. Entries are never replaced: when two threads
    race, the first stored result wins and both callers get it.
    """

    def __init__(self) -> None:
        self._entries: ConcurrentDict[type, Converter | None] = ConcurrentDict()

    def get(self, type_: type) -> Converter | None:
        """
        Return the stored result for ``type_``.

        Raises:
            KeyError: If ``type_`` has not been stored yet.
        """
        return self._entries[type_]

    def store(self, type_: type, converter: Converter | None) -> Converter | None:
        return self._entries.setdefault(type_, converter)

    def __contains__(self, type_: object) -> bool:
        return type_ in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class AssociatedConverter(Converter):
    """
    Dispatches to the converter a type carries for itself.

    Registered by ``Engine`` below all explicit converters and above the default structural
    converter, so it is only consulted for types nobody else claims.

    Args:
        engine: Engine passed to the discovered converters that ask for it.
    """

    def __init__(self, engine: BaseEngine) -> None:
        self._engine = engine
        self._cache = ConverterCache()

    @property
    def cache(self) -> ConverterCache:
        return self._cache

    @override
    def can_convert(self, type_: type) -> bool:
        return self.find_converter(type_) is not None

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        self._require(type(source)).marshal(source, writer, context)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        return self._require(context.required_type).unmarshal(reader, context)

    def find_converter(self, type_: type | None) -> Converter | None:
        """Return the associated converter of ``type_``, or None if it has none."""
        if type_ is None:
            return None
        try:
            return self._cache.get(type_)
        except KeyError:
            pass

        if getattr(type_, "__module__", None) == "builtins":
            return None

        # Failures propagate without caching; the next lookup discovers again
        return self._cache.store(type_, self._discover(type_))

    def _discover(self, type_: type) -> Converter | None:
        factory = _ASSOCIATED_CONVERTERS.get(type_)
        if factory is None:
            factory = vars(type_).get(NESTED_CONVERTER_NAME)
        if factory is None:
            logger.debug(f"No associated converter for {type_!r}")
            return None

        converter = instantiate_converter(factory, self._engine)
        if isinstance(converter, SingleValueConverter):
            converter = SingleValueConverterWrapper(converter)
        elif not isinstance(converter, Converter):
            raise MalformedConverterDefinitionError(
                f"{factory!r} associated with {type_!r} did not produce a converter"
            )
        logger.debug(f"Associated converter for {type_!r}: {converter!r}")
        return converter

    def _require(self, type_: type) -> Converter:
        converter = self.find_converter(type_)
        if converter is None:
            raise ConverterNotFoundError(f"No associated converter for {type_!r}")
        return converter


# region Helpers


def _parameters(factory: Callable[..., Any]) -> list[inspect.Parameter]:
    try:
        try:
            signature = inspect.signature(factory, eval_str=True)
        except (NameError, AttributeError):
            # Annotations naming imports that only exist under TYPE_CHECKING; match them by name
            signature = inspect.signature(factory)
    except (TypeError, ValueError) as e:
        raise MalformedConverterDefinitionError(
            f"Cannot inspect the constructor of {factory!r}: {e}"
        ) from e
    return list(signature.parameters.values())


def _collaborator(factory: Callable[..., Any], param: inspect.Parameter, engine: BaseEngine) -> Any:
    from treemarshal.engine.base import BaseEngine

    annotation = param.annotation
    if annotation is inspect.Parameter.empty:
        if param.name == "engine":
            return engine
        if param.name == "mapper":
            return engine.mapper
    elif isinstance(annotation, str):
        short_name = annotation.rsplit(".", 1)[-1]
        if short_name in _ENGINE_ANNOTATIONS:
            return engine
        if short_name in _MAPPER_ANNOTATIONS:
            return engine.mapper
    elif isinstance(annotation, type):
        if issubclass(annotation, BaseEngine) and isinstance(engine, annotation):
            return engine
        if issubclass(annotation, Mapper) and isinstance(engine.mapper, annotation):
            return engine.mapper

    raise MalformedConverterDefinitionError(
        f"Unrecognized constructor parameter '{param.name}: {_describe(annotation)}' "
        f"of {factory!r}; only the engine and the mapper can be injected"
    )


def _describe(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return "<unannotated>"
    return getattr(annotation, "__qualname__", str(annotation))
