"""
Structural converters: reading and writing objects field by field.

``ReflectionConverter`` is the default converter of ``BaseEngine``. It creates instances with
``__new__`` (no ``__init__`` call), writes every instance attribute as a child node and sets them
back with ``object.__setattr__`` so that frozen dataclasses and slotted classes work too.

``RobustReflectionConverter`` is the schema-evolution tolerant variant installed by ``Engine``:
fields that no longer exist or cannot be read are skipped and recorded, and dataclass fields
missing from the document get their declared defaults.
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from typing_extensions import override

from treemarshal.collections import ConcurrentDict
from treemarshal.context import CLASS_ATTRIBUTE
from treemarshal.converters.base import Converter
from treemarshal.exceptions import ConversionError

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter
    from treemarshal.mapper.base import Mapper

logger = logging.getLogger(__name__)


def _slot_names(type_: type) -> list[str]:
    names: list[str] = []
    for klass in type_.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            if slot not in names:
                names.append(slot)
    return names


def _concrete_class(hint: Any) -> type | None:
    """The class an annotation designates, unwrapping ``X | None``; None for anything else."""
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) != 1:
            return None
        hint = args[0]
    if typing.get_origin(hint) is None and isinstance(hint, type):
        return hint
    return None


class ReflectionConverter(Converter):
    """
    Generic field-by-field converter.

    A field node gets a ``class`` attribute whenever the value's type differs from the field's
    annotation (or the field has none), so documents stay compact for well-annotated classes.
    Fields holding ``None`` are not written.

    Args:
        mapper: Mapper chain used for member names and ``class`` attributes.
    """

    def __init__(self, mapper: Mapper) -> None:
        self._mapper = mapper
        self._hints: ConcurrentDict[type, dict[str, type]] = ConcurrentDict()

    @override
    def can_convert(self, type_: type) -> bool:
        return isinstance(type_, type)

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        owner = type(source)
        hints = self.field_hints(owner)
        for name, value in self.fields(source):
            if value is None or not self._mapper.should_serialize_member(owner, name):
                continue
            with writer.node(self._mapper.serialized_member(owner, name)):
                if hints.get(name) is not type(value):
                    class_name = self._mapper.serialized_class(type(value))
                    writer.add_attribute(CLASS_ATTRIBUTE, class_name)
                context.convert_another(value)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        type_ = context.required_type
        instance = context.take_root(type_)
        if instance is None:
            instance = self.instantiate(type_)
        context.register_current(instance)

        hints = self.field_hints(type_)
        declared = self.declared_fields(type_)
        seen: set[str] = set()
        while reader.has_more_children():
            self.read_field(reader, context, instance, hints, declared, seen)
        self.complete(instance, seen)
        return instance

    def fields(self, source: Any) -> Iterator[tuple[str, Any]]:
        """Instance attributes of ``source``, in definition order."""
        instance_dict = getattr(source, "__dict__", None)
        if instance_dict is not None:
            yield from list(instance_dict.items())
        for slot in _slot_names(type(source)):
            try:
                yield slot, object.__getattribute__(source, slot)
            except AttributeError:
                continue

    def field_hints(self, type_: type) -> dict[str, type]:
        """Class-valued annotations of ``type_``, cached per type."""
        hints = self._hints.get(type_)
        if hints is None:
            try:
                raw = typing.get_type_hints(type_)
            except Exception as e:
                logger.debug(f"Ignoring unresolvable annotations of {type_!r}: {e}")
                raw = {}
            hints = {}
            for name, hint in raw.items():
                concrete = _concrete_class(hint)
                if concrete is not None:
                    hints[name] = concrete
            hints = self._hints.setdefault(type_, hints)
        return hints

    def declared_fields(self, type_: type) -> set[str] | None:
        """
        Names of the fields ``type_`` declares, or None when it accepts any attribute.

        Dataclasses declare their fields; slotted classes without ``__dict__`` declare their
        slots; any other class accepts whatever the document holds.
        """
        if dataclasses.is_dataclass(type_):
            return {f.name for f in dataclasses.fields(type_)} | set(_slot_names(type_))
        slots = _slot_names(type_)
        if slots and type_.__dictoffset__ == 0:
            return set(slots)
        return None

    def instantiate(self, type_: type) -> Any:
        try:
            return type_.__new__(type_)
        except TypeError as e:
            raise ConversionError(f"Cannot create an instance of {type_!r}: {e}") from e

    def read_field(
        self,
        reader: TreeReader,
        context: UnmarshallingContext,
        instance: Any,
        hints: dict[str, type],
        declared: set[str] | None,
        seen: set[str],
    ) -> None:
        owner = type(instance)
        with reader.child():
            name = self._mapper.real_member(owner, reader.node_name)
            if declared is not None and name not in declared:
                raise ConversionError(f"{owner.__qualname__} has no field '{name}'")
            value = context.convert_another(self.field_type(context, name, hints))
        object.__setattr__(instance, name, value)
        seen.add(name)

    def field_type(
        self, context: UnmarshallingContext, name: str, hints: dict[str, type]
    ) -> type:
        class_name = context.reader.attribute(CLASS_ATTRIBUTE)
        if class_name is not None:
            return self._mapper.real_class(class_name, context)
        hint = hints.get(name)
        if hint is None:
            raise ConversionError(f"Cannot determine the type of field '{name}'")
        return self._mapper.default_implementation_of(hint)

    def complete(self, instance: Any, seen: set[str]) -> None:
        """Called once all field nodes of ``instance`` have been read."""


class RobustReflectionConverter(ReflectionConverter):
    """Reflection converter that tolerates documents written for an older class layout."""

    @override
    def read_field(
        self,
        reader: TreeReader,
        context: UnmarshallingContext,
        instance: Any,
        hints: dict[str, type],
        declared: set[str] | None,
        seen: set[str],
    ) -> None:
        try:
            super().read_field(reader, context, instance, hints, declared, seen)
        except ConversionError as e:
            logger.warning(f"Skipping unreadable field of {type(instance).__qualname__}: {e}")
            context.add_error(e)

    @override
    def complete(self, instance: Any, seen: set[str]) -> None:
        owner = type(instance)
        if not dataclasses.is_dataclass(owner):
            return
        instance_dict = getattr(instance, "__dict__", None)
        for f in dataclasses.fields(owner):
            if f.name in seen:
                continue
            if instance_dict is not None:
                if f.name in instance_dict:
                    continue
            elif hasattr(instance, f.name):
                continue
            if f.default is not dataclasses.MISSING:
                object.__setattr__(instance, f.name, f.default)
            elif f.default_factory is not dataclasses.MISSING:
                object.__setattr__(instance, f.name, f.default_factory())
