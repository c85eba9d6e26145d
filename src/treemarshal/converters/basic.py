"""
Built-in converters for ``None``, scalars, enums and classes.

``BaseEngine`` registers all of these at normal priority.
"""

from __future__ import annotations

import base64
import datetime
import enum
import uuid
from collections.abc import Callable
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from typing_extensions import override

from treemarshal.converters.base import Converter
from treemarshal.converters.base import SingleValueConverter
from treemarshal.exceptions import ConversionError

if TYPE_CHECKING:
    from treemarshal.context import MarshallingContext
    from treemarshal.context import UnmarshallingContext
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter


class NullConverter(Converter):
    """Writes ``None`` as an empty node."""

    @override
    def can_convert(self, type_: type) -> bool:
        return type_ is type(None)

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        pass

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        return None


class ScalarConverter(SingleValueConverter):
    """
    Single-value converter for exactly one type, driven by a pair of functions.

    Subclasses of the type are not claimed: ``bool`` must not be picked up by the ``int``
    converter.

    Examples:
        >>> conv = ScalarConverter(int, str, int)
        >>> conv.to_string(42), conv.from_string("42")
        ('42', 42)
        >>> conv.can_convert(bool)
        False
    """

    def __init__(
        self,
        type_: type,
        to_string: Callable[[Any], str],
        from_string: Callable[[str], Any],
    ) -> None:
        self._type = type_
        self._to_string = to_string
        self._from_string = from_string

    @override
    def can_convert(self, type_: type) -> bool:
        return type_ is self._type

    @override
    def to_string(self, obj: Any) -> str:
        return self._to_string(obj)

    @override
    def from_string(self, text: str) -> Any:
        try:
            return self._from_string(text)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ConversionError(f"Invalid {self._type.__name__} value: {text!r}") from e

    def __repr__(self) -> str:
        return f"ScalarConverter({self._type.__name__})"


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValueError(text)


def _encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _decode_bytes(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


def scalar_converters() -> list[ScalarConverter]:
    """Converters for the scalar types every engine supports."""
    return [
        ScalarConverter(str, str, str),
        ScalarConverter(int, str, int),
        ScalarConverter(float, repr, float),
        ScalarConverter(bool, lambda b: "true" if b else "false", _parse_bool),
        ScalarConverter(bytes, _encode_bytes, _decode_bytes),
        ScalarConverter(complex, repr, lambda text: complex(text.strip("()"))),
        ScalarConverter(Decimal, str, Decimal),
        ScalarConverter(uuid.UUID, str, uuid.UUID),
        ScalarConverter(
            datetime.datetime, datetime.datetime.isoformat, datetime.datetime.fromisoformat
        ),
        ScalarConverter(datetime.date, datetime.date.isoformat, datetime.date.fromisoformat),
        ScalarConverter(datetime.time, datetime.time.isoformat, datetime.time.fromisoformat),
    ]


class EnumConverter(Converter):
    """Writes enum members by name."""

    @override
    def can_convert(self, type_: type) -> bool:
        return isinstance(type_, type) and issubclass(type_, enum.Enum)

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        writer.set_value(source.name)

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        enum_type = context.required_type
        try:
            return enum_type[reader.value]
        except KeyError:
            raise ConversionError(
                f"'{reader.value}' is not a member of {enum_type.__name__}"
            ) from None


class TypeConverter(Converter):
    """Writes class objects by their mapped name."""

    @override
    def can_convert(self, type_: type) -> bool:
        return type_ is type

    @override
    def marshal(self, source: Any, writer: TreeWriter, context: MarshallingContext) -> None:
        writer.set_value(context.mapper.serialized_class(source))

    @override
    def unmarshal(self, reader: TreeReader, context: UnmarshallingContext) -> Any:
        return context.mapper.real_class(reader.value, context)
