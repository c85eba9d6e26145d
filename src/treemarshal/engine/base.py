"""
Host engine: the reader/writer, mapper chain and converter lookup that converters run inside.

``BaseEngine`` is usable on its own for plain object trees. ``Engine`` builds on it with
compatibility resolution, per-type converters and plugin notifications.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from collections import OrderedDict
from collections import deque
from decimal import Decimal
from typing import Any

from treemarshal.context import MarshallingContext
from treemarshal.context import UnmarshallingContext
from treemarshal.converters.base import PRIORITY_NORMAL
from treemarshal.converters.base import PRIORITY_VERY_LOW
from treemarshal.converters.base import Converter
from treemarshal.converters.base import SingleValueConverter
from treemarshal.converters.basic import EnumConverter
from treemarshal.converters.basic import NullConverter
from treemarshal.converters.basic import TypeConverter
from treemarshal.converters.basic import scalar_converters
from treemarshal.converters.collections import CollectionConverter
from treemarshal.converters.collections import MapConverter
from treemarshal.converters.lookup import ConverterLookup
from treemarshal.converters.reflection import ReflectionConverter
from treemarshal.io.reader import TreeReader
from treemarshal.io.writer import TreeWriter
from treemarshal.mapper.base import DefaultMapper
from treemarshal.mapper.base import Mapper
from treemarshal.mapper.loader import TypeLoader
from treemarshal.settings import TreeMarshalSettings
from treemarshal.settings import get_global_settings

logger = logging.getLogger(__name__)

DEFAULT_ALIASES: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "bytes": bytes,
    "complex": complex,
    "decimal": Decimal,
    "uuid": uuid.UUID,
    "datetime": datetime.datetime,
    "date": datetime.date,
    "time": datetime.time,
    "type": type,
    "list": list,
    "tuple": tuple,
    "set": set,
    "frozenset": frozenset,
    "deque": deque,
    "dict": dict,
    "ordered-dict": OrderedDict,
}
"""Short element names of the built-in types."""

IMMUTABLE_TYPES: tuple[type, ...] = (str, int, float, bool, bytes, type(None))
"""Types written by value, never tracked by reference."""


class BaseEngine:
    """
    Converts object trees to and from XML documents.

    Examples:
        >>> engine = BaseEngine()
        >>> print(engine.to_xml([1, "two"]))
        <list id="1">
          <int>1</int>
          <str>two</str>
        </list>
        >>> engine.from_xml("<list><int>1</int><str>two</str></list>")
        [1, 'two']

    Args:
        loader: Type loader resolving type names that have no alias. Defaults to importing them.
        settings: Settings of this engine. Defaults to the global settings.
    """

    def __init__(
        self, loader: TypeLoader | None = None, settings: TreeMarshalSettings | None = None
    ) -> None:
        self.settings = settings if settings is not None else get_global_settings()
        self._lookup = ConverterLookup()
        self._default_mapper = DefaultMapper(loader)
        self.mapper: Mapper = self.wrap_mapper(self._default_mapper)

        for name, type_ in DEFAULT_ALIASES.items():
            self.alias(name, type_)
        for type_ in IMMUTABLE_TYPES:
            self.add_immutable_type(type_)

        self._reflection_converter = self.create_default_converter()
        self.register_converter(self._reflection_converter, PRIORITY_VERY_LOW)
        self.register_converter(NullConverter())
        for converter in scalar_converters():
            self.register_converter(converter)
        self.register_converter(EnumConverter())
        self.register_converter(TypeConverter())
        self.register_converter(CollectionConverter())
        self.register_converter(MapConverter())

    # region Setup

    def wrap_mapper(self, mapper: Mapper) -> Mapper:
        """Build the mapper chain around the default mapper. Called once, during construction."""
        return mapper

    def create_default_converter(self) -> Converter:
        """Build the structural converter used for types no other converter claims."""
        return ReflectionConverter(self.mapper)

    def register_converter(
        self, converter: Converter | SingleValueConverter, priority: int = PRIORITY_NORMAL
    ) -> None:
        self._lookup.register(converter, priority)

    def alias(self, name: str, type_: type) -> None:
        """Write ``type_`` under the element name ``name`` and read ``name`` back as ``type_``."""
        self._default_mapper.alias(name, type_)

    def add_immutable_type(self, type_: type) -> None:
        """Always write instances of ``type_`` by value, never as references."""
        self._default_mapper.add_immutable_type(type_)

    @property
    def lookup(self) -> ConverterLookup:
        return self._lookup

    @property
    def default_mapper(self) -> DefaultMapper:
        return self._default_mapper

    @property
    def reflection_converter(self) -> Converter:
        """The structural converter, for converters that delegate to it."""
        return self._reflection_converter

    # region Conversion

    def to_xml(self, obj: Any, data: dict[str, Any] | None = None) -> str:
        writer = TreeWriter()
        self.marshal(obj, writer, data)
        return writer.to_string(indent=self.settings.indent)

    def from_xml(
        self,
        text: str,
        root: Any = None,
        data: dict[str, Any] | None = None,
        loader: TypeLoader | None = None,
    ) -> Any:
        """
        Read an object back from an XML document.

        Args:
            text: The document.
            root: Existing object to populate instead of creating a new top-level object.
            data: Free-form values made available to converters.
            loader: Type loader for this call only.

        Raises:
            ConversionError: If the document cannot be read.
        """
        return self.unmarshal(TreeReader.from_string(text), root, data, loader)

    def marshal(self, obj: Any, writer: TreeWriter, data: dict[str, Any] | None = None) -> None:
        MarshallingContext(writer, self.mapper, self._lookup, data).start(obj)

    def unmarshal(
        self,
        reader: TreeReader,
        root: Any = None,
        data: dict[str, Any] | None = None,
        loader: TypeLoader | None = None,
    ) -> Any:
        context = UnmarshallingContext(reader, self.mapper, self._lookup, root, data, loader)
        return self.start_unmarshal(context)

    def start_unmarshal(self, context: UnmarshallingContext) -> Any:
        """Run a prepared unmarshalling context. Subclasses wrap this to act on the result."""
        return context.start()
