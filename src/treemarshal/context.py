"""
Per-call state for marshalling and unmarshalling.

A fresh context is created for every top-level ``marshal``/``unmarshal`` call and passed to every
converter involved. Nothing in a context is shared between calls, which is what keeps
per-call signals (reference ids, read errors, the legacy-format flag) isolated between threads and
between nested calls on the same thread.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

from treemarshal.exceptions import ConversionError
from treemarshal.exceptions import UnresolvedReferenceError

if TYPE_CHECKING:
    from treemarshal.converters.base import Converter
    from treemarshal.converters.lookup import ConverterLookup
    from treemarshal.io.reader import TreeReader
    from treemarshal.io.writer import TreeWriter
    from treemarshal.mapper.base import Mapper
    from treemarshal.mapper.loader import TypeLoader

ID_ATTRIBUTE = "id"
REFERENCE_ATTRIBUTE = "reference"
CLASS_ATTRIBUTE = "class"


class MarshallingContext:
    """
    State of one marshal call.

    Objects that are not value types are tracked by identity: the first occurrence is written
    with an ``id`` attribute, later occurrences as an empty node carrying ``reference``.
    """

    def __init__(
        self,
        writer: TreeWriter,
        mapper: Mapper,
        lookup: ConverterLookup,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.writer = writer
        self.mapper = mapper
        self.data: dict[str, Any] = data if data is not None else {}
        self._lookup = lookup
        self._ids: dict[int, str] = {}
        self._keepalive: list[Any] = []
        self._counter = itertools.count(1)

    def start(self, obj: Any) -> None:
        """Write ``obj`` as the document root."""
        with self.writer.node(self.mapper.serialized_class(type(obj))):
            self.convert_another(obj)

    def convert_another(self, obj: Any, converter: Converter | None = None) -> None:
        """Write ``obj`` into the current node, using ``converter`` or the one looked up."""
        type_ = type(obj)
        if obj is not None and not self.mapper.is_immutable_value_type(type_):
            reference = self._ids.get(id(obj))
            if reference is not None:
                self.writer.add_attribute(REFERENCE_ATTRIBUTE, reference)
                return
            reference = str(next(self._counter))
            self._ids[id(obj)] = reference
            # ids are only unique while the object is alive
            self._keepalive.append(obj)
            self.writer.add_attribute(ID_ATTRIBUTE, reference)

        if converter is None:
            converter = self._lookup.lookup(type_)
        converter.marshal(obj, self.writer, self)

    def write_item(self, item: Any) -> None:
        """Write ``item`` as a child node named after its type."""
        with self.writer.node(self.mapper.serialized_class(type(item))):
            self.convert_another(item)


class UnmarshallingContext:
    """
    State of one unmarshal call.

    Besides reference bookkeeping, the context carries two per-call signals:

    * ``legacy_format``: set by the compatibility resolver when a name only resolved through the
      legacy-encoding fallback.
    * ``errors``: problems that tolerant converters skipped over.

    Args:
        reader: Reader positioned on the document root.
        mapper: Mapper chain of the engine.
        lookup: Converter lookup of the engine.
        root: Existing object to populate instead of creating the top-level object.
        data: Free-form values made available to converters.
        loader: Type loader for this call, overriding the mapper's own.
    """

    def __init__(
        self,
        reader: TreeReader,
        mapper: Mapper,
        lookup: ConverterLookup,
        root: Any = None,
        data: dict[str, Any] | None = None,
        loader: TypeLoader | None = None,
    ) -> None:
        self.reader = reader
        self.mapper = mapper
        self.data: dict[str, Any] = data if data is not None else {}
        self.loader = loader
        self.legacy_format = False
        self.errors: list[ConversionError] = []
        self._lookup = lookup
        self._root = root
        self._objects: dict[str, Any] = {}
        self._types: list[type] = []
        self._pending_ids: list[str | None] = []

    @property
    def required_type(self) -> type:
        """Type of the object currently being reconstructed."""
        if not self._types:
            raise ConversionError("No conversion in progress")
        return self._types[-1]

    def flag_legacy_format(self) -> None:
        self.legacy_format = True

    def pop_legacy_format(self) -> bool:
        """Return the legacy-format flag and clear it."""
        flag = self.legacy_format
        self.legacy_format = False
        return flag

    def add_error(self, error: ConversionError) -> None:
        self.errors.append(error)

    def take_root(self, type_: type) -> Any:
        """
        Hand out the caller-supplied root object, once, to the top-level conversion.

        Returns None when there is no root, when called below the top level or when the root is
        not an instance of ``type_``.
        """
        root = self._root
        if root is None or len(self._types) != 1 or not isinstance(root, type_):
            return None
        self._root = None
        return root

    def read_type(self) -> type:
        """Type of the current node: its ``class`` attribute if present, else its name."""
        class_name = self.reader.attribute(CLASS_ATTRIBUTE)
        if class_name is not None:
            return self.mapper.real_class(class_name, self)
        return self.mapper.real_class(self.reader.node_name, self)

    def start(self) -> Any:
        """Read the document root."""
        return self.convert_another(self.read_type())

    def convert_another(self, type_: type, converter: Converter | None = None) -> Any:
        """Reconstruct an instance of ``type_`` from the current node."""
        reference = self.reader.attribute(REFERENCE_ATTRIBUTE)
        if reference is not None:
            try:
                return self._objects[reference]
            except KeyError:
                raise UnresolvedReferenceError(
                    f"Reference to undefined id '{reference}' in {self.reader!r}"
                ) from None

        if converter is None:
            converter = self._lookup.lookup(type_)

        self._types.append(type_)
        self._pending_ids.append(self.reader.attribute(ID_ATTRIBUTE))
        try:
            result = converter.unmarshal(self.reader, self)
        finally:
            pending = self._pending_ids.pop()
            self._types.pop()

        if pending is not None:
            self._objects[pending] = result
        return result

    def register_current(self, obj: Any) -> None:
        """
        Make the object under construction available to references before it is complete.

        Converters call this right after creating an instance and before reading its children,
        so that cyclic references back to it can be resolved.
        """
        if self._pending_ids and self._pending_ids[-1] is not None:
            self._objects[self._pending_ids[-1]] = obj

    def read_item(self) -> Any:
        """Read the next child node as a standalone value."""
        with self.reader.child():
            return self.convert_another(self.read_type())
