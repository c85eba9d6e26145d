"""Name normalization: writing families of subtypes under one canonical name."""

from __future__ import annotations

from treemarshal.mapper.base import Mapper
from treemarshal.mapper.base import MapperWrapper


class CanonicalNameMapper(MapperWrapper):
    """
    Writes every subclass of a canonical base under the base's own name.

    Used for types whose concrete subclasses are implementation details (e.g. ``FrozenDict``
    variants): the document records the family, and reading it back produces the base type.

    Args:
        wrapped: The next mapper in the chain.
        canonical_bases: Base classes whose subclasses are folded into them.
    """

    def __init__(self, wrapped: Mapper, canonical_bases: tuple[type, ...] = ()) -> None:
        super().__init__(wrapped)
        self._canonical_bases = canonical_bases

    def serialized_class(self, type_: type | None) -> str:
        if type_ is not None:
            for base in self._canonical_bases:
                if issubclass(type_, base):
                    return super().serialized_class(base)
        return super().serialized_class(type_)
