"""
Compatibility resolution of element names.

Releases up to the one named by ``TreeMarshalSettings.legacy_version_marker`` wrote the nested
class separator ``$`` as a bare ``-`` in element names, where current releases write ``_-``. The
reader decodes ``_-`` but leaves ``-`` alone, so legacy names reach the mapper chain looking like
``app.models.Job-Config``.

Substituting ``-`` unconditionally would corrupt names that legitimately contain it (aliases such
as ``ordered-dict``), so the substitution is only tried once ordinary resolution has failed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from treemarshal.compat.aliases import AliasTable
from treemarshal.exceptions import TypeResolutionError
from treemarshal.io.naming import LEGACY_NESTED_SEPARATOR
from treemarshal.io.naming import NESTED_SEPARATOR
from treemarshal.mapper.base import Mapper
from treemarshal.mapper.base import MapperWrapper

if TYPE_CHECKING:
    from treemarshal.context import UnmarshallingContext

logger = logging.getLogger(__name__)


class CompatibilityMapper(MapperWrapper):
    """
    Resolves element names through compatibility aliases and the legacy-encoding fallback.

    Resolution order:

    1. A compatibility alias, which wins even over a name that would resolve by itself.
    2. The wrapped mapper chain.
    3. If that fails and the name contains ``-``, the wrapped chain again with ``-`` replaced by
       ``$``. Success marks the unmarshalling context as having read legacy data.
    4. Otherwise the error from step 2 is raised, since it names what the document contains.

    Args:
        wrapped: The next mapper in the chain.
        aliases: Table of compatibility aliases, shared with the engine.
    """

    def __init__(self, wrapped: Mapper, aliases: AliasTable) -> None:
        super().__init__(wrapped)
        self._aliases = aliases

    def real_class(self, name: str, context: UnmarshallingContext | None = None) -> type:
        aliased = self._aliases.get(name)
        if aliased is not None:
            return aliased

        try:
            return super().real_class(name, context)
        except TypeResolutionError as e:
            if LEGACY_NESTED_SEPARATOR in name:
                legacy_name = name.replace(LEGACY_NESTED_SEPARATOR, NESTED_SEPARATOR)
                try:
                    type_ = super().real_class(legacy_name, context)
                except TypeResolutionError:
                    pass
                else:
                    logger.debug(f"Resolved legacy element name '{name}' as '{legacy_name}'")
                    if context is not None:
                        context.flag_legacy_format()
                    return type_
            raise e
