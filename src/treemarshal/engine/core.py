"""
The full engine: compatibility resolution, per-type converters, markers and plugins.

Compared to ``BaseEngine``, an ``Engine``

* reads documents written by older releases: compatibility aliases map retired type names to
  current classes, and names written with the legacy nested-class separator still resolve;
* tolerates documents written for an older class layout (see ``RobustReflectionConverter``);
* finds per-type converters declared next to the types themselves (see ``AssociatedConverter``);
* applies the class decorators of ``treemarshal.mapper.markers``;
* tells plugins about objects read from outdated or partly unreadable documents, so that they
  can be saved again in the current format.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from decimal import Decimal
from inspect import isclass
from typing import Any

from pluggy import PluginManager
from typing_extensions import override

from treemarshal.collections import ConcurrentDict
from treemarshal.collections import FrozenDict
from treemarshal.compat.aliases import AliasTable
from treemarshal.compat.mapper import CompatibilityMapper
from treemarshal.context import UnmarshallingContext
from treemarshal.converters.associated import AssociatedConverter
from treemarshal.converters.base import PRIORITY_LOW
from treemarshal.converters.base import PRIORITY_ROBUST
from treemarshal.converters.base import Converter
from treemarshal.converters.collections import ConcurrentDictConverter
from treemarshal.converters.collections import FrozenDictConverter
from treemarshal.converters.collections import RobustCollectionConverter
from treemarshal.converters.collections import RobustMapConverter
from treemarshal.converters.reflection import RobustReflectionConverter
from treemarshal.engine.base import BaseEngine
from treemarshal.mapper.base import Mapper
from treemarshal.mapper.canonical import CanonicalNameMapper
from treemarshal.mapper.loader import ExtensionTypeLoader
from treemarshal.mapper.loader import TypeLoader
from treemarshal.mapper.markers import MarkerMapper
from treemarshal.plugins.manager import create_hook_manager_with_plugins
from treemarshal.plugins.manager import register_plugins_entry_points
from treemarshal.settings import TreeMarshalSettings
from treemarshal.settings import get_global_settings

logger = logging.getLogger(__name__)

VALUE_TYPES: tuple[type, ...] = (
    Decimal,
    uuid.UUID,
    complex,
    datetime.datetime,
    datetime.date,
    datetime.time,
)
"""Immutable types written by value in addition to those of ``BaseEngine``."""


class Engine(BaseEngine):
    """
    Engine with compatibility support for documents written by older releases.

    Examples:
        >>> engine = Engine(plugins=[])
        >>> engine.from_xml("<frozen-dict><entry><str>a</str><int>1</int></entry></frozen-dict>")
        FrozenDict({'a': 1})

    Args:
        loader: Type loader for names without an alias. Defaults to asking plugins through
            ``treemarshal_resolve_type``, then importing.
        settings: Settings of this engine. Defaults to the global settings.
        plugins: Plugins for this engine only, on top of the globally registered ones.
    """

    def __init__(
        self,
        loader: TypeLoader | None = None,
        settings: TreeMarshalSettings | None = None,
        plugins: list[Any] | None = None,
    ) -> None:
        settings = settings if settings is not None else get_global_settings()
        if settings.load_entry_points:
            register_plugins_entry_points()
        self._plugin_manager = create_hook_manager_with_plugins(plugins or [])
        self._aliases = AliasTable()
        if loader is None:
            loader = ExtensionTypeLoader(self._plugin_manager)

        super().__init__(loader=loader, settings=settings)

        for type_ in VALUE_TYPES:
            self.add_immutable_type(type_)
        self.alias("frozen-dict", FrozenDict)
        self.alias("concurrent-dict", ConcurrentDict)

        self.register_converter(RobustCollectionConverter(), PRIORITY_ROBUST)
        self.register_converter(RobustMapConverter(), PRIORITY_ROBUST)
        self.register_converter(FrozenDictConverter(), PRIORITY_ROBUST)
        self.register_converter(ConcurrentDictConverter(), PRIORITY_ROBUST)

        # Last, so that it only sees types no explicit converter claims
        self._associated_converter = AssociatedConverter(self)
        self.register_converter(self._associated_converter, PRIORITY_LOW)

        self._plugin_manager.hook.treemarshal_configure_engine.call_historic(
            kwargs={"engine": self}
        )

    # region Setup

    @override
    def wrap_mapper(self, mapper: Mapper) -> Mapper:
        mapper = CanonicalNameMapper(mapper, canonical_bases=(FrozenDict,))
        mapper = CompatibilityMapper(mapper, self._aliases)
        return MarkerMapper(mapper, self)

    @override
    def create_default_converter(self) -> Converter:
        return RobustReflectionConverter(self.mapper)

    def add_compatibility_alias(self, name: str, type_: type) -> None:
        """
        Read the element name ``name`` as ``type_``.

        Unlike ``alias``, this only affects reading: documents keep being written under the
        type's current name. Meant for names of types that were renamed or moved.
        """
        self._aliases.add(name, type_)

    def process_markers(self, *types: type) -> None:
        """Apply the marker decorators of ``types`` now, e.g. so their aliases can be read."""
        marker_mapper = self.mapper.lookup_mapper(MarkerMapper)
        if marker_mapper is not None:
            marker_mapper.process(*types)

    def register_plugin(self, plugin: Any) -> None:
        """Register a plugin with this engine only."""
        if isclass(plugin):
            raise TypeError(
                "treemarshal expects plugins to be registered as instances. "
                "Have you forgotten the `()` when registering a plugin class?"
            )
        if not self._plugin_manager.is_registered(plugin):
            self._plugin_manager.register(plugin)

    @property
    def aliases(self) -> AliasTable:
        return self._aliases

    @property
    def associated_converter(self) -> AssociatedConverter:
        return self._associated_converter

    @property
    def plugin_manager(self) -> PluginManager:
        return self._plugin_manager

    # region Conversion

    @override
    def start_unmarshal(self, context: UnmarshallingContext) -> Any:
        try:
            obj = super().start_unmarshal(context)
            legacy_format = context.legacy_format
        finally:
            context.pop_legacy_format()

        if legacy_format:
            version = self.settings.legacy_version_marker
            logger.info(
                f"Read {type(obj).__qualname__} from a document in the format of version "
                f"{version} or earlier"
            )
            self._plugin_manager.hook.treemarshal_old_data(obj=obj, version=version)
        if context.errors:
            self._plugin_manager.hook.treemarshal_unreadable_data(
                obj=obj, errors=list(context.errors)
            )
        return obj
