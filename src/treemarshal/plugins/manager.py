"""Utility functions to manage the project-wide hook configuration."""

from __future__ import annotations

import logging
from inspect import isclass
from typing import Any

from pluggy import PluginManager

from treemarshal.plugins.hooks.markers import HOOK_NAMESPACE
from treemarshal.plugins.hooks.specs import EngineSpec

logger = logging.getLogger(__name__)

_PLUGIN_ENTRY_POINT = "treemarshal.plugins"  # entry-point to load hooks from for installed plugins
_PLUGIN_MANAGER: PluginManager | None = None


# region API


def register_hooks(*hooks: Any) -> None:
    """Register treemarshal hooks with the global plugin manager."""
    hook_manager = _get_global_plugin_manager()
    for hooks_collection in hooks:
        if not hook_manager.is_registered(hooks_collection):
            _check_instance(hooks_collection)
            hook_manager.register(hooks_collection)


def register_plugins_entry_points(_plugin_manager: PluginManager | None = None) -> int:
    """
    Register treemarshal plugins from Python package entrypoints.

    Entry points already registered with the manager are skipped.

    Returns:
        The number of plugins loaded by this call.
    """
    _plugin_manager = _plugin_manager if _plugin_manager else _get_global_plugin_manager()
    count = _plugin_manager.load_setuptools_entrypoints(_PLUGIN_ENTRY_POINT)
    if count:
        logger.debug(f"Loaded {count} plugin(s) from entry point group '{_PLUGIN_ENTRY_POINT}'")
    return count


def create_hook_manager_with_plugins(plugins: list[Any]) -> PluginManager:
    """
    Create a new hook manager with both global and engine-specific plugins.

    Used internally by Engine so that each engine can carry its own plugins on top of the globally
    registered ones.

    Args:
        plugins: Additional hook implementations to register.

    Returns:
        A new PluginManager with global + engine-specific hooks.
    """
    manager = _create_plugin_manager()

    global_manager = _get_global_plugin_manager()
    for plugin in global_manager.get_plugins():
        if not manager.is_registered(plugin):  # pragma: no branch
            manager.register(plugin)

    for plugin in plugins:
        if not manager.is_registered(plugin):  # pragma: no branch
            _check_instance(plugin)
            manager.register(plugin)

    return manager


def reset_global_plugin_manager() -> PluginManager:
    """Replace the global plugin manager with an empty one, dropping every global hook."""
    return _initialize_plugin_system()


# region Helpers


def _initialize_plugin_system() -> PluginManager:
    """Initializes hooks for the treemarshal library."""
    manager = _create_plugin_manager()
    global _PLUGIN_MANAGER
    _PLUGIN_MANAGER = manager
    return manager


def _get_global_plugin_manager() -> PluginManager:
    """Returns initialized global plugin manager."""
    plugin_manager = _PLUGIN_MANAGER
    if plugin_manager is None:
        plugin_manager = _initialize_plugin_system()
    return plugin_manager


def _create_plugin_manager() -> PluginManager:
    """Create a new PluginManager instance and register treemarshal's hook specs."""
    manager = PluginManager(HOOK_NAMESPACE)
    manager.trace.root.setwriter(
        logger.debug if logger.getEffectiveLevel() == logging.DEBUG else None
    )
    manager.enable_tracing()
    manager.add_hookspecs(EngineSpec)
    return manager


def _check_instance(plugin: Any) -> None:
    if isclass(plugin):
        raise TypeError(
            "treemarshal expects hooks to be registered as instances. "
            "Have you forgotten the `()` when registering a hook class?"
        )
