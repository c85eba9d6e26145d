from __future__ import annotations

import threading
from dataclasses import dataclass

_GLOBAL_TREEMARSHAL_SETTINGS: TreeMarshalSettings | None = None
_SETTINGS_LOCK = threading.RLock()


@dataclass(frozen=True)
class TreeMarshalSettings:
    """Configuration settings for treemarshal."""

    legacy_version_marker: str = "0.2"
    """
    Version tag attached to "old data" notifications.

    Names the last release that wrote nested type names with the legacy separator.
    """

    load_entry_points: bool = True
    """Whether new engines load plugins from the ``treemarshal.plugins`` entry point group."""

    indent: str | None = "  "
    """
    Indentation used when rendering documents.

    If None, documents are written on a single line.
    """


def get_global_settings() -> TreeMarshalSettings:
    """
    Get the global treemarshal settings instance (thread-safe).

    If no global settings have been set, returns a default instance.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_TREEMARSHAL_SETTINGS
        if _GLOBAL_TREEMARSHAL_SETTINGS is None:
            _GLOBAL_TREEMARSHAL_SETTINGS = TreeMarshalSettings()
        return _GLOBAL_TREEMARSHAL_SETTINGS


def set_global_settings(settings: TreeMarshalSettings) -> None:
    """
    Set the global treemarshal settings instance (thread-safe).

    Note: Engines read the global settings when they are constructed. Engines created
    before this call keep the settings they were built with.

    Args:
        settings (TreeMarshalSettings): Settings to set as global.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_TREEMARSHAL_SETTINGS
        _GLOBAL_TREEMARSHAL_SETTINGS = settings
