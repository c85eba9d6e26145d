"""
Reusable test plugins for treemarshal tests.

These plugins record what the engine tells them so that tests can assert on it. For the plugin
meant for real use, see ``treemarshal.plugins.default.OldDataMonitor``.
"""

from __future__ import annotations

from typing import Any

from treemarshal.plugins import hook_impl


class RecordingPlugin:
    """
    Records every notification hook call.

    Usage:
        recorder = RecordingPlugin()
        engine = Engine(plugins=[recorder])
        engine.from_xml(legacy_text)
        assert len(recorder.old_data) == 1
    """

    def __init__(self):
        self.configured = []
        self.old_data = []
        self.unreadable = []

    @hook_impl
    def treemarshal_configure_engine(self, engine):
        self.configured.append(engine)

    @hook_impl
    def treemarshal_old_data(self, obj, version):
        self.old_data.append((obj, version))

    @hook_impl
    def treemarshal_unreadable_data(self, obj, errors):
        self.unreadable.append((obj, list(errors)))


class RenamedTypesPlugin:
    """
    Serves type names from a fixed table through ``treemarshal_resolve_type``.

    Usage:
        plugin = RenamedTypesPlugin({"old.Job": Job})
        engine = Engine(plugins=[plugin])
    """

    def __init__(self, names: dict[str, type]):
        self.names = names
        self.requests = []

    @hook_impl
    def treemarshal_resolve_type(self, name: str) -> Any:
        self.requests.append(name)
        return self.names.get(name)


class AliasingPlugin:
    """Adds compatibility aliases to every engine it is registered with."""

    def __init__(self, aliases: dict[str, type]):
        self.aliases = aliases

    @hook_impl
    def treemarshal_configure_engine(self, engine):
        for name, type_ in self.aliases.items():
            engine.add_compatibility_alias(name, type_)
