from treemarshal.plugins.default import OldDataMonitor
from treemarshal.plugins.default import OldDataReport
from treemarshal.plugins.hooks.markers import hook_impl
from treemarshal.plugins.manager import register_hooks

__all__ = [
    "hook_impl",
    "register_hooks",
    "OldDataMonitor",
    "OldDataReport",
]
