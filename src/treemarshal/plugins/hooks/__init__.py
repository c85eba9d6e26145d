from treemarshal.plugins.hooks.markers import HOOK_NAMESPACE
from treemarshal.plugins.hooks.markers import hook_impl
from treemarshal.plugins.hooks.markers import hook_spec

__all__ = [
    "HOOK_NAMESPACE",
    "hook_impl",
    "hook_spec",
]
