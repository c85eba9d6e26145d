"""Hook markers for the treemarshal plugin system."""

import pluggy

HOOK_NAMESPACE = "treemarshal"

hook_spec = pluggy.HookspecMarker(HOOK_NAMESPACE)
hook_impl = pluggy.HookimplMarker(HOOK_NAMESPACE)
