"""Pluggy markers for skelevents hook specifications and implementations."""

import pluggy

HOOK_NAMESPACE = "skelevents"

hook_spec = pluggy.HookspecMarker(HOOK_NAMESPACE)
hook_impl = pluggy.HookimplMarker(HOOK_NAMESPACE)
