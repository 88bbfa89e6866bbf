"""Names of the events emitted by skelevents itself."""

REGISTER_LISTENER = "RegisterListener"
"""Emitted by a registry after a listener has been added."""

REMOVE_LISTENER = "RemoveListener"
"""Emitted by a registry after a listener has been removed."""

CONFIG_CHANGED = "ConfigChanged"
"""Emitted by a `Context` when one of its strings changes."""
