from skelevents.plugins.default import LoggingPlugin

from .hooks.markers import hook_impl
from .manager import register_plugins
from .manager import unregister_plugins

__all__ = [
    "hook_impl",
    "LoggingPlugin",
    "register_plugins",
    "unregister_plugins",
]
