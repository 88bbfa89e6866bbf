"""Utility functions to manage the project-wide plugin configuration."""

import logging
from inspect import isclass
from typing import Any

from pluggy import PluginManager

from .hooks.markers import HOOK_NAMESPACE
from .hooks.specs import RegistrySpec

logger = logging.getLogger(__name__)

_PLUGIN_ENTRY_POINT = "skelevents.plugins"  # entry-point to load plugins from installed packages
_PLUGIN_MANAGER: PluginManager | None = None


# region API


def register_plugins(*plugins: Any) -> None:
    """Register skelevents plugins globally, for every registry."""
    plugin_manager = _get_global_plugin_manager()
    for plugin in plugins:
        if not plugin_manager.is_registered(plugin):
            _check_plugin_instance(plugin)
            plugin_manager.register(plugin)


def unregister_plugins(*plugins: Any) -> None:
    """Remove globally registered skelevents plugins. Unknown plugins are ignored."""
    plugin_manager = _get_global_plugin_manager()
    for plugin in plugins:
        if plugin_manager.is_registered(plugin):
            plugin_manager.unregister(plugin)


def register_plugins_entry_points(_plugin_manager: PluginManager | None = None) -> int:
    """
    Register skelevents plugins from Python package entrypoints.

    Returns:
        Number of plugins loaded.
    """
    _plugin_manager = _plugin_manager if _plugin_manager else _get_global_plugin_manager()
    return _plugin_manager.load_setuptools_entrypoints(_PLUGIN_ENTRY_POINT)  # Doesn't use setuptools


def create_hook_manager_with_plugins(plugins: list[Any]) -> PluginManager:
    """
    Create a new plugin manager with both global and registry-specific plugins.

    Used by `EventRegistry` to support per-registry plugins without touching the global manager.

    Args:
        plugins: Additional hook implementations to register.

    Returns:
        A new PluginManager with global + registry-specific plugins.
    """
    manager = _create_plugin_manager()

    global_manager = _get_global_plugin_manager()
    for plugin in global_manager.get_plugins():
        if not manager.is_registered(plugin):  # pragma: no branch
            manager.register(plugin)

    for plugin in plugins:
        if not manager.is_registered(plugin):
            _check_plugin_instance(plugin)
            manager.register(plugin)

    return manager


# region Helpers


def _initialize_plugin_system() -> PluginManager:
    """Initializes the plugin system for the skelevents library, loading installed plugins."""
    manager = _create_plugin_manager()
    loaded = register_plugins_entry_points(manager)
    if loaded:
        logger.debug(f"Loaded {loaded} skelevents plugin(s) from entry points")
    global _PLUGIN_MANAGER
    _PLUGIN_MANAGER = manager
    return manager


def _get_global_plugin_manager() -> PluginManager:
    """Returns initialized global plugin manager, initializing it if needed."""
    plugin_manager = _PLUGIN_MANAGER
    if plugin_manager is None:
        plugin_manager = _initialize_plugin_system()
    return plugin_manager


def _create_plugin_manager() -> PluginManager:
    """Create a new PluginManager instance and register the skelevents hook specs."""
    manager = PluginManager(HOOK_NAMESPACE)
    manager.trace.root.setwriter(
        logger.debug if logger.getEffectiveLevel() == logging.DEBUG else None
    )
    manager.enable_tracing()
    manager.add_hookspecs(RegistrySpec)
    return manager


def _check_plugin_instance(plugin: Any) -> None:
    if isclass(plugin):
        raise TypeError(
            "skelevents expects plugins to be registered as instances. "
            "Have you forgotten the `()` when registering a plugin class?"
        )
