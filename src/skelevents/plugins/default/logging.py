"""
Logging plugin reporting registry activity through Python's logging system.

Example:
    >>> import logging
    >>> from skelevents import EventRegistry
    >>> from skelevents.plugins import LoggingPlugin
    >>>
    >>> registry = EventRegistry(plugins=[LoggingPlugin(level=logging.INFO)])
"""

import logging
from typing import Any

from skelevents.plugins.hooks.markers import hook_impl

DEFAULT_LOGGER_NAME = "skelevents.events"


class LoggingPlugin:
    """
    Plugin that logs subscriptions, notification passes and handler errors.

    Handler errors are always logged at ERROR level; everything else is logged at `level`.

    Args:
        level: Level used for subscription and notification messages.
        logger_name: Name of the logger to write to. Defaults to "skelevents.events".
    """

    def __init__(self, level: int = logging.DEBUG, logger_name: str | None = None):
        self._level = level
        self._logger = logging.getLogger(logger_name or DEFAULT_LOGGER_NAME)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @hook_impl
    def after_listener_registered(self, source: Any, subscription: Any) -> None:
        self._logger.log(
            self._level,
            f"{_describe(source)}: registered {subscription.handler_name} "
            f"for '{subscription.event}'",
        )

    @hook_impl
    def after_listener_removed(self, source: Any, subscription: Any) -> None:
        self._logger.log(
            self._level,
            f"{_describe(source)}: removed {subscription.handler_name} from '{subscription.event}'",
        )

    @hook_impl
    def after_notify(
        self, source: Any, event: str, data: Any, result: Any, duration: float
    ) -> None:
        self._logger.log(
            self._level,
            f"{_describe(source)}: '{event}' {result.value} in {duration * 1000:.2f} ms",
        )

    @hook_impl
    def on_handler_error(self, source: Any, subscription: Any, error: Exception) -> None:
        self._logger.error(
            f"{_describe(source)}: handler {subscription.handler_name} failed for "
            f"'{subscription.event}': {error}"
        )


def _describe(source: Any) -> str:
    return type(source).__name__
