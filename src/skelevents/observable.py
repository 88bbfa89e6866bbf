"""Composition helpers for components that expose the observable capability."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable

from skelevents.events import CONFIG_CHANGED
from skelevents.registry import EventRegistry
from skelevents.registry import NotifyResult

logger = logging.getLogger(__name__)


@runtime_checkable
class Observable(Protocol):
    """Protocol for objects that listeners can subscribe to."""

    def register_listener(self, event: str, listener: Any, handler: str | None = None) -> None:
        """Subscribe `listener` (or `listener.handler`) to `event`."""
        ...

    def remove_listener(self, event: str, listener: Any, handler: str | None = None) -> None:
        """Unsubscribe `listener` (or `listener.handler`) from `event`."""
        ...

    def notify_listeners(self, event: str, data: Any = None) -> NotifyResult:
        """Deliver `event` to its subscribers."""
        ...


class ObservableComponent:
    """
    Base for components that are observable.

    The component owns an `EventRegistry` whose source is the component itself and forwards the
    observable operations to it, so handlers receive the component as their first argument.

    Args:
        plugins: Plugin instances used by this component's registry in addition to the global ones.
    """

    def __init__(self, plugins: list[Any] | None = None) -> None:
        self._events = EventRegistry(source=self, plugins=plugins)

    @property
    def events(self) -> EventRegistry:
        """The registry holding this component's subscriptions."""
        return self._events

    def register_listener(self, event: str, listener: Any, handler: str | None = None) -> None:
        self._events.register_listener(event, listener, handler)

    def remove_listener(self, event: str, listener: Any, handler: str | None = None) -> None:
        self._events.remove_listener(event, listener, handler)

    def notify_listeners(self, event: str, data: Any = None) -> NotifyResult:
        return self._events.notify_listeners(event, data)


class Context(ObservableComponent):
    """
    Observable table of strings, the basis for user-facing applications.

    Changing a string notifies "ConfigChanged" listeners with the key and both values.

    Args:
        strings: Initial strings. Setting them does not notify.
        plugins: Plugin instances for this context's registry.
    """

    def __init__(
        self, strings: Mapping[str, str] | None = None, plugins: list[Any] | None = None
    ) -> None:
        super().__init__(plugins=plugins)
        self._strings: dict[str, str] = dict(strings or {})

    def string(self, key: str, default: str = "") -> str:
        """
        Get the string for `key`.

        Args:
            key: Key of the string.
            default: Returned when `key` has not been set.
        """
        return self._strings.get(key, default)

    def set_string(self, key: str, value: str) -> NotifyResult:
        """
        Set the string for `key` and notify "ConfigChanged" listeners if the value changed.

        The new value is kept even if a listener halts propagation.

        Args:
            key: Key of the string.
            value: New value.

        Returns:
            Result of the notification, `NotifyResult.COMPLETED` when nothing changed.
        """
        old = self._strings.get(key)
        if old == value:
            return NotifyResult.COMPLETED

        self._strings[key] = value
        logger.debug(f"Context string '{key}' changed")
        return self.notify_listeners(CONFIG_CHANGED, {"key": key, "old": old, "new": value})

    def update_strings(self, strings: Mapping[str, str]) -> None:
        """Set several strings, notifying once per changed key."""
        for key, value in strings.items():
            self.set_string(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._strings
