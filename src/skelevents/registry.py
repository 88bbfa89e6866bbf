"""Event registry: per-event listener lists with synchronous, short-circuiting notification."""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from pluggy import HookRelay
from pluggy import PluginManager

from skelevents.events import REGISTER_LISTENER
from skelevents.events import REMOVE_LISTENER
from skelevents.exceptions import InvalidSubscriptionError
from skelevents.handlers import BaseHandler
from skelevents.handlers import make_handler
from skelevents.plugins.manager import _get_global_plugin_manager
from skelevents.plugins.manager import create_hook_manager_with_plugins
from skelevents.settings import get_global_settings

logger = logging.getLogger(__name__)


class NotifyResult(enum.Enum):
    """Outcome of a notification pass."""

    COMPLETED = "completed"
    """Every handler ran without signalling halt."""

    HALTED = "halted"
    """A handler returned `False`; later handlers were not invoked."""

    def __bool__(self) -> bool:
        return self is NotifyResult.COMPLETED


@dataclass(frozen=True)
class Subscription:
    """One listener registration for one event."""

    event: str
    handler: BaseHandler

    @property
    def listener(self) -> Any | None:
        """The subscribed listener, or `None` if it has been garbage collected."""
        return self.handler.listener

    @property
    def handler_name(self) -> str:
        return self.handler.name


class EventRegistry:
    """
    Registry of listeners keyed by event name.

    Handlers for an event are invoked synchronously, in registration order, with the registry's
    source object and the notification payload. A handler returning `False` stops propagation.
    Handler errors are never swallowed.

    The registry never owns method listeners: `(listener, "method")` registrations hold a weak
    reference, and invoking one whose listener has been collected raises `DeadListenerError`.

    Args:
        source: Object passed to handlers as the event source. Defaults to the registry itself.
        plugins: Plugin instances used by this registry in addition to the global plugins.

    Examples:
        >>> class Printer:
        ...     def on_saved(self, source, data):
        ...         print(data["path"])
        >>> printer = Printer()
        >>> registry = EventRegistry()
        >>> registry.register_listener("Saved", printer, "on_saved")
        >>> registry.notify_listeners("Saved", {"path": "a.txt"})
        a.txt
        <NotifyResult.COMPLETED: 'completed'>
    """

    def __init__(self, source: Any = None, plugins: list[Any] | None = None) -> None:
        self._source = source
        self._listeners: dict[str, list[Subscription]] = {}
        self._lock = threading.RLock()
        self._local = threading.local()
        self._plugins = list(plugins or [])
        self._plugin_manager: PluginManager | None = None
        self._plugin_origin: tuple[PluginManager, frozenset[int]] | None = None
        if self._plugins:
            # Build now so that invalid plugins fail at construction.
            self._resolve_hook()

    @property
    def source(self) -> Any:
        """Object passed to handlers as the event source."""
        return self if self._source is None else self._source

    # region Subscriptions

    def register_listener(self, event: str, listener: Any, handler: str | None = None) -> None:
        """
        Subscribe a listener to an event.

        Registering the same (event, listener, handler) again is a silent no-op.

        Args:
            event: Name of the event.
            listener: Object owning the handler method, or a callable / `BaseHandler` when
                `handler` is omitted.
            handler: Name of the method to invoke on `listener`.

        Raises:
            InvalidSubscriptionError: If any argument is malformed. Nothing is registered.
        """
        subscription = self._make_subscription(event, listener, handler)

        with self._lock:
            subscriptions = self._listeners.setdefault(event, [])
            if any(sub.handler == subscription.handler for sub in subscriptions):
                logger.debug(
                    f"Ignoring duplicate registration of {subscription.handler!r} for '{event}'"
                )
                return
            subscriptions.append(subscription)

        logger.debug(f"Registered {subscription.handler!r} for '{event}'")
        self._hook.after_listener_registered(source=self.source, subscription=subscription)
        self._emit_lifecycle(REGISTER_LISTENER, subscription)

    def remove_listener(self, event: str, listener: Any, handler: str | None = None) -> None:
        """
        Unsubscribe a listener from an event. Does nothing if it is not subscribed.

        Args:
            event: Name of the event.
            listener: Listener given to `register_listener`.
            handler: Handler name given to `register_listener`.

        Raises:
            InvalidSubscriptionError: If any argument is malformed.
        """
        probe = self._make_subscription(event, listener, handler)

        with self._lock:
            removed = self._pop_subscription(event, lambda sub: sub.handler == probe.handler)

        if removed is None:
            return
        self._after_removal(removed)

    def prune_dead(self, event: str | None = None) -> int:
        """
        Remove subscriptions whose listener no longer exists.

        Each removal is reported like a regular `remove_listener` call.

        Args:
            event: Only prune this event. Prunes every event when None.

        Returns:
            Number of subscriptions removed.
        """
        with self._lock:
            names = [event] if event is not None else list(self._listeners)
            dead: list[Subscription] = []
            for name in names:
                for sub in list(self._listeners.get(name, ())):
                    if not sub.handler.is_alive:
                        self._pop_subscription(name, lambda s, sub=sub: s is sub)
                        dead.append(sub)

        for sub in dead:
            self._after_removal(sub)
        return len(dead)

    def has_listeners(self, event: str) -> bool:
        with self._lock:
            return bool(self._listeners.get(event))

    def get_listeners(self, event: str) -> tuple[Subscription, ...]:
        """Return the subscriptions of an event, in delivery order."""
        with self._lock:
            return tuple(self._listeners.get(event, ()))

    def events(self) -> tuple[str, ...]:
        """Return the names of all events that have at least one subscription."""
        with self._lock:
            return tuple(self._listeners)

    def __contains__(self, event: object) -> bool:
        return isinstance(event, str) and self.has_listeners(event)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(subs) for subs in self._listeners.values())

    # region Notification

    def notify_listeners(self, event: str, data: Any = None) -> NotifyResult:
        """
        Deliver an event to its subscribers.

        Handlers are called in registration order with `(source, data)`. The subscriber list is
        snapshotted first, so handlers may register or remove listeners; such changes take effect
        on the next notification.

        Args:
            event: Name of the event.
            data: Payload passed to every handler. Defaults to an empty dict.

        Returns:
            `NotifyResult.HALTED` if a handler returned `False`, otherwise
            `NotifyResult.COMPLETED` (also when there are no subscribers).

        Raises:
            Exception: Whatever a handler raises, unchanged. Remaining handlers are skipped.
            DeadListenerError: If a subscribed listener no longer exists.
        """
        with self._lock:
            snapshot = tuple(self._listeners.get(event, ()))

        if not snapshot:
            return NotifyResult.COMPLETED

        if data is None:
            data = {}

        source = self.source
        hook = self._hook
        hook.before_notify(source=source, event=event, data=data, subscriber_count=len(snapshot))
        start_time = time.perf_counter()

        result = NotifyResult.COMPLETED
        for subscription in snapshot:
            try:
                outcome = subscription.handler(source, data)
            except Exception as e:
                logger.debug(f"Handler {subscription.handler!r} failed for '{event}': {e}")
                try:
                    hook.on_handler_error(source=source, subscription=subscription, error=e)
                except Exception:
                    logger.exception(f"Plugin hook on_handler_error failed for '{event}'")
                raise

            if outcome is False:
                logger.debug(f"Propagation of '{event}' halted by {subscription.handler!r}")
                result = NotifyResult.HALTED
                break

        duration = time.perf_counter() - start_time
        hook.after_notify(source=source, event=event, data=data, result=result, duration=duration)
        return result

    # region Helpers

    @property
    def _hook(self) -> HookRelay:
        return self._resolve_hook()

    def _resolve_hook(self) -> HookRelay:
        global_manager = _get_global_plugin_manager()
        if not self._plugins:
            return global_manager.hook

        # Local plugins sit on top of the global ones; rebuild when the global set changes.
        global_ids = frozenset(id(plugin) for plugin in global_manager.get_plugins())
        with self._lock:
            origin = self._plugin_origin
            if (
                self._plugin_manager is None
                or origin is None
                or origin[0] is not global_manager
                or origin[1] != global_ids
            ):
                self._plugin_manager = create_hook_manager_with_plugins(self._plugins)
                self._plugin_origin = (global_manager, global_ids)
            return self._plugin_manager.hook

    def _make_subscription(self, event: str, listener: Any, handler: str | None) -> Subscription:
        if not isinstance(event, str) or not event:
            raise InvalidSubscriptionError(f"Event name must be a non-empty string, got {event!r}")
        return Subscription(event=event, handler=make_handler(listener, handler))

    def _pop_subscription(
        self, event: str, match: Callable[[Subscription], bool]
    ) -> Subscription | None:
        """Remove and return the first matching subscription. Caller must hold the lock."""
        subscriptions = self._listeners.get(event)
        if not subscriptions:
            return None

        for index, sub in enumerate(subscriptions):
            if match(sub):
                del subscriptions[index]
                if not subscriptions:
                    del self._listeners[event]
                return sub
        return None

    def _after_removal(self, subscription: Subscription) -> None:
        logger.debug(f"Removed {subscription.handler!r} from '{subscription.event}'")
        self._hook.after_listener_removed(source=self.source, subscription=subscription)
        self._emit_lifecycle(REMOVE_LISTENER, subscription)

    def _emit_lifecycle(self, name: str, subscription: Subscription) -> None:
        """Notify this registry's own listeners of a subscription change, bounded per thread."""
        settings = get_global_settings()
        if not settings.lifecycle_events:
            return

        depth = getattr(self._local, "lifecycle_depth", 0)
        if depth >= settings.max_lifecycle_depth:
            logger.debug(
                f"Suppressed nested '{name}' for '{subscription.event}' "
                f"(lifecycle depth {depth} >= {settings.max_lifecycle_depth})"
            )
            return

        payload = {
            "source": self.source,
            "event": subscription.event,
            "listener": subscription.listener,
            "handler": subscription.handler_name,
        }
        self._local.lifecycle_depth = depth + 1
        try:
            self.notify_listeners(name, payload)
        finally:
            self._local.lifecycle_depth = depth
