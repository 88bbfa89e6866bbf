"""Hook specifications for event registry lifecycle events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from skelevents.plugins.hooks.markers import hook_spec

if TYPE_CHECKING:
    from skelevents.registry import NotifyResult
    from skelevents.registry import Subscription


class RegistrySpec:
    """Hook specifications for subscription and notification events of an `EventRegistry`."""

    @hook_spec
    def after_listener_registered(self, source: Any, subscription: Subscription) -> None:
        """
        Called after a new subscription has been added to a registry.

        Not called when the registration was a duplicate (no-op).

        Args:
            source: Source object of the registry.
            subscription: The subscription that was added.
        """

    @hook_spec
    def after_listener_removed(self, source: Any, subscription: Subscription) -> None:
        """
        Called after a subscription has been removed from a registry.

        Args:
            source: Source object of the registry.
            subscription: The subscription that was removed.
        """

    @hook_spec
    def before_notify(self, source: Any, event: str, data: Any, subscriber_count: int) -> None:
        """
        Called before handlers are invoked for an event that has subscribers.

        Args:
            source: Source object of the registry.
            event: Name of the event being delivered.
            data: Payload passed to the handlers.
            subscriber_count: Number of handlers in the delivery snapshot.
        """

    @hook_spec
    def after_notify(
        self,
        source: Any,
        event: str,
        data: Any,
        result: NotifyResult,
        duration: float,
    ) -> None:
        """
        Called after a notification pass completes or is halted by a handler.

        Args:
            source: Source object of the registry.
            event: Name of the delivered event.
            data: Payload passed to the handlers.
            result: Outcome of the pass.
            duration: Time taken by the pass in seconds.
        """

    @hook_spec
    def on_handler_error(self, source: Any, subscription: Subscription, error: Exception) -> None:
        """
        Called when a handler raises, right before the error is propagated to the caller.

        Args:
            source: Source object of the registry.
            subscription: Subscription whose handler failed.
            error: The exception that was raised.
        """
