"""
Centralized exception classes for the skelevents library.

All skelevents-specific exceptions inherit from SkelEventsError for easy catching. Exceptions raised
by handlers themselves are never wrapped; they reach the caller of `notify_listeners` unchanged.
"""


class SkelEventsError(Exception):
    """Base exception for all skelevents errors."""


class InvalidSubscriptionError(SkelEventsError, ValueError):
    """Raised when an event name, listener or handler name is malformed."""


class HandlerInvocationError(SkelEventsError):
    """Raised when the registry is unable to invoke a subscribed handler."""


class DeadListenerError(HandlerInvocationError):
    """Raised when a handler's listener no longer exists or no longer responds to the handler."""
