"""Handler capability: the single entry point a registry uses to invoke a listener."""

from __future__ import annotations

import abc
import inspect
import logging
import weakref
from typing import Any, Callable

from typing_extensions import override

from skelevents.exceptions import DeadListenerError
from skelevents.exceptions import InvalidSubscriptionError

logger = logging.getLogger(__name__)


class BaseHandler(abc.ABC):
    """
    Invocable handle for one listener.

    Handlers are called with `(source, data)` and return a tri-state result: `False` halts
    propagation, anything else continues, and raising aborts the notification pass.
    """

    @abc.abstractmethod
    def __call__(self, source: Any, data: Any) -> Any:
        """
        Invoke the listener.

        Args:
            source: Object that emitted the event.
            data: Event payload.

        Returns:
            `False` to halt propagation, any other value to continue.
        """

    @property
    @abc.abstractmethod
    def listener(self) -> Any | None:
        """The listener object, or `None` if it no longer exists."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Name identifying the capability invoked on the listener."""

    @property
    def is_alive(self) -> bool:
        """Whether the listener can still be invoked."""
        return self.listener is not None


class MethodHandler(BaseHandler):
    """
    Invokes a named method on a listener object without keeping the listener alive.

    Two method handlers are equal when they refer to the same (identical) live listener and the
    same method name.

    Args:
        listener: Object to invoke the method on.
        name: Name of the method.
    """

    def __init__(self, listener: Any, name: str) -> None:
        self._name = name
        try:
            self._ref: Callable[[], Any] = weakref.ref(listener)
        except TypeError:
            # Objects without weak reference support (e.g. __slots__ without __weakref__).
            logger.debug(
                f"{type(listener).__name__} does not support weak references; "
                f"holding a strong reference for handler '{name}'"
            )
            self._ref = lambda: listener

    @property
    @override
    def listener(self) -> Any | None:
        return self._ref()

    @property
    @override
    def name(self) -> str:
        return self._name

    @override
    def __call__(self, source: Any, data: Any) -> Any:
        target = self._ref()
        if target is None:
            raise DeadListenerError(f"Listener for handler '{self._name}' no longer exists")

        method = getattr(target, self._name, None)
        if method is None or not callable(method):
            raise DeadListenerError(
                f"{type(target).__name__} has no callable handler '{self._name}'"
            )
        return method(source, data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MethodHandler):
            return NotImplemented
        if self is other:
            return True
        target = self._ref()
        return target is not None and target is other._ref() and self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        target = self._ref()
        owner = type(target).__name__ if target is not None else "<dead>"
        return f"MethodHandler({owner}.{self._name})"


class CallableHandler(BaseHandler):
    """Invokes a plain callable. The callable is held by a strong reference."""

    def __init__(self, func: Callable[[Any, Any], Any]) -> None:
        self._func = func

    @property
    @override
    def listener(self) -> Callable[[Any, Any], Any]:
        return self._func

    @property
    @override
    def name(self) -> str:
        return getattr(self._func, "__qualname__", None) or type(self._func).__name__

    @override
    def __call__(self, source: Any, data: Any) -> Any:
        return self._func(source, data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallableHandler):
            return NotImplemented
        return self._func == other._func

    def __hash__(self) -> int:
        return hash(self._func)

    def __repr__(self) -> str:
        return f"CallableHandler({self.name})"


def make_handler(listener: Any, handler: str | None = None) -> BaseHandler:
    """
    Build a handler from a listener and an optional handler (method) name.

    Accepted forms:
    - `(obj, "method")`: non-owning `MethodHandler`.
    - `(bound_method,)`: same as `(bound_method.__self__, bound_method.__name__)`.
    - `(handler,)` where handler is already a `BaseHandler`: returned as is.
    - `(func,)`: `CallableHandler`.

    Method handlers do not keep `obj` alive. The caller must hold a reference to the listener for
    as long as it should receive events; once it is garbage collected, invoking the handler raises
    `DeadListenerError`. Plain callables are held by a strong reference.

    Raises:
        InvalidSubscriptionError: If the listener or handler name is malformed.
    """
    if listener is None:
        raise InvalidSubscriptionError("Listener must not be None")

    if handler is not None:
        if not isinstance(handler, str) or not handler.isidentifier():
            raise InvalidSubscriptionError(
                f"Handler name must be a valid identifier, got {handler!r}"
            )
        return MethodHandler(listener, handler)

    if isinstance(listener, BaseHandler):
        return listener
    if inspect.ismethod(listener) and not inspect.isclass(listener.__self__):
        return MethodHandler(listener.__self__, listener.__name__)
    if callable(listener):
        return CallableHandler(listener)

    raise InvalidSubscriptionError(
        f"{type(listener).__name__} is not callable; pass the name of the handler method"
    )
