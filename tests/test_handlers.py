"""Unit tests for handler construction and invocation."""

import gc

import pytest

from skelevents.exceptions import DeadListenerError
from skelevents.exceptions import HandlerInvocationError
from skelevents.exceptions import InvalidSubscriptionError
from skelevents.handlers import BaseHandler
from skelevents.handlers import CallableHandler
from skelevents.handlers import MethodHandler
from skelevents.handlers import make_handler
from tests.helpers import Recorder


class Slotted:
    """Listener without weak reference support."""

    __slots__ = ("seen",)

    def __init__(self):
        self.seen = []

    def handle(self, source, data):
        self.seen.append(data)


class TestMakeHandler:
    """Tests for make_handler."""

    def test_listener_and_name(self) -> None:
        listener = Recorder("obj", [])
        handler = make_handler(listener, "on_x")
        assert isinstance(handler, MethodHandler)
        assert handler.listener is listener
        assert handler.name == "on_x"

    def test_bound_method(self) -> None:
        listener = Recorder("obj", [])
        handler = make_handler(listener.on_y)
        assert handler == MethodHandler(listener, "on_y")

    def test_plain_function(self) -> None:
        def func(source, data):
            return None

        handler = make_handler(func)
        assert isinstance(handler, CallableHandler)
        assert handler.listener is func
        assert handler.name.endswith("func")

    def test_existing_handler_passes_through(self) -> None:
        handler = CallableHandler(lambda s, d: None)
        assert make_handler(handler) is handler

    def test_classmethod_is_callable_handler(self) -> None:
        class WithClassMethod:
            @classmethod
            def handle(cls, source, data):
                return cls

        assert isinstance(make_handler(WithClassMethod.handle), CallableHandler)

    @pytest.mark.parametrize(
        "listener, name",
        [(None, "on_x"), (object(), "1abc"), (object(), 5), (object(), None)],
    )
    def test_invalid(self, listener, name) -> None:
        with pytest.raises(InvalidSubscriptionError):
            make_handler(listener, name)


class TestMethodHandler:
    """Tests for MethodHandler."""

    def test_invokes_method_with_source_and_data(self) -> None:
        calls = []
        listener = Recorder("obj", calls, result="value")
        handler = MethodHandler(listener, "on_x")

        assert handler("src", {"a": 1}) == "value"
        assert calls == [("obj", "on_x", {"a": 1})]

    def test_equality_is_by_identity_and_name(self) -> None:
        first, second = Recorder("a", []), Recorder("a", [])

        assert MethodHandler(first, "on_x") == MethodHandler(first, "on_x")
        assert MethodHandler(first, "on_x") != MethodHandler(first, "on_y")
        assert MethodHandler(first, "on_x") != MethodHandler(second, "on_x")
        assert hash(MethodHandler(first, "on_x")) == hash(MethodHandler(first, "on_x"))

    def test_not_equal_to_callable_handler(self) -> None:
        listener = Recorder("obj", [])
        assert MethodHandler(listener, "on_x") != CallableHandler(listener.on_x)

    def test_dead_listener(self) -> None:
        listener = Recorder("obj", [])
        handler = MethodHandler(listener, "on_x")
        other = MethodHandler(listener, "on_x")

        del listener
        gc.collect()

        assert not handler.is_alive
        assert handler.listener is None
        assert handler != other
        assert handler == handler
        assert "<dead>" in repr(handler)
        with pytest.raises(DeadListenerError):
            handler(None, {})

    def test_dead_listener_error_is_invocation_error(self) -> None:
        handler = MethodHandler(Recorder("obj", []), "on_x")
        gc.collect()
        with pytest.raises(HandlerInvocationError):
            handler(None, {})

    def test_non_callable_attribute(self) -> None:
        listener = Recorder("obj", [])
        handler = MethodHandler(listener, "name")
        with pytest.raises(DeadListenerError, match="no callable handler 'name'"):
            handler(None, {})

    def test_listener_without_weakref_support(self) -> None:
        listener = Slotted()
        handler = MethodHandler(listener, "handle")

        handler(None, {"a": 1})

        assert handler.is_alive
        assert listener.seen == [{"a": 1}]
        assert handler == MethodHandler(listener, "handle")


class TestCallableHandler:
    """Tests for CallableHandler."""

    def test_invokes_callable(self) -> None:
        seen = []
        handler = CallableHandler(lambda s, d: seen.append((s, d)) or False)
        assert handler("src", 1) is False
        assert seen == [("src", 1)]
        assert handler.is_alive

    def test_equality(self) -> None:
        def func(source, data):
            return None

        assert CallableHandler(func) == CallableHandler(func)
        assert CallableHandler(func) != CallableHandler(lambda s, d: None)

    def test_is_base_handler(self) -> None:
        assert isinstance(CallableHandler(print), BaseHandler)
