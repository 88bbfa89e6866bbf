"""Skelevents: multi-event observer registry for in-process components."""

__version__ = "0.1.0"

from . import settings
from .events import CONFIG_CHANGED
from .events import REGISTER_LISTENER
from .events import REMOVE_LISTENER
from .exceptions import DeadListenerError
from .exceptions import HandlerInvocationError
from .exceptions import InvalidSubscriptionError
from .exceptions import SkelEventsError
from .handlers import BaseHandler
from .handlers import CallableHandler
from .handlers import MethodHandler
from .observable import Context
from .observable import Observable
from .observable import ObservableComponent
from .plugins.manager import _initialize_plugin_system
from .registry import EventRegistry
from .registry import NotifyResult
from .registry import Subscription

# Initialize plugin system on module import
_initialize_plugin_system()

__all__ = [
    "BaseHandler",
    "CallableHandler",
    "CONFIG_CHANGED",
    "Context",
    "DeadListenerError",
    "EventRegistry",
    "HandlerInvocationError",
    "InvalidSubscriptionError",
    "MethodHandler",
    "NotifyResult",
    "Observable",
    "ObservableComponent",
    "REGISTER_LISTENER",
    "REMOVE_LISTENER",
    "settings",
    "SkelEventsError",
    "Subscription",
]
