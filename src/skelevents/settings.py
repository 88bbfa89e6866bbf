from __future__ import annotations

import threading
from dataclasses import dataclass

_GLOBAL_SKELEVENTS_SETTINGS: SkelEventsSettings | None = None
_SETTINGS_LOCK = threading.RLock()


@dataclass(frozen=True)
class SkelEventsSettings:
    """Configuration settings for skelevents."""

    lifecycle_events: bool = True
    """
    Whether registries emit "RegisterListener" and "RemoveListener" notifications.

    Plugin hooks are called regardless of this setting.
    """

    max_lifecycle_depth: int = 1
    """
    Maximum nesting of lifecycle notifications on a single thread.

    With the default of 1, a listener registered from inside a lifecycle handler is added normally
    but does not trigger another lifecycle notification.
    """

    def __post_init__(self) -> None:
        if self.max_lifecycle_depth < 0:
            raise ValueError(
                f"max_lifecycle_depth must be >= 0, got {self.max_lifecycle_depth}"
            )


def get_global_settings() -> SkelEventsSettings:
    """
    Get the global skelevents settings instance (thread-safe).

    If no global settings have been set, returns a default instance.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_SKELEVENTS_SETTINGS
        if _GLOBAL_SKELEVENTS_SETTINGS is None:
            _GLOBAL_SKELEVENTS_SETTINGS = SkelEventsSettings()
        return _GLOBAL_SKELEVENTS_SETTINGS


def set_global_settings(settings: SkelEventsSettings) -> None:
    """
    Set the global skelevents settings instance (thread-safe).

    Settings are read each time a registry registers, removes or notifies, so changes also apply to
    registries that already exist.

    Args:
        settings (SkelEventsSettings): Settings to set as global.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_SKELEVENTS_SETTINGS
        _GLOBAL_SKELEVENTS_SETTINGS = settings
