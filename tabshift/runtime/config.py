"""Persistent JSON config helpers.

Stores the MRU capacity, the event wait timeout and the failure-notification
switch. A missing or malformed file reads as defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .recent_tabs import DEFAULT_RECENT_TABS_CAPACITY

APP_NAME = "tabshift"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Return the stored config object, or ``{}`` when there is none to read."""
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` as indented JSON; write failures are ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _update(key: str, value: object) -> None:
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)


def load_recent_tabs_capacity() -> int:
    """Return the MRU capacity; anything but a positive int yields the default."""
    value = load_config().get("recent_tabs_capacity")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_RECENT_TABS_CAPACITY
    return value


def save_recent_tabs_capacity(capacity: int) -> None:
    if capacity <= 0:
        return
    _update("recent_tabs_capacity", int(capacity))


def load_navigation_timeout() -> float | None:
    """Return seconds to wait for a host event, or ``None`` to wait forever."""
    value = load_config().get("navigation_timeout_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    return float(value)


def save_navigation_timeout(seconds: float | None) -> None:
    """Persist the wait timeout; ``None`` or a non-positive value removes it."""
    if seconds is None or seconds <= 0:
        _update("navigation_timeout_seconds", None)
        return
    _update("navigation_timeout_seconds", float(seconds))


def load_notify_on_failure() -> bool:
    """Only explicit booleans are accepted; anything else falls back to ``True``."""
    value = load_config().get("notify_on_failure")
    return value if isinstance(value, bool) else True


def save_notify_on_failure(enabled: bool) -> None:
    _update("notify_on_failure", bool(enabled))


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_recent_tabs_capacity",
    "save_recent_tabs_capacity",
    "load_navigation_timeout",
    "save_navigation_timeout",
    "load_notify_on_failure",
    "save_notify_on_failure",
]
