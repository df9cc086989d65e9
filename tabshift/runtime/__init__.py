"""Host-facing runtime: execution, events, commands and configuration.

Command handlers take a ``CommandContext`` and drive a ``TabHost``; the
registry maps command names onto them.
"""

from __future__ import annotations

from .events import EventSource, OneShotWaiter, TabActivated, wait_for_event
from .recent_tabs import DEFAULT_RECENT_TABS_CAPACITY, RecentTabs
from .host import MemoryTabHost, TabHost, read_window_snapshot
from .executor import apply_operation, execute_plan
from .commands import CommandContext
from .command_registry import CommandBinding, CommandRegistry, default_registry, normalize_command_name

__all__ = [
    "EventSource",
    "OneShotWaiter",
    "TabActivated",
    "wait_for_event",
    "DEFAULT_RECENT_TABS_CAPACITY",
    "RecentTabs",
    "TabHost",
    "MemoryTabHost",
    "read_window_snapshot",
    "apply_operation",
    "execute_plan",
    "CommandContext",
    "CommandBinding",
    "CommandRegistry",
    "default_registry",
    "normalize_command_name",
]
