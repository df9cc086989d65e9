"""Most-recently-used tab tracking.

Command handlers receive a ``RecentTabs`` instance instead of reading ambient
state; activations arrive through ``on_tab_activated``.
"""

from __future__ import annotations

from collections import OrderedDict

from .events import TabActivated

DEFAULT_RECENT_TABS_CAPACITY = 64


class RecentTabs:
    """Bounded activation order, most recent first.

    Re-activating a known tab moves it to the front; the oldest entry is
    evicted once ``capacity`` is exceeded.
    """

    def __init__(self, capacity: int = DEFAULT_RECENT_TABS_CAPACITY) -> None:
        self.capacity = max(1, capacity)
        self._order: OrderedDict[int, None] = OrderedDict()

    def __len__(self) -> int:
        return len(self._order)

    def record_activation(self, tab_id: int) -> None:
        self._order.pop(tab_id, None)
        self._order[tab_id] = None
        while len(self._order) > self.capacity:
            self._order.popitem(last=False)

    def forget(self, tab_id: int) -> None:
        """Drop a tab, e.g. once it has been closed."""
        self._order.pop(tab_id, None)

    def most_recent(self, exclude: int | None = None) -> list[int]:
        """Return tab ids most recent first, optionally skipping ``exclude``."""
        return [tab_id for tab_id in reversed(self._order) if tab_id != exclude]

    def on_tab_activated(self, event: TabActivated) -> None:
        """Listener adapter for a host activation ``EventSource``."""
        self.record_activation(event.tab_id)


__all__ = ["DEFAULT_RECENT_TABS_CAPACITY", "RecentTabs"]
