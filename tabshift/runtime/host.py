"""Host collaborator interface plus an in-memory implementation.

``TabHost`` lists the query and mutation calls the engine consumes. A browser
integration subclasses it; ``MemoryTabHost`` backs it with a ``StripLayout``
and is what the CLI and the tests drive.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import InvalidOperationError
from ..planning.layout import StripLayout
from ..planning.operations import (
    ActivateTab,
    CreateGroup,
    FocusWindow,
    GroupTabs,
    HighlightTabs,
    MoveGroup,
    MoveTabs,
    Operation,
    SetGroupCollapsed,
    SetPinned,
    UngroupTabs,
)
from ..strip_model.snapshot import WindowSnapshot, build_window_snapshot
from ..strip_model.types import Tab, TabGroup, WindowInfo
from .events import EventSource, TabActivated


class TabHost:
    """Asynchronous host calls used by command handlers and the executor."""

    def __init__(self) -> None:
        self.activations: EventSource[TabActivated] = EventSource()

    async def list_windows(self) -> list[WindowInfo]:
        raise NotImplementedError

    async def list_tabs(self, window_id: int) -> list[Tab]:
        raise NotImplementedError

    async def list_groups(self, window_id: int) -> list[TabGroup]:
        raise NotImplementedError

    async def get_tab(self, tab_id: int) -> Tab | None:
        raise NotImplementedError

    async def move_tabs(self, tab_ids: tuple[int, ...], index: int, window_id: int | None = None) -> None:
        raise NotImplementedError

    async def move_group(self, group_id: int, index: int, window_id: int | None = None) -> None:
        raise NotImplementedError

    async def group_tabs(self, tab_ids: tuple[int, ...], group_id: int) -> None:
        raise NotImplementedError

    async def create_group(self, tab_ids: tuple[int, ...]) -> int:
        """Gather tabs into a new group and return the group id."""
        raise NotImplementedError

    async def ungroup_tabs(self, tab_ids: tuple[int, ...]) -> None:
        raise NotImplementedError

    async def set_pinned(self, tab_id: int, pinned: bool) -> None:
        raise NotImplementedError

    async def set_group_collapsed(self, group_id: int, collapsed: bool) -> None:
        raise NotImplementedError

    async def focus_window(self, window_id: int) -> None:
        raise NotImplementedError

    async def activate_tab(self, tab_id: int) -> None:
        raise NotImplementedError

    async def highlight_tabs(self, window_id: int, indices: tuple[int, ...]) -> None:
        raise NotImplementedError

    async def create_window(self) -> tuple[int, int]:
        """Open a window and return ``(window_id, placeholder_tab_id)``."""
        raise NotImplementedError

    async def remove_tab(self, tab_id: int) -> None:
        raise NotImplementedError


async def read_window_snapshot(host: TabHost, window_id: int) -> WindowSnapshot:
    """Query one window and build a validated snapshot from it."""
    tabs = await host.list_tabs(window_id)
    groups = await host.list_groups(window_id)
    minimized = any(info.id == window_id and info.minimized for info in await host.list_windows())
    return build_window_snapshot(window_id, tabs, groups, minimized=minimized)


class MemoryTabHost(TabHost):
    """``TabHost`` over an in-memory ``StripLayout``.

    Every applied mutation is appended to ``history`` in call order.
    """

    def __init__(self, snapshots: Iterable[WindowSnapshot] = ()) -> None:
        super().__init__()
        self.layout = StripLayout.from_snapshots(snapshots)
        self.history: list[Operation] = []

    def _apply(self, operation: Operation) -> None:
        self.layout.apply(operation)
        self.history.append(operation)

    async def list_windows(self) -> list[WindowInfo]:
        return [
            WindowInfo(
                id=window_id,
                minimized=window_id in self.layout.minimized,
                focused=window_id == self.layout.focused_window,
            )
            for window_id in self.layout.windows
        ]

    async def list_tabs(self, window_id: int) -> list[Tab]:
        return list(self.layout.snapshot(window_id).tabs)

    async def list_groups(self, window_id: int) -> list[TabGroup]:
        return list(self.layout.snapshot(window_id).groups)

    async def get_tab(self, tab_id: int) -> Tab | None:
        window_id = self.layout.tab_window.get(tab_id)
        if window_id is None:
            return None
        return self.layout.snapshot(window_id).tab_by_id(tab_id)

    async def move_tabs(self, tab_ids: tuple[int, ...], index: int, window_id: int | None = None) -> None:
        self._apply(MoveTabs(tuple(tab_ids), index, window_id))

    async def move_group(self, group_id: int, index: int, window_id: int | None = None) -> None:
        self._apply(MoveGroup(group_id, index, window_id))

    async def group_tabs(self, tab_ids: tuple[int, ...], group_id: int) -> None:
        self._apply(GroupTabs(tuple(tab_ids), group_id))

    async def create_group(self, tab_ids: tuple[int, ...]) -> int:
        group_id = self.layout.create_group(tab_ids)
        self.history.append(CreateGroup(tuple(tab_ids)))
        return group_id

    async def ungroup_tabs(self, tab_ids: tuple[int, ...]) -> None:
        self._apply(UngroupTabs(tuple(tab_ids)))

    async def set_pinned(self, tab_id: int, pinned: bool) -> None:
        self._apply(SetPinned(tab_id, pinned))

    async def set_group_collapsed(self, group_id: int, collapsed: bool) -> None:
        self._apply(SetGroupCollapsed(group_id, collapsed))

    async def focus_window(self, window_id: int) -> None:
        self._apply(FocusWindow(window_id))

    async def activate_tab(self, tab_id: int) -> None:
        self._apply(ActivateTab(tab_id))
        self.activations.emit(TabActivated(tab_id=tab_id, window_id=self.layout.window_of(tab_id)))

    async def highlight_tabs(self, window_id: int, indices: tuple[int, ...]) -> None:
        self._apply(HighlightTabs(window_id, tuple(indices)))

    async def create_window(self) -> tuple[int, int]:
        window_id, tab_id = self.layout.create_window()
        self.activations.emit(TabActivated(tab_id=tab_id, window_id=window_id))
        return window_id, tab_id

    async def remove_tab(self, tab_id: int) -> None:
        if tab_id not in self.layout.tab_window:
            raise InvalidOperationError(f"unknown tab {tab_id}", context={"tab_id": tab_id})
        self.layout.remove_tab(tab_id)


__all__ = ["TabHost", "MemoryTabHost", "read_window_snapshot"]
