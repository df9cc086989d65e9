"""Mutable working copy of one or more tab strips.

``StripLayout`` applies abstract operations with the same semantics a browser
host gives them. Planners replay their own emitted operations on it to resolve
destination indices, and ``MemoryTabHost`` uses it as its backing store.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from ..errors import InvalidOperationError
from ..strip_model.snapshot import WindowSnapshot, build_window_snapshot
from ..strip_model.types import GROUP_NONE, Tab, TabGroup
from .operations import (
    END_INDEX,
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


class StripLayout:
    """Ordered tab ids per window plus pin, group, selection and focus state."""

    def __init__(self) -> None:
        self.windows: dict[int, list[int]] = {}
        self.minimized: set[int] = set()
        self.tab_window: dict[int, int] = {}
        self.tab_group: dict[int, int] = {}
        self.pinned: set[int] = set()
        self.selected: set[int] = set()
        self.active: dict[int, int] = {}
        self.titles: dict[int, str] = {}
        self.groups: dict[int, TabGroup] = {}
        self.focused_window: int | None = None

    @classmethod
    def from_snapshots(cls, snapshots: Iterable[WindowSnapshot]) -> StripLayout:
        layout = cls()
        for snapshot in snapshots:
            layout.add_window(snapshot)
        return layout

    def add_window(self, snapshot: WindowSnapshot) -> None:
        """Load (or replace) one window from a snapshot."""
        window_id = snapshot.window_id
        self.windows[window_id] = [tab.id for tab in snapshot.tabs]
        if snapshot.minimized:
            self.minimized.add(window_id)
        for group in snapshot.groups:
            self.groups[group.id] = group
        for tab in snapshot.tabs:
            self.tab_window[tab.id] = window_id
            self.tab_group[tab.id] = tab.group_id
            self.titles[tab.id] = tab.title
            if tab.pinned:
                self.pinned.add(tab.id)
            if tab.selected:
                self.selected.add(tab.id)
            if tab.active:
                self.active[window_id] = tab.id
        if self.focused_window is None:
            self.focused_window = window_id

    # Queries ----------------------------------------------------------------

    def tab_ids(self, window_id: int) -> list[int]:
        return list(self._window(window_id))

    def window_of(self, tab_id: int) -> int:
        try:
            return self.tab_window[tab_id]
        except KeyError:
            raise InvalidOperationError(f"unknown tab {tab_id}", context={"tab_id": tab_id}) from None

    def index_of(self, tab_id: int) -> int:
        return self.windows[self.window_of(tab_id)].index(tab_id)

    def group_of(self, tab_id: int) -> int:
        self.window_of(tab_id)
        return self.tab_group[tab_id]

    def group_members(self, group_id: int) -> list[int]:
        group = self._group(group_id)
        return [tab_id for tab_id in self.windows[group.window_id] if self.tab_group[tab_id] == group_id]

    def pinned_count(self, window_id: int) -> int:
        count = 0
        for tab_id in self._window(window_id):
            if tab_id not in self.pinned:
                break
            count += 1
        return count

    def snapshot(self, window_id: int) -> WindowSnapshot:
        """Return a validated snapshot of the current state of ``window_id``."""
        tab_ids = self._window(window_id)
        active_id = self.active.get(window_id)
        tabs = [
            Tab(
                id=tab_id,
                index=index,
                window_id=window_id,
                group_id=self.tab_group[tab_id],
                pinned=tab_id in self.pinned,
                selected=tab_id in self.selected,
                active=tab_id == active_id,
                title=self.titles.get(tab_id, ""),
            )
            for index, tab_id in enumerate(tab_ids)
        ]
        group_ids: list[int] = []
        for tab in tabs:
            if tab.grouped and tab.group_id not in group_ids:
                group_ids.append(tab.group_id)
        groups = [self.groups[group_id] for group_id in group_ids]
        return build_window_snapshot(window_id, tabs, groups, minimized=window_id in self.minimized)

    def snapshots(self) -> list[WindowSnapshot]:
        return [self.snapshot(window_id) for window_id in self.windows]

    # Mutations ----------------------------------------------------------------

    def apply(self, operation: Operation) -> bool:
        """Apply one operation and return whether anything changed."""
        if isinstance(operation, MoveTabs):
            return self.move_tabs(operation.tab_ids, operation.index, operation.window_id)
        if isinstance(operation, MoveGroup):
            return self.move_group(operation.group_id, operation.index, operation.window_id)
        if isinstance(operation, GroupTabs):
            return self.group_tabs(operation.tab_ids, operation.group_id)
        if isinstance(operation, CreateGroup):
            self.create_group(operation.tab_ids)
            return True
        if isinstance(operation, UngroupTabs):
            return self.ungroup_tabs(operation.tab_ids)
        if isinstance(operation, SetPinned):
            return self.set_pinned(operation.tab_id, operation.pinned)
        if isinstance(operation, SetGroupCollapsed):
            return self.set_group_collapsed(operation.group_id, operation.collapsed)
        if isinstance(operation, FocusWindow):
            return self.focus_window(operation.window_id)
        if isinstance(operation, ActivateTab):
            return self.activate_tab(operation.tab_id)
        if isinstance(operation, HighlightTabs):
            return self.highlight(operation.window_id, operation.indices)
        raise TypeError(f"unknown operation: {operation!r}")

    def move_tabs(self, tab_ids: Iterable[int], index: int, window_id: int | None = None) -> bool:
        """Move tabs so the first lands at ``index`` of the destination window.

        Pinned tabs stay inside the pinned prefix and unpinned tabs stay after
        it; the index is clamped accordingly. Tabs changing window lose their
        pin, group membership and highlight.
        """
        moved = list(dict.fromkeys(tab_ids))
        if not moved:
            return False
        for tab_id in moved:
            self.window_of(tab_id)
        destination = self.tab_window[moved[0]] if window_id is None else window_id
        self._window(destination)
        crossing = [tab_id for tab_id in moved if self.tab_window[tab_id] != destination]
        pinned_flags = {tab_id in self.pinned for tab_id in moved if tab_id not in crossing}
        if crossing:
            pinned_flags.add(False)
        if len(pinned_flags) > 1:
            raise InvalidOperationError(
                "cannot move pinned and unpinned tabs together",
                context={"tab_ids": moved},
            )
        moving_pinned = pinned_flags == {True}

        before = self._state_key()
        sources = {self.tab_window[tab_id] for tab_id in crossing}
        for tab_id in moved:
            self.windows[self.tab_window[tab_id]].remove(tab_id)
        for tab_id in crossing:
            self._detach(tab_id)
            self.tab_window[tab_id] = destination

        target = self.windows[destination]
        boundary = self.pinned_count(destination)
        if moving_pinned:
            position = boundary if index == END_INDEX else max(0, min(index, boundary))
        else:
            position = len(target) if index == END_INDEX else max(boundary, min(index, len(target)))
        target[position:position] = moved

        for source in sources:
            self._repair_window(source)
        return self._state_key() != before

    def move_group(self, group_id: int, index: int, window_id: int | None = None) -> bool:
        """Relocate every member of a group as one block."""
        group = self._group(group_id)
        destination = group.window_id if window_id is None else window_id
        self._window(destination)
        members = self.group_members(group_id)
        member_set = set(members)
        source = group.window_id
        remaining = [tab_id for tab_id in self.windows[destination] if tab_id not in member_set]
        boundary = 0
        for tab_id in remaining:
            if tab_id not in self.pinned:
                break
            boundary += 1
        position = len(remaining) if index == END_INDEX else max(boundary, min(index, len(remaining)))
        if 0 < position < len(remaining):
            left_group = self.tab_group[remaining[position - 1]]
            if left_group != GROUP_NONE and left_group == self.tab_group[remaining[position]]:
                raise InvalidOperationError(
                    f"cannot move group {group_id} into the middle of group {left_group}",
                    context={"group_id": group_id, "index": index},
                )

        before = self._state_key()
        if destination != source:
            self.windows[source] = [tab_id for tab_id in self.windows[source] if tab_id not in member_set]
        remaining[position:position] = members
        self.windows[destination] = remaining
        if destination != source:
            for tab_id in members:
                self.tab_window[tab_id] = destination
                self.selected.discard(tab_id)
                if self.active.get(source) == tab_id:
                    del self.active[source]
            self.groups[group_id] = replace(group, window_id=destination)
            self._repair_window(source)
        return self._state_key() != before

    def group_tabs(self, tab_ids: Iterable[int], group_id: int) -> bool:
        group = self._group(group_id)
        changed = False
        for tab_id in tab_ids:
            if self.window_of(tab_id) != group.window_id:
                raise InvalidOperationError(
                    f"tab {tab_id} is not in the window of group {group_id}",
                    context={"tab_id": tab_id, "group_id": group_id},
                )
            if tab_id in self.pinned:
                raise InvalidOperationError(f"pinned tab {tab_id} cannot be grouped", context={"tab_id": tab_id})
            if self.tab_group[tab_id] != group_id:
                self._set_group(tab_id, group_id)
                changed = True
        return changed

    def create_group(self, tab_ids: Iterable[int]) -> int:
        """Gather tabs into a new group and return its id.

        The group lands where the leftmost tab was, pushed past the end of any
        other group it would otherwise split.
        """
        members = list(dict.fromkeys(tab_ids))
        if not members:
            raise InvalidOperationError("cannot create an empty group")
        window_id = self.window_of(members[0])
        for tab_id in members:
            if self.window_of(tab_id) != window_id:
                raise InvalidOperationError(
                    f"tab {tab_id} is not in window {window_id}", context={"tab_id": tab_id, "window_id": window_id}
                )
            if tab_id in self.pinned:
                raise InvalidOperationError(f"pinned tab {tab_id} cannot be grouped", context={"tab_id": tab_id})
        tab_list = self.windows[window_id]
        members.sort(key=tab_list.index)
        member_set = set(members)
        remaining = [tab_id for tab_id in tab_list if tab_id not in member_set]
        position = tab_list.index(members[0])
        while 0 < position < len(remaining):
            left_group = self.tab_group[remaining[position - 1]]
            if left_group == GROUP_NONE or left_group != self.tab_group[remaining[position]]:
                break
            position += 1

        group_id = max(self.groups, default=0) + 1
        remaining[position:position] = members
        self.windows[window_id] = remaining
        for tab_id in members:
            self._set_group(tab_id, group_id)
        self.groups[group_id] = TabGroup(id=group_id, window_id=window_id)
        return group_id

    def set_group_collapsed(self, group_id: int, collapsed: bool) -> bool:
        group = self._group(group_id)
        if group.collapsed == collapsed:
            return False
        self.groups[group_id] = replace(group, collapsed=collapsed)
        return True

    def ungroup_tabs(self, tab_ids: Iterable[int]) -> bool:
        changed = False
        for tab_id in tab_ids:
            self.window_of(tab_id)
            if self.tab_group[tab_id] != GROUP_NONE:
                self._set_group(tab_id, GROUP_NONE)
                changed = True
        return changed

    def set_pinned(self, tab_id: int, pinned: bool) -> bool:
        """Pin or unpin a tab; it moves to the pinned/unpinned boundary like a browser does."""
        window_id = self.window_of(tab_id)
        if (tab_id in self.pinned) == pinned:
            return False
        tab_list = self.windows[window_id]
        tab_list.remove(tab_id)
        if pinned:
            self._set_group(tab_id, GROUP_NONE)
            self.pinned.add(tab_id)
            tab_list.insert(self.pinned_count(window_id), tab_id)
        else:
            self.pinned.discard(tab_id)
            tab_list.insert(self.pinned_count(window_id), tab_id)
        return True

    def focus_window(self, window_id: int) -> bool:
        self._window(window_id)
        changed = self.focused_window != window_id or window_id in self.minimized
        self.focused_window = window_id
        self.minimized.discard(window_id)
        return changed

    def activate_tab(self, tab_id: int) -> bool:
        window_id = self.window_of(tab_id)
        if self.active.get(window_id) == tab_id:
            return False
        for other_id in self.windows[window_id]:
            self.selected.discard(other_id)
        self.active[window_id] = tab_id
        self.selected.add(tab_id)
        return True

    def highlight(self, window_id: int, indices: Iterable[int]) -> bool:
        """Replace the selection of ``window_id``; the first index becomes active."""
        tab_list = self._window(window_id)
        ordered = list(indices)
        if not ordered:
            return False
        for index in ordered:
            if not 0 <= index < len(tab_list):
                raise InvalidOperationError(
                    f"no tab at index {index} in window {window_id}",
                    context={"window_id": window_id, "index": index},
                )
        before = self._state_key()
        for tab_id in tab_list:
            self.selected.discard(tab_id)
        for index in ordered:
            self.selected.add(tab_list[index])
        self.active[window_id] = tab_list[ordered[0]]
        return self._state_key() != before

    def create_window(self) -> tuple[int, int]:
        """Open a window holding one fresh placeholder tab; returns ``(window_id, tab_id)``."""
        window_id = max(self.windows, default=0) + 1
        tab_id = max(self.tab_window, default=0) + 1
        self.windows[window_id] = [tab_id]
        self.tab_window[tab_id] = window_id
        self.tab_group[tab_id] = GROUP_NONE
        self.selected.add(tab_id)
        self.active[window_id] = tab_id
        self.focused_window = window_id
        return window_id, tab_id

    def remove_tab(self, tab_id: int) -> None:
        window_id = self.window_of(tab_id)
        self.windows[window_id].remove(tab_id)
        self._detach(tab_id)
        del self.tab_window[tab_id]
        del self.tab_group[tab_id]
        self.titles.pop(tab_id, None)
        self._repair_window(window_id)

    # Internals ----------------------------------------------------------------

    def _window(self, window_id: int) -> list[int]:
        try:
            return self.windows[window_id]
        except KeyError:
            raise InvalidOperationError(f"unknown window {window_id}", context={"window_id": window_id}) from None

    def _group(self, group_id: int) -> TabGroup:
        try:
            return self.groups[group_id]
        except KeyError:
            raise InvalidOperationError(f"unknown group {group_id}", context={"group_id": group_id}) from None

    def _set_group(self, tab_id: int, group_id: int) -> None:
        previous = self.tab_group[tab_id]
        self.tab_group[tab_id] = group_id
        if previous != GROUP_NONE and not any(value == previous for value in self.tab_group.values()):
            del self.groups[previous]

    def _detach(self, tab_id: int) -> None:
        """Drop window-scoped state of a tab leaving its window."""
        window_id = self.tab_window[tab_id]
        self._set_group(tab_id, GROUP_NONE)
        self.pinned.discard(tab_id)
        self.selected.discard(tab_id)
        if self.active.get(window_id) == tab_id:
            del self.active[window_id]

    def _repair_window(self, window_id: int) -> None:
        """Close empty windows and make sure a non-empty window keeps an active tab."""
        tab_list = self.windows[window_id]
        if not tab_list:
            del self.windows[window_id]
            self.minimized.discard(window_id)
            self.active.pop(window_id, None)
            if self.focused_window == window_id:
                self.focused_window = next(iter(self.windows), None)
            return
        if window_id not in self.active:
            fallback = next((tab_id for tab_id in tab_list if tab_id in self.selected), tab_list[0])
            self.active[window_id] = fallback
            self.selected.add(fallback)

    def _state_key(self) -> tuple[object, ...]:
        return (
            tuple((window_id, tuple(tab_ids)) for window_id, tab_ids in self.windows.items()),
            tuple(sorted(self.tab_group.items())),
            frozenset(self.pinned),
            frozenset(self.selected),
            tuple(sorted(self.active.items())),
        )


__all__ = ["StripLayout"]
