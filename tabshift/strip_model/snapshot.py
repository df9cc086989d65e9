"""Immutable window snapshots plus invariant checks and JSON document helpers.

A snapshot is what planners read: the ordered tabs of one window and the
groups they reference. Building one validates the strip invariants so planners
can rely on them (dense indices, pinned prefix, ungrouped pins, contiguous
groups).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from ..errors import InvalidSelectionError, InvalidSnapshotError
from .types import GROUP_NONE, Tab, TabGroup


@dataclass(frozen=True)
class WindowSnapshot:
    """Ordered tabs and groups of one window at a single point in time."""

    window_id: int
    tabs: tuple[Tab, ...]
    groups: tuple[TabGroup, ...] = ()
    minimized: bool = False

    def tab_by_id(self, tab_id: int) -> Tab | None:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None

    def group_by_id(self, group_id: int) -> TabGroup | None:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def selected_tabs(self) -> list[Tab]:
        return [tab for tab in self.tabs if tab.selected]

    def active_tab(self) -> Tab | None:
        for tab in self.tabs:
            if tab.active:
                return tab
        return None

    def pinned_count(self) -> int:
        count = 0
        for tab in self.tabs:
            if not tab.pinned:
                break
            count += 1
        return count


def _check_invariants(window_id: int, tabs: tuple[Tab, ...], groups: tuple[TabGroup, ...]) -> None:
    """Raise ``InvalidSnapshotError`` when ``tabs``/``groups`` break strip invariants."""
    context = {"window_id": window_id}
    seen_ids: set[int] = set()
    for position, tab in enumerate(tabs):
        if tab.id in seen_ids:
            raise InvalidSnapshotError(f"duplicate tab id {tab.id}", context={**context, "tab_id": tab.id})
        seen_ids.add(tab.id)
        if tab.index != position:
            raise InvalidSnapshotError(
                f"tab {tab.id} has index {tab.index}, expected {position}",
                context={**context, "tab_id": tab.id},
            )
        if tab.window_id != window_id:
            raise InvalidSnapshotError(
                f"tab {tab.id} belongs to window {tab.window_id}",
                context={**context, "tab_id": tab.id},
            )
        if tab.pinned and tab.grouped:
            raise InvalidSnapshotError(f"pinned tab {tab.id} is grouped", context={**context, "tab_id": tab.id})
        if tab.pinned and position > 0 and not tabs[position - 1].pinned:
            raise InvalidSnapshotError(
                f"pinned tab {tab.id} follows an unpinned tab",
                context={**context, "tab_id": tab.id},
            )

    known_groups = {group.id for group in groups}
    closed_groups: set[int] = set()
    previous_group = GROUP_NONE
    for tab in tabs:
        if tab.group_id != previous_group:
            if previous_group != GROUP_NONE:
                closed_groups.add(previous_group)
            if tab.group_id in closed_groups:
                raise InvalidSnapshotError(
                    f"group {tab.group_id} is not contiguous",
                    context={**context, "group_id": tab.group_id},
                )
            previous_group = tab.group_id
        if tab.grouped and tab.group_id not in known_groups:
            raise InvalidSnapshotError(
                f"tab {tab.id} references unknown group {tab.group_id}",
                context={**context, "tab_id": tab.id, "group_id": tab.group_id},
            )


def build_window_snapshot(
    window_id: int,
    tabs: Iterable[Tab],
    groups: Iterable[TabGroup] = (),
    *,
    minimized: bool = False,
) -> WindowSnapshot:
    """Build a validated snapshot; ``tabs`` may arrive in any order."""
    ordered = tuple(sorted(tabs, key=lambda tab: tab.index))
    group_tuple = tuple(groups)
    _check_invariants(window_id, ordered, group_tuple)
    return WindowSnapshot(window_id=window_id, tabs=ordered, groups=group_tuple, minimized=minimized)


def resolve_selection(snapshot: WindowSnapshot, selection: Iterable[int] | None = None) -> frozenset[int]:
    """Return selected tab ids, defaulting to the snapshot's own ``selected`` flags.

    Raises ``InvalidSelectionError`` when an explicit selection names a tab the
    snapshot does not contain.
    """
    if selection is None:
        return frozenset(tab.id for tab in snapshot.tabs if tab.selected)
    selected = frozenset(selection)
    known = {tab.id for tab in snapshot.tabs}
    unknown = sorted(selected - known)
    if unknown:
        raise InvalidSelectionError(
            f"selection references tabs missing from window {snapshot.window_id}: {unknown}",
            context={"window_id": snapshot.window_id, "tab_ids": unknown},
        )
    return selected


def with_selection(snapshot: WindowSnapshot, selection: Iterable[int]) -> WindowSnapshot:
    """Return a copy of ``snapshot`` whose ``selected`` flags match ``selection``."""
    selected = resolve_selection(snapshot, selection)
    tabs = tuple(replace(tab, selected=tab.id in selected) for tab in snapshot.tabs)
    return replace(snapshot, tabs=tabs)


def _coerce_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSnapshotError(f"{what} must be an integer, got {value!r}")
    return value


def _coerce_bool(value: object) -> bool:
    return value if isinstance(value, bool) else False


def window_snapshot_from_dict(data: Mapping[str, object]) -> WindowSnapshot:
    """Decode one window object of a snapshot document.

    Tabs are listed in strip order; their indices are implied by that order.
    """
    window_id = _coerce_int(data.get("id"), "window id")
    raw_groups = data.get("groups", [])
    raw_tabs = data.get("tabs", [])
    if not isinstance(raw_groups, list) or not isinstance(raw_tabs, list):
        raise InvalidSnapshotError("window 'tabs' and 'groups' must be lists", context={"window_id": window_id})

    groups: list[TabGroup] = []
    for raw_group in raw_groups:
        if not isinstance(raw_group, Mapping):
            raise InvalidSnapshotError("group entries must be objects", context={"window_id": window_id})
        groups.append(
            TabGroup(
                id=_coerce_int(raw_group.get("id"), "group id"),
                window_id=window_id,
                collapsed=_coerce_bool(raw_group.get("collapsed")),
                title=str(raw_group.get("title", "")),
                color=str(raw_group.get("color", "grey")),
            )
        )

    tabs: list[Tab] = []
    for index, raw_tab in enumerate(raw_tabs):
        if not isinstance(raw_tab, Mapping):
            raise InvalidSnapshotError("tab entries must be objects", context={"window_id": window_id})
        raw_group_id = raw_tab.get("group")
        tabs.append(
            Tab(
                id=_coerce_int(raw_tab.get("id"), "tab id"),
                index=index,
                window_id=window_id,
                group_id=GROUP_NONE if raw_group_id is None else _coerce_int(raw_group_id, "tab group"),
                pinned=_coerce_bool(raw_tab.get("pinned")),
                selected=_coerce_bool(raw_tab.get("selected")),
                active=_coerce_bool(raw_tab.get("active")),
                title=str(raw_tab.get("title", "")),
            )
        )
    return build_window_snapshot(window_id, tabs, groups, minimized=_coerce_bool(data.get("minimized")))


def window_snapshot_to_dict(snapshot: WindowSnapshot) -> dict[str, object]:
    """Encode one window in the same shape ``window_snapshot_from_dict`` reads."""
    tabs: list[dict[str, object]] = []
    for tab in snapshot.tabs:
        entry: dict[str, object] = {"id": tab.id}
        if tab.grouped:
            entry["group"] = tab.group_id
        if tab.pinned:
            entry["pinned"] = True
        if tab.selected:
            entry["selected"] = True
        if tab.active:
            entry["active"] = True
        if tab.title:
            entry["title"] = tab.title
        tabs.append(entry)
    data: dict[str, object] = {
        "id": snapshot.window_id,
        "tabs": tabs,
        "groups": [
            {"id": group.id, "collapsed": group.collapsed, "title": group.title, "color": group.color}
            for group in snapshot.groups
        ],
    }
    if snapshot.minimized:
        data["minimized"] = True
    return data


def load_document(data: object) -> list[WindowSnapshot]:
    """Decode a ``{"windows": [...]}`` snapshot document."""
    if not isinstance(data, Mapping):
        raise InvalidSnapshotError("snapshot document must be a JSON object")
    raw_windows = data.get("windows")
    if not isinstance(raw_windows, list):
        raise InvalidSnapshotError("snapshot document needs a 'windows' list")
    snapshots: list[WindowSnapshot] = []
    for raw_window in raw_windows:
        if not isinstance(raw_window, Mapping):
            raise InvalidSnapshotError("window entries must be objects")
        snapshots.append(window_snapshot_from_dict(raw_window))
    return snapshots


def dump_document(snapshots: Iterable[WindowSnapshot]) -> dict[str, object]:
    return {"windows": [window_snapshot_to_dict(snapshot) for snapshot in snapshots]}


__all__ = [
    "WindowSnapshot",
    "build_window_snapshot",
    "resolve_selection",
    "with_selection",
    "window_snapshot_from_dict",
    "window_snapshot_to_dict",
    "load_document",
    "dump_document",
]
