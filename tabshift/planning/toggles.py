"""Toggle planners for pinning, grouping and collapsing.

Each toggle looks at the selected tabs of one window and flips them all the
same way: if any of them lacks the state, all of them gain it, otherwise all
of them lose it.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.topology import build_topology
from ..strip_model.types import Tab
from .directional import PlanBuilder
from .layout import StripLayout
from .operations import CreateGroup, HighlightTabs, MoveTabs, Operation, SetGroupCollapsed, SetPinned, UngroupTabs
from .selection import _require_tab


def _selected_tabs(snapshot: WindowSnapshot, selection: Iterable[int] | None) -> list[Tab]:
    topology = build_topology(snapshot, selection)
    return [tab for tab in snapshot.tabs if topology.is_selected(tab)]


def plan_toggle_pin(snapshot: WindowSnapshot, selection: Iterable[int] | None = None) -> list[Operation]:
    """Pin every selected tab, or unpin them all when they are all pinned already.

    Pinning walks the strip left to right and unpinning right to left, so the
    selected tabs keep their relative order across the pinned boundary.
    """
    selected = _selected_tabs(snapshot, selection)
    pin = any(not tab.pinned for tab in selected)
    ordered = selected if pin else selected[::-1]
    return [SetPinned(tab.id, pin) for tab in ordered if tab.pinned != pin]


def plan_toggle_group(
    snapshot: WindowSnapshot,
    tab_id: int | None = None,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Group the selected tabs into a new group, or ungroup them.

    Pinned tabs never join a group and do not take part in the decision. After
    grouping the whole new group is selected with the initiating tab active.
    Ungrouped tabs leave the middle of a group toward its right edge; tabs
    already at the left edge stay put.
    """
    current = _require_tab(snapshot, tab_id)
    candidates = [tab for tab in _selected_tabs(snapshot, selection) if not tab.pinned]
    if not candidates:
        return []
    layout = StripLayout.from_snapshots([snapshot])
    builder = PlanBuilder(layout)

    if any(not tab.grouped for tab in candidates):
        builder.emit(CreateGroup(tuple(tab.id for tab in candidates)))
        group_id = layout.group_of(candidates[0].id)
        indices = [layout.index_of(current.id)]
        indices.extend(layout.index_of(member) for member in layout.group_members(group_id))
        builder.emit(HighlightTabs(snapshot.window_id, tuple(dict.fromkeys(indices))))
        return builder.operations

    leaving = {tab.id for tab in candidates}
    for group_id in dict.fromkeys(tab.group_id for tab in candidates):
        members = layout.group_members(group_id)
        staying = [member for member in members if member not in leaving]
        if staying:
            leading = members[: members.index(staying[0])]
            trailing = tuple(member for member in members if member in leaving and member not in leading)
            if trailing:
                others = [other for other in layout.tab_ids(snapshot.window_id) if other not in trailing]
                builder.emit(MoveTabs(trailing, others.index(staying[-1]) + 1))
    builder.emit(UngroupTabs(tuple(tab.id for tab in candidates)))
    return builder.operations


def plan_toggle_collapse_groups(
    snapshot: WindowSnapshot,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Collapse every group not holding a selected tab, or expand them all.

    Groups holding a selected tab are expanded either way so the selection
    stays visible.
    """
    active_group_ids = {tab.group_id for tab in _selected_tabs(snapshot, selection) if tab.grouped}
    active_groups = [group for group in snapshot.groups if group.id in active_group_ids]
    other_groups = [group for group in snapshot.groups if group.id not in active_group_ids]
    collapse = any(not group.collapsed for group in other_groups)
    operations: list[Operation] = [SetGroupCollapsed(group.id, False) for group in active_groups if group.collapsed]
    operations.extend(SetGroupCollapsed(group.id, collapse) for group in other_groups if group.collapsed != collapse)
    return operations


__all__ = ["plan_toggle_pin", "plan_toggle_group", "plan_toggle_collapse_groups"]
