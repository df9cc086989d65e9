"""Plan gathering the selected tabs around the active tab.

Selected tabs before the active tab end up right before it and those after it
right after it, each side keeping its order. Pinned tabs never leave the pinned
prefix, so they stop at the prefix edge nearest the active tab. Unpinned tabs
join the active tab's group when it has one and leave their own group
otherwise.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import InvalidSelectionError
from ..sequence import partition
from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.topology import build_topology
from ..strip_model.types import Tab
from .directional import PlanBuilder
from .layout import StripLayout
from .operations import GroupTabs, MoveTabs, Operation, UngroupTabs


def _is_pinned(tab: Tab) -> bool:
    return tab.pinned


def plan_grab_tabs(
    snapshot: WindowSnapshot,
    tab_id: int | None = None,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Return operations pulling the selection next to the active (or given) tab."""
    current = snapshot.active_tab() if tab_id is None else snapshot.tab_by_id(tab_id)
    if current is None:
        raise InvalidSelectionError(
            f"no initiating tab in window {snapshot.window_id}",
            context={"window_id": snapshot.window_id, "tab_id": tab_id},
        )
    topology = build_topology(snapshot, selection)
    layout = StripLayout.from_snapshots([snapshot])
    builder = PlanBuilder(layout)
    window_id = snapshot.window_id

    selected = [tab for tab in snapshot.tabs if topology.is_selected(tab) and tab.id != current.id]
    left = [tab for tab in selected if tab.index < current.index]
    right = [tab for tab in selected if tab.index > current.index]
    left_pinned, left_unpinned = partition(left, _is_pinned)
    right_pinned, right_unpinned = partition(right, _is_pinned)
    unpinned_ids = tuple(tab.id for tab in left_unpinned + right_unpinned)

    if not current.grouped:
        grouped_ids = tuple(tab.id for tab in left_unpinned + right_unpinned if tab.grouped)
        if grouped_ids:
            builder.emit(UngroupTabs(grouped_ids))

    if left_pinned:
        ids = tuple(tab.id for tab in left_pinned)
        if current.pinned:
            builder.emit(MoveTabs(ids, layout.index_of(current.id) - len(ids)))
        else:
            builder.emit(MoveTabs(ids, layout.pinned_count(window_id) - len(ids)))
    if left_unpinned:
        ids = tuple(tab.id for tab in left_unpinned)
        builder.emit(MoveTabs(ids, layout.index_of(current.id) - len(ids)))
    if right_pinned:
        builder.emit(MoveTabs(tuple(tab.id for tab in right_pinned), layout.index_of(current.id) + 1))
    if right_unpinned:
        ids = tuple(tab.id for tab in right_unpinned)
        if current.pinned:
            builder.emit(MoveTabs(ids, layout.pinned_count(window_id)))
        else:
            builder.emit(MoveTabs(ids, layout.index_of(current.id) + 1))

    if current.grouped and unpinned_ids:
        builder.emit(GroupTabs(unpinned_ids, current.group_id))
    return builder.operations


__all__ = ["plan_grab_tabs"]
