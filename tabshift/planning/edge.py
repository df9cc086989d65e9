"""Plan moving selected tabs to the start or end of the strip.

Pinned selected tabs move to the matching end of the pinned prefix. The
unpinned suffix is chunked by group:

- a fully selected group moves as one block to the strip edge (never into
  the pinned prefix);
- a partially selected group only reorders inside itself, its selected tabs
  moving to the group's own edge;
- selected ungrouped tabs move to the strip edge.

Units keep their relative order: moving backward visits chunks in strip order
and stacks them after the pinned prefix, moving forward visits them in
reverse and stacks them from the end.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..sequence import chunk, partition
from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.topology import build_topology
from ..strip_model.types import BACKWARD, GROUP_NONE, Tab, check_direction
from .directional import PlanBuilder
from .layout import StripLayout
from .operations import MoveGroup, MoveTabs, Operation

logger = logging.getLogger(__name__)


def _by_group(tab: Tab) -> int:
    return tab.group_id


def plan_edge_move(
    snapshot: WindowSnapshot,
    direction: int,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Return operations moving the selection to the far start (backward) or end (forward)."""
    check_direction(direction)
    topology = build_topology(snapshot, selection)
    layout = StripLayout.from_snapshots([snapshot])
    builder = PlanBuilder(layout)
    window_id = snapshot.window_id

    pinned_selected = [tab.id for tab in topology.pinned_tabs if topology.is_selected(tab)]
    if pinned_selected:
        if direction == BACKWARD:
            builder.emit(MoveTabs(tuple(pinned_selected), 0))
        else:
            builder.emit(MoveTabs(tuple(pinned_selected), layout.pinned_count(window_id) - len(pinned_selected)))

    chunks = chunk(topology.unpinned_tabs, _by_group)
    if direction == BACKWARD:
        cursor = layout.pinned_count(window_id)
    else:
        chunks.reverse()
        cursor = len(layout.tab_ids(window_id))

    for group_id, tabs in chunks:
        selected_tabs, other_tabs = partition(tabs, topology.is_selected)
        if not selected_tabs:
            continue
        selected_ids = tuple(tab.id for tab in selected_tabs)

        if group_id != GROUP_NONE and not other_tabs:
            logger.debug("group %s fully selected: moving whole group to edge", group_id)
            if direction == BACKWARD:
                builder.emit(MoveGroup(group_id, cursor))
                cursor += len(tabs)
            else:
                cursor -= len(tabs)
                builder.emit(MoveGroup(group_id, cursor))
        elif group_id != GROUP_NONE:
            logger.debug("group %s partially selected: moving tabs to the group edge", group_id)
            members = layout.group_members(group_id)
            if direction == BACKWARD:
                index = layout.index_of(members[0])
            else:
                index = layout.index_of(members[-1]) - len(selected_ids) + 1
            builder.emit(MoveTabs(selected_ids, index))
        else:
            if direction == BACKWARD:
                builder.emit(MoveTabs(selected_ids, cursor))
                cursor += len(selected_ids)
            else:
                cursor -= len(selected_ids)
                builder.emit(MoveTabs(selected_ids, cursor))
    return builder.operations


__all__ = ["plan_edge_move"]
