"""Plan moving the selection into another window.

Pinned selected tabs land right after the destination's pinned prefix and are
pinned again there, since a browser drops the pin when a tab changes window.
Unpinned tabs are appended chunk by chunk: a fully selected group travels as
a whole group, anything else travels as individual tabs. The plan ends by
focusing the destination and highlighting the moved tabs. The initiating tab
comes first when it ended up in the destination, so it stays active there; an
unselected initiating tab stays behind in the source window and is left out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..sequence import chunk, partition
from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.topology import build_topology
from ..strip_model.types import GROUP_NONE, Tab
from .directional import PlanBuilder
from .layout import StripLayout
from .operations import END_INDEX, FocusWindow, HighlightTabs, MoveGroup, MoveTabs, Operation, SetPinned

logger = logging.getLogger(__name__)


def _by_group(tab: Tab) -> int:
    return tab.group_id


def plan_move_to_window(
    source: WindowSnapshot,
    destination: WindowSnapshot,
    selection: Iterable[int] | None = None,
    initiating_tab_id: int | None = None,
) -> list[Operation]:
    """Return operations relocating the selection of ``source`` into ``destination``.

    Moving into the same window is refused with an empty plan.
    """
    if source.window_id == destination.window_id:
        logger.debug("window %s is both source and destination; nothing to do", source.window_id)
        return []
    topology = build_topology(source, selection)
    if not topology.selected_ids:
        return []
    layout = StripLayout.from_snapshots([source, destination])
    builder = PlanBuilder(layout)
    destination_id = destination.window_id
    moved_ids: list[int] = []

    pinned_selected = [tab.id for tab in topology.pinned_tabs if topology.is_selected(tab)]
    if pinned_selected:
        builder.emit(MoveTabs(tuple(pinned_selected), layout.pinned_count(destination_id), destination_id))
        for tab_id in pinned_selected:
            builder.emit(SetPinned(tab_id, True))
        moved_ids.extend(pinned_selected)

    for group_id, tabs in chunk(topology.unpinned_tabs, _by_group):
        selected_tabs, other_tabs = partition(tabs, topology.is_selected)
        if not selected_tabs:
            continue
        if group_id != GROUP_NONE and not other_tabs:
            logger.debug("group %s fully selected: moving whole group to window %s", group_id, destination_id)
            builder.emit(MoveGroup(group_id, END_INDEX, destination_id))
        else:
            builder.emit(MoveTabs(tuple(tab.id for tab in selected_tabs), END_INDEX, destination_id))
        moved_ids.extend(tab.id for tab in selected_tabs)

    builder.operations.append(FocusWindow(destination_id))
    highlight_ids = list(moved_ids)
    if initiating_tab_id is not None and layout.tab_window.get(initiating_tab_id) == destination_id:
        highlight_ids = [initiating_tab_id] + [tab_id for tab_id in moved_ids if tab_id != initiating_tab_id]
    indices = tuple(layout.index_of(tab_id) for tab_id in highlight_ids)
    builder.operations.append(HighlightTabs(destination_id, indices))
    return builder.operations


__all__ = ["plan_move_to_window"]
