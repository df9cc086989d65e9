"""Selection and focus planners.

These return highlight/activation operations computed from one snapshot. The
initiating (active) tab always comes first in a highlight so it stays active.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import InvalidSelectionError
from ..sequence import chunk
from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.topology import build_topology
from ..strip_model.types import BACKWARD, Tab, check_direction
from .operations import ActivateTab, FocusWindow, HighlightTabs, Operation


def _require_tab(snapshot: WindowSnapshot, tab_id: int | None) -> Tab:
    """Resolve the initiating tab, defaulting to the snapshot's active tab."""
    if tab_id is None:
        tab = snapshot.active_tab()
        if tab is None:
            raise InvalidSelectionError(
                f"window {snapshot.window_id} has no active tab", context={"window_id": snapshot.window_id}
            )
        return tab
    tab = snapshot.tab_by_id(tab_id)
    if tab is None:
        raise InvalidSelectionError(
            f"tab {tab_id} is not in window {snapshot.window_id}",
            context={"window_id": snapshot.window_id, "tab_id": tab_id},
        )
    return tab


def _highlight(snapshot: WindowSnapshot, indices: Iterable[int]) -> list[Operation]:
    ordered = tuple(dict.fromkeys(indices))
    return [HighlightTabs(snapshot.window_id, ordered)]


def plan_select_tab(snapshot: WindowSnapshot, tab_id: int | None = None) -> list[Operation]:
    """Deselect everything except the initiating tab."""
    tab = _require_tab(snapshot, tab_id)
    return _highlight(snapshot, [tab.index])


def plan_select_adjacent_tab(
    snapshot: WindowSnapshot,
    direction: int,
    tab_id: int | None = None,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Grow or shrink every selected run by one tab toward ``direction``.

    When the selection extends from the active tab against ``direction`` the
    runs shrink from that side instead, like extending a text selection.
    Indices are clamped at the strip ends.
    """
    check_direction(direction)
    current = _require_tab(snapshot, tab_id)
    topology = build_topology(snapshot, selection)
    tabs = snapshot.tabs
    last = len(tabs) - 1

    if direction == BACKWARD:
        shrinking = current.index < last and topology.is_selected(tabs[current.index + 1])
    else:
        shrinking = current.index > 0 and topology.is_selected(tabs[current.index - 1])
    if (direction == BACKWARD) == shrinking:
        anchor_at, focus_at = 0, -1
    else:
        anchor_at, focus_at = -1, 0

    indices = [current.index]
    for is_selected, run in chunk(tabs, topology.is_selected):
        if not is_selected:
            continue
        anchor_index = run[anchor_at].index
        focus_index = max(0, min(run[focus_at].index + direction, last))
        start, end = sorted((anchor_index, focus_index))
        indices.extend(range(start, end + 1))
    return _highlight(snapshot, indices)


def _group_key(tab: Tab) -> object:
    return "pinned" if tab.pinned else tab.group_id


def plan_select_tabs_in_group(
    snapshot: WindowSnapshot,
    tab_id: int | None = None,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Extend each selection to its whole group; ungrouped and pinned blocks count as groups."""
    current = _require_tab(snapshot, tab_id)
    topology = build_topology(snapshot, selection)
    indices = [current.index]
    for _, block in chunk(snapshot.tabs, _group_key):
        if any(topology.is_selected(tab) for tab in block):
            indices.extend(tab.index for tab in block)
    return _highlight(snapshot, indices)


def plan_select_all_tabs(snapshot: WindowSnapshot, tab_id: int | None = None) -> list[Operation]:
    current = _require_tab(snapshot, tab_id)
    return _highlight(snapshot, [current.index, *(tab.index for tab in snapshot.tabs)])


def plan_select_right_tabs(
    snapshot: WindowSnapshot,
    tab_id: int | None = None,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Select from the leftmost selected tab through the end of the strip."""
    current = _require_tab(snapshot, tab_id)
    topology = build_topology(snapshot, selection)
    start = next((tab.index for tab in snapshot.tabs if topology.is_selected(tab)), current.index)
    return _highlight(snapshot, [current.index, *range(start, len(snapshot.tabs))])


def plan_flip_tab_selection(
    snapshot: WindowSnapshot,
    tab_id: int | None = None,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Make the opposite end of the active tab's run the active tab.

    The flip faces forward first; only when the active tab already is the
    forward end does it flip backward.
    """
    current = _require_tab(snapshot, tab_id)
    topology = build_topology(snapshot, selection)
    tabs = snapshot.tabs
    focus_index = current.index
    while focus_index < len(tabs) - 1 and topology.is_selected(tabs[focus_index + 1]):
        focus_index += 1
    if focus_index == current.index:
        while focus_index > 0 and topology.is_selected(tabs[focus_index - 1]):
            focus_index -= 1
    selected_indices = [tab.index for tab in tabs if topology.is_selected(tab)]
    return _highlight(snapshot, [focus_index, *selected_indices])


def plan_focus_relative_tab(snapshot: WindowSnapshot, delta: int, tab_id: int | None = None) -> list[Operation]:
    """Activate the visible tab ``delta`` steps away, wrapping around.

    Tabs inside collapsed groups are skipped.
    """
    current = _require_tab(snapshot, tab_id)
    visible = build_topology(snapshot).visible_tabs()
    if not visible:
        return []
    position = next((index for index, tab in enumerate(visible) if tab.id == current.id), -1)
    target = visible[(position + delta) % len(visible)]
    if target.id == current.id:
        return []
    return [ActivateTab(target.id)]


def plan_focus_tab_by_index(snapshot: WindowSnapshot, index: int) -> list[Operation]:
    """Activate the ``index``-th visible tab; negative indices count from the end."""
    visible = build_topology(snapshot).visible_tabs()
    if not -len(visible) <= index < len(visible):
        return []
    return [ActivateTab(visible[index].id), FocusWindow(snapshot.window_id)]


__all__ = [
    "plan_select_tab",
    "plan_select_adjacent_tab",
    "plan_select_tabs_in_group",
    "plan_select_all_tabs",
    "plan_select_right_tabs",
    "plan_flip_tab_selection",
    "plan_focus_relative_tab",
    "plan_focus_tab_by_index",
]
