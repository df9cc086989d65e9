"""Plan moving the selection one step backward or forward along the strip.

The strip is handled as two independent regions, the pinned prefix and the
unpinned suffix. Each region is chunked into runs of selected/unselected tabs.
A selected run already touching the region edge in the direction of travel is
left alone, so every remaining run has an unselected ``target`` right past its
leading (``focus``) tab.

Pinned runs always slide. Unpinned runs are classified by three values:

- anchor status: the run's trailing tab is ungrouped, or its group is
  partially/fully selected;
- whether the run spans more than one group (anchor and focus differ);
- how the target relates to the run: inside the focus tab's group (visible or
  collapsed), ungrouped, or inside another visible/collapsed group.

``resolve_action`` maps each combination to one action:

- slide: move the target behind the anchor;
- split-then-slide: ungroup the run's tabs from a partially selected anchor
  group first, then slide;
- split: only ungroup, when the run already borders another group;
- merge: add the run to the focus tab's group;
- merge-into-neighbor: add an ungrouped run to the target's visible group;
- relocate-neighbor: move the target's whole group behind the anchor;
- split-then-relocate: for a run spanning groups, ungroup first, then relocate;
- hold: emit nothing.

Any action that would add a tab to or remove a tab from a collapsed group
becomes hold; collapsed groups only ever move whole.

Decisions come from the snapshot alone. Destination indices are read from a
working ``StripLayout`` that replays what was already emitted, and runs are
visited leading run first so earlier operations never shift tabs behind a
later run's anchor.

Examples (``*`` = selected, ``[..]`` = group), direction forward::

    [A* B*] C      -> C [A* B*]        slide (group fully selected)
    [A B*] C       -> [A] C B*         split-then-slide
    [A B*] [C D]   -> [A] B* [C D]     split
    A* [B C]       -> [A* B C]         merge-into-neighbor
    A* [[B C]]     -> [[B C]] A*       relocate-neighbor (collapsed group)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..errors import InvalidSnapshotError
from ..sequence import chunk
from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.topology import SELECTION_FULL, SELECTION_PARTIAL, StripTopology, build_topology
from ..strip_model.types import BACKWARD, FORWARD, Tab, check_direction
from .layout import StripLayout
from .operations import GroupTabs, MoveGroup, MoveTabs, Operation, UngroupTabs

logger = logging.getLogger(__name__)

ANCHOR_UNGROUPED = "ungrouped"
ANCHOR_PARTIAL = SELECTION_PARTIAL
ANCHOR_FULL = SELECTION_FULL
ANCHOR_STATUSES = (ANCHOR_UNGROUPED, ANCHOR_PARTIAL, ANCHOR_FULL)

TARGET_FOCUS_GROUP = "focus-group"
TARGET_HIDDEN_FOCUS_GROUP = "hidden-focus-group"
TARGET_UNGROUPED = "ungrouped"
TARGET_VISIBLE_GROUP = "visible-group"
TARGET_HIDDEN_GROUP = "hidden-group"
TARGET_RELATIONS = (
    TARGET_FOCUS_GROUP,
    TARGET_HIDDEN_FOCUS_GROUP,
    TARGET_UNGROUPED,
    TARGET_VISIBLE_GROUP,
    TARGET_HIDDEN_GROUP,
)

ACTION_SLIDE = "slide"
ACTION_SPLIT_THEN_SLIDE = "split-then-slide"
ACTION_MERGE = "merge"
ACTION_MERGE_INTO_NEIGHBOR = "merge-into-neighbor"
ACTION_RELOCATE_NEIGHBOR = "relocate-neighbor"
ACTION_SPLIT = "split"
ACTION_SPLIT_THEN_RELOCATE = "split-then-relocate"
ACTION_HOLD = "hold"


@dataclass(frozen=True)
class SelectedRun:
    """A maximal run of selected tabs plus its edges for one direction of travel."""

    tabs: tuple[Tab, ...]
    anchor: Tab
    focus: Tab
    target: Tab

    @property
    def tab_ids(self) -> tuple[int, ...]:
        return tuple(tab.id for tab in self.tabs)

    @property
    def spans_groups(self) -> bool:
        return self.anchor.group_id != self.focus.group_id


def selected_runs(topology: StripTopology, region: Sequence[Tab], direction: int) -> list[SelectedRun]:
    """Return the movable selected runs of ``region``, leading run first.

    A selected run touching the region edge in ``direction`` has nowhere to go
    and is dropped.
    """
    check_direction(direction)
    runs = chunk(region, topology.is_selected)
    if not runs:
        return []
    edge = 0 if direction == BACKWARD else -1
    if runs[edge][0]:
        runs.pop(edge)

    result: list[SelectedRun] = []
    for is_selected, tabs in runs:
        if not is_selected:
            continue
        focus, anchor = (tabs[0], tabs[-1]) if direction == BACKWARD else (tabs[-1], tabs[0])
        target = topology.neighbor(focus, direction)
        if target is None:
            raise InvalidSnapshotError(
                f"selected run ending at tab {focus.id} has no neighbor",
                context={"tab_id": focus.id},
            )
        result.append(SelectedRun(tabs=tuple(tabs), anchor=anchor, focus=focus, target=target))
    if direction == FORWARD:
        result.reverse()
    return result


def classify_anchor(topology: StripTopology, run: SelectedRun) -> str:
    if not run.anchor.grouped:
        return ANCHOR_UNGROUPED
    return topology.group_selection_status(run.anchor.group_id)


def classify_target(topology: StripTopology, run: SelectedRun) -> str:
    target = run.target
    if not target.grouped:
        return TARGET_UNGROUPED
    hidden = topology.is_group_hidden(target.group_id)
    if target.group_id == run.focus.group_id:
        return TARGET_HIDDEN_FOCUS_GROUP if hidden else TARGET_FOCUS_GROUP
    return TARGET_HIDDEN_GROUP if hidden else TARGET_VISIBLE_GROUP


def resolve_action(anchor_status: str, target_relation: str, spans_groups: bool) -> str:
    """Map run classifiers to one action; unknown classifier values raise ``ValueError``."""
    if anchor_status not in ANCHOR_STATUSES:
        raise ValueError(f"unknown anchor status: {anchor_status!r}")
    if target_relation not in TARGET_RELATIONS:
        raise ValueError(f"unknown target relation: {target_relation!r}")

    if target_relation == TARGET_FOCUS_GROUP:
        return ACTION_MERGE if spans_groups else ACTION_SLIDE
    if target_relation == TARGET_HIDDEN_FOCUS_GROUP:
        return ACTION_HOLD if spans_groups else ACTION_SLIDE
    if target_relation == TARGET_UNGROUPED:
        return ACTION_SPLIT_THEN_SLIDE if anchor_status == ANCHOR_PARTIAL else ACTION_SLIDE
    # The target belongs to another group: it is never slid alone.
    if anchor_status == ANCHOR_PARTIAL:
        return ACTION_SPLIT_THEN_RELOCATE if spans_groups else ACTION_SPLIT
    if anchor_status == ANCHOR_UNGROUPED and not spans_groups and target_relation == TARGET_VISIBLE_GROUP:
        return ACTION_MERGE_INTO_NEIGHBOR
    return ACTION_RELOCATE_NEIGHBOR


SPLITTING_ACTIONS = (ACTION_SPLIT, ACTION_SPLIT_THEN_SLIDE, ACTION_SPLIT_THEN_RELOCATE)
MERGING_ACTIONS = (ACTION_MERGE, ACTION_MERGE_INTO_NEIGHBOR)


def changes_hidden_membership(topology: StripTopology, run: SelectedRun, action: str) -> bool:
    """Whether ``action`` would add or remove a collapsed group's member."""
    if action in SPLITTING_ACTIONS:
        return topology.is_group_hidden(run.anchor.group_id)
    if action in MERGING_ACTIONS:
        joined = run.focus.group_id if action == ACTION_MERGE else run.target.group_id
        return any(
            tab.grouped and tab.group_id != joined and topology.is_group_hidden(tab.group_id) for tab in run.tabs
        )
    return False


class PlanBuilder:
    """Collects operations while replaying them on a working layout.

    Operations that would not change the layout are dropped.
    """

    def __init__(self, layout: StripLayout) -> None:
        self.layout = layout
        self.operations: list[Operation] = []

    def emit(self, operation: Operation) -> None:
        if self.layout.apply(operation):
            self.operations.append(operation)


def _slide(builder: PlanBuilder, run: SelectedRun) -> None:
    builder.emit(MoveTabs((run.target.id,), builder.layout.index_of(run.anchor.id)))


def _split(builder: PlanBuilder, run: SelectedRun) -> None:
    split_ids = tuple(tab.id for tab in run.tabs if tab.group_id == run.anchor.group_id)
    builder.emit(UngroupTabs(split_ids))


def _relocate_neighbor(builder: PlanBuilder, run: SelectedRun, direction: int) -> None:
    group_id = run.target.group_id
    anchor_index = builder.layout.index_of(run.anchor.id)
    if direction == FORWARD:
        index = anchor_index
    else:
        index = anchor_index - len(builder.layout.group_members(group_id)) + 1
    builder.emit(MoveGroup(group_id, index))


def _emit_action(builder: PlanBuilder, run: SelectedRun, action: str, direction: int) -> None:
    if action == ACTION_SLIDE:
        _slide(builder, run)
    elif action == ACTION_SPLIT_THEN_SLIDE:
        _split(builder, run)
        _slide(builder, run)
    elif action == ACTION_MERGE:
        builder.emit(GroupTabs(run.tab_ids, run.focus.group_id))
    elif action == ACTION_MERGE_INTO_NEIGHBOR:
        builder.emit(GroupTabs(run.tab_ids, run.target.group_id))
    elif action == ACTION_RELOCATE_NEIGHBOR:
        _relocate_neighbor(builder, run, direction)
    elif action == ACTION_SPLIT:
        _split(builder, run)
    elif action == ACTION_SPLIT_THEN_RELOCATE:
        _split(builder, run)
        _relocate_neighbor(builder, run, direction)
    elif action != ACTION_HOLD:
        raise ValueError(f"unknown action: {action!r}")


def plan_directional_move(
    snapshot: WindowSnapshot,
    direction: int,
    selection: Iterable[int] | None = None,
) -> list[Operation]:
    """Return operations moving every selected run one step in ``direction``.

    ``selection`` defaults to the snapshot's ``selected`` flags. An empty list
    means every run already sits at its boundary.
    """
    check_direction(direction)
    topology = build_topology(snapshot, selection)
    builder = PlanBuilder(StripLayout.from_snapshots([snapshot]))

    for run in selected_runs(topology, topology.pinned_tabs, direction):
        _slide(builder, run)

    for run in selected_runs(topology, topology.unpinned_tabs, direction):
        anchor_status = classify_anchor(topology, run)
        target_relation = classify_target(topology, run)
        action = resolve_action(anchor_status, target_relation, run.spans_groups)
        if changes_hidden_membership(topology, run, action):
            action = ACTION_HOLD
        logger.debug(
            "run %s: anchor=%s target=%s spans=%s -> %s",
            list(run.tab_ids),
            anchor_status,
            target_relation,
            run.spans_groups,
            action,
        )
        _emit_action(builder, run, action, direction)
    return builder.operations


__all__ = [
    "ANCHOR_UNGROUPED",
    "ANCHOR_PARTIAL",
    "ANCHOR_FULL",
    "ANCHOR_STATUSES",
    "TARGET_FOCUS_GROUP",
    "TARGET_HIDDEN_FOCUS_GROUP",
    "TARGET_UNGROUPED",
    "TARGET_VISIBLE_GROUP",
    "TARGET_HIDDEN_GROUP",
    "TARGET_RELATIONS",
    "ACTION_SLIDE",
    "ACTION_SPLIT_THEN_SLIDE",
    "ACTION_MERGE",
    "ACTION_MERGE_INTO_NEIGHBOR",
    "ACTION_RELOCATE_NEIGHBOR",
    "ACTION_SPLIT",
    "ACTION_SPLIT_THEN_RELOCATE",
    "ACTION_HOLD",
    "SelectedRun",
    "PlanBuilder",
    "selected_runs",
    "classify_anchor",
    "classify_target",
    "resolve_action",
    "changes_hidden_membership",
    "plan_directional_move",
]
