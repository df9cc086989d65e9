"""Directional move planner tests.

Plans are checked literally and by replaying them on a ``StripLayout``:
groups stay contiguous, selection survives by identity, and collapsed
neighbor groups only ever move as a whole.
"""

from __future__ import annotations

import itertools
import unittest
from unittest import mock

from tabshift.errors import InvalidSelectionError, InvalidSnapshotError
from tabshift.planning.directional import (
    ACTION_HOLD,
    ACTION_MERGE,
    ACTION_MERGE_INTO_NEIGHBOR,
    ACTION_RELOCATE_NEIGHBOR,
    ACTION_SLIDE,
    ACTION_SPLIT,
    ACTION_SPLIT_THEN_RELOCATE,
    ACTION_SPLIT_THEN_SLIDE,
    ANCHOR_FULL,
    ANCHOR_PARTIAL,
    ANCHOR_STATUSES,
    ANCHOR_UNGROUPED,
    TARGET_FOCUS_GROUP,
    TARGET_HIDDEN_FOCUS_GROUP,
    TARGET_HIDDEN_GROUP,
    TARGET_RELATIONS,
    TARGET_UNGROUPED,
    TARGET_VISIBLE_GROUP,
    plan_directional_move,
    resolve_action,
    selected_runs,
)
from tabshift.planning.layout import StripLayout
from tabshift.planning.operations import GroupTabs, MoveGroup, MoveTabs, Operation, UngroupTabs
from tabshift.strip_model.notation import format_strip, parse_strip
from tabshift.strip_model.snapshot import WindowSnapshot
from tabshift.strip_model.topology import StripTopology, build_topology
from tabshift.strip_model.types import BACKWARD, FORWARD

ALL_ACTIONS = {
    ACTION_SLIDE,
    ACTION_SPLIT_THEN_SLIDE,
    ACTION_SPLIT,
    ACTION_MERGE,
    ACTION_MERGE_INTO_NEIGHBOR,
    ACTION_RELOCATE_NEIGHBOR,
    ACTION_SPLIT_THEN_RELOCATE,
    ACTION_HOLD,
}

PROPERTY_STRIPS = (
    "1* 2 3* [g5: 4 5* 6] [g6-: 7 8] 9*",
    "p1* p2 p3* [g5: 4* 5*] 6 [g7: 7* 8] 9",
    "[g5: 1* 2*] [g6-: 3 4] [g7: 5 6*] 7*",
    "1 [g5: 2* 3] [g6: 4* 5*] [g7-: 6 7] 8*",
    "[g5-: 1 2] 3* 4* [g6: 5 6]",
    "1* [g5: 2* 3*] [g6: 4 5] 6",
    "[g5: 1 2*] [g6: 3 4] [g7: 5* 6]",
    "p1 p2* [g5: 3 4* 5] 6* [g6-: 7] 8",
    "[g5-: 1 2*] 3",
    "1 [g5-: 2* 3] 4*",
    "1* [g5-: 2* 3*] 4* [g6: 5 6]",
    "[g5-: 1* 2*] [g6: 3* 4]",
    "[g5-: 1 2*] [g6: 3] 4*",
)


def _replay(snapshot: WindowSnapshot, operations: list[Operation]) -> WindowSnapshot:
    layout = StripLayout.from_snapshots([snapshot])
    for operation in operations:
        layout.apply(operation)
    return layout.snapshot(snapshot.window_id)


def _moved(text: str, direction: int) -> str:
    snapshot = parse_strip(text)
    return format_strip(_replay(snapshot, plan_directional_move(snapshot, direction)))


class DirectionalScenarioTests(unittest.TestCase):
    def test_fully_selected_group_slides_past_ungrouped_tab(self) -> None:
        snapshot = parse_strip("p1 [g1: 2* 3*] 4")

        plan = plan_directional_move(snapshot, FORWARD)

        self.assertEqual(plan, [MoveTabs((4,), 1)])
        self.assertEqual(format_strip(_replay(snapshot, plan)), "p1 4 [g1: 2* 3*]")

    def test_partially_selected_group_is_split_before_sliding(self) -> None:
        snapshot = parse_strip("[g1: 3 2*] 4")

        plan = plan_directional_move(snapshot, FORWARD)

        self.assertEqual(plan, [UngroupTabs((2,)), MoveTabs((4,), 1)])
        self.assertEqual(format_strip(_replay(snapshot, plan)), "[g1: 3] 4 2*")

    def test_selected_tab_steps_past_unselected_sibling_inside_its_group(self) -> None:
        snapshot = parse_strip("[g1: 2* 3] 4")

        plan = plan_directional_move(snapshot, FORWARD)

        self.assertEqual(plan, [MoveTabs((3,), 0)])
        self.assertEqual(format_strip(_replay(snapshot, plan)), "[g1: 3 2*] 4")

    def test_single_tab_slides_backward(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("1 2 3*"), BACKWARD), [MoveTabs((2,), 2)])
        self.assertEqual(_moved("1 2 3*", BACKWARD), "1 3* 2")

    def test_ungrouped_run_merges_into_visible_neighbor_group(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("1* [g5: 2 3]"), FORWARD), [GroupTabs((1,), 5)])
        self.assertEqual(_moved("1* [g5: 2 3]", FORWARD), "[g5: 1* 2 3]")
        self.assertEqual(_moved("[g5: 1 2] 3*", BACKWARD), "[g5: 1 2 3*]")

    def test_collapsed_neighbor_group_is_relocated_whole(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("1* [g5-: 2 3] 4"), FORWARD), [MoveGroup(5, 0)])
        self.assertEqual(_moved("1* [g5-: 2 3] 4", FORWARD), "[g5-: 2 3] 1* 4")
        self.assertEqual(plan_directional_move(parse_strip("1 [g5-: 2 3] 4*"), BACKWARD), [MoveGroup(5, 2)])
        self.assertEqual(_moved("1 [g5-: 2 3] 4*", BACKWARD), "1 4* [g5-: 2 3]")

    def test_full_group_swaps_with_neighbor_group(self) -> None:
        self.assertEqual(_moved("[g5: 1* 2*] [g6: 3 4]", FORWARD), "[g6: 3 4] [g5: 1* 2*]")

    def test_partial_group_bordering_another_group_only_splits(self) -> None:
        snapshot = parse_strip("[g5: 1 2*] [g6: 3 4]")

        plan = plan_directional_move(snapshot, FORWARD)

        self.assertEqual(plan, [UngroupTabs((2,))])
        self.assertEqual(format_strip(_replay(snapshot, plan)), "[g5: 1] 2* [g6: 3 4]")
        self.assertEqual(_moved("[g5: 1 2] [g6: 3* 4]", BACKWARD), "[g5: 1 2] 3* [g6: 4]")

    def test_partial_run_spanning_groups_splits_then_relocates_neighbor_group(self) -> None:
        snapshot = parse_strip("[g5: 1 2*] 3* [g6: 4]")

        plan = plan_directional_move(snapshot, FORWARD)

        self.assertEqual(plan, [UngroupTabs((2,)), MoveGroup(6, 1)])
        self.assertEqual(format_strip(_replay(snapshot, plan)), "[g5: 1] [g6: 4] 2* 3*")

    def test_partially_selected_collapsed_group_is_never_split(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("[g5-: 1 2*] 3"), FORWARD), [])
        self.assertEqual(plan_directional_move(parse_strip("1 [g5-: 2* 3]"), BACKWARD), [])
        self.assertEqual(plan_directional_move(parse_strip("[g5-: 1 2*] [g6: 3]"), FORWARD), [])

    def test_run_carrying_collapsed_group_is_never_regrouped(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("1* [g5-: 2* 3*] 4* [g6: 5 6]"), FORWARD), [])
        self.assertEqual(plan_directional_move(parse_strip("[g5-: 1* 2*] [g6: 3* 4]"), FORWARD), [])

    def test_fully_selected_collapsed_group_still_slides(self) -> None:
        self.assertEqual(_moved("[g5-: 1* 2*] 3", FORWARD), "3 [g5-: 1* 2*]")

    def test_run_spanning_into_target_group_merges(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("1* [g5: 2* 3]"), FORWARD), [GroupTabs((1, 2), 5)])
        self.assertEqual(_moved("1* [g5: 2* 3]", FORWARD), "[g5: 1* 2* 3]")

    def test_run_spanning_into_collapsed_group_holds(self) -> None:
        self.assertEqual(plan_directional_move(parse_strip("1* [g5-: 2* 3]"), FORWARD), [])

    def test_run_inside_collapsed_group_slides(self) -> None:
        self.assertEqual(_moved("[g5-: 1* 2]", FORWARD), "[g5-: 2 1*]")

    def test_multiple_runs_resolve_against_updated_positions(self) -> None:
        self.assertEqual(
            plan_directional_move(parse_strip("1* 2 3* 4"), FORWARD),
            [MoveTabs((4,), 2), MoveTabs((2,), 0)],
        )
        self.assertEqual(_moved("1* 2 3* 4", FORWARD), "2 1* 4 3*")
        self.assertEqual(_moved("1 2* 3 4*", BACKWARD), "2* 1 4* 3")

    def test_pinned_runs_slide_inside_pinned_prefix(self) -> None:
        self.assertEqual(_moved("p1 p2* 3", BACKWARD), "p2* p1 3")
        self.assertEqual(_moved("p1* p2 3", FORWARD), "p2 p1* 3")
        self.assertEqual(plan_directional_move(parse_strip("p1 p2* 3"), FORWARD), [])

    def test_explicit_selection_overrides_flags(self) -> None:
        snapshot = parse_strip("1 2 3*")

        self.assertEqual(plan_directional_move(snapshot, FORWARD, selection=[1]), [MoveTabs((2,), 0)])

    def test_unknown_selection_fails_fast(self) -> None:
        with self.assertRaises(InvalidSelectionError):
            plan_directional_move(parse_strip("1 2"), FORWARD, selection=[7])

    def test_invalid_direction_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            plan_directional_move(parse_strip("1* 2"), 0)

    def test_run_without_neighbor_is_reported_as_invalid_snapshot(self) -> None:
        topology = build_topology(parse_strip("1* 2"))

        with mock.patch.object(StripTopology, "neighbor", return_value=None):
            with self.assertRaises(InvalidSnapshotError):
                selected_runs(topology, topology.unpinned_tabs, FORWARD)


class DirectionalBoundaryTests(unittest.TestCase):
    def test_runs_already_at_boundary_produce_no_operations(self) -> None:
        cases = (
            ("1* 2 3", BACKWARD),
            ("1 2 3*", FORWARD),
            ("p1* 2* 3", BACKWARD),
            ("[g5: 1* 2*] 3", BACKWARD),
            ("1 [g5: 2* 3*]", FORWARD),
            ("1 2", FORWARD),
        )
        for text, direction in cases:
            with self.subTest(strip=text, direction=direction):
                self.assertEqual(plan_directional_move(parse_strip(text), direction), [])


class DirectionalPropertyTests(unittest.TestCase):
    def test_plans_keep_groups_contiguous_and_selection_intact(self) -> None:
        for text, direction in itertools.product(PROPERTY_STRIPS, (BACKWARD, FORWARD)):
            with self.subTest(strip=text, direction=direction):
                snapshot = parse_strip(text)
                result = _replay(snapshot, plan_directional_move(snapshot, direction))

                self.assertEqual(
                    {tab.id for tab in result.tabs if tab.selected},
                    {tab.id for tab in snapshot.tabs if tab.selected},
                )
                self.assertEqual(sorted(tab.id for tab in result.tabs), sorted(tab.id for tab in snapshot.tabs))

    def test_collapsed_group_membership_never_changes(self) -> None:
        for text, direction in itertools.product(PROPERTY_STRIPS, (BACKWARD, FORWARD)):
            with self.subTest(strip=text, direction=direction):
                snapshot = parse_strip(text)
                collapsed = {group.id for group in snapshot.groups if group.collapsed}
                hidden_tabs = {tab.id for tab in snapshot.tabs if tab.group_id in collapsed}
                plan = plan_directional_move(snapshot, direction)
                for operation in plan:
                    if isinstance(operation, GroupTabs):
                        self.assertNotIn(operation.group_id, collapsed)
                        self.assertFalse(hidden_tabs & set(operation.tab_ids))
                    elif isinstance(operation, UngroupTabs):
                        self.assertFalse(hidden_tabs & set(operation.tab_ids))

                result = _replay(snapshot, plan)
                for group_id in collapsed:
                    self.assertEqual(
                        {tab.id for tab in result.tabs if tab.group_id == group_id},
                        {tab.id for tab in snapshot.tabs if tab.group_id == group_id},
                    )


class DecisionTableTests(unittest.TestCase):
    def test_every_classifier_combination_resolves(self) -> None:
        for anchor, target, spans in itertools.product(ANCHOR_STATUSES, TARGET_RELATIONS, (False, True)):
            with self.subTest(anchor=anchor, target=target, spans=spans):
                self.assertIn(resolve_action(anchor, target, spans), ALL_ACTIONS)

    def test_tab_of_another_group_is_never_slid_alone(self) -> None:
        for anchor, spans in itertools.product(ANCHOR_STATUSES, (False, True)):
            for target in (TARGET_VISIBLE_GROUP, TARGET_HIDDEN_GROUP):
                action = resolve_action(anchor, target, spans)
                self.assertNotIn(action, {ACTION_SLIDE, ACTION_SPLIT_THEN_SLIDE})

    def test_collapsed_groups_never_receive_merges(self) -> None:
        for anchor, spans in itertools.product(ANCHOR_STATUSES, (False, True)):
            self.assertNotEqual(resolve_action(anchor, TARGET_HIDDEN_GROUP, spans), ACTION_MERGE_INTO_NEIGHBOR)
            self.assertNotEqual(resolve_action(anchor, TARGET_HIDDEN_FOCUS_GROUP, spans), ACTION_MERGE)

    def test_selected_rows(self) -> None:
        self.assertEqual(resolve_action(ANCHOR_FULL, TARGET_UNGROUPED, False), ACTION_SLIDE)
        self.assertEqual(resolve_action(ANCHOR_PARTIAL, TARGET_UNGROUPED, True), ACTION_SPLIT_THEN_SLIDE)
        self.assertEqual(resolve_action(ANCHOR_UNGROUPED, TARGET_FOCUS_GROUP, True), ACTION_MERGE)
        self.assertEqual(resolve_action(ANCHOR_UNGROUPED, TARGET_VISIBLE_GROUP, False), ACTION_MERGE_INTO_NEIGHBOR)
        self.assertEqual(resolve_action(ANCHOR_UNGROUPED, TARGET_HIDDEN_GROUP, False), ACTION_RELOCATE_NEIGHBOR)
        self.assertEqual(resolve_action(ANCHOR_FULL, TARGET_VISIBLE_GROUP, False), ACTION_RELOCATE_NEIGHBOR)
        self.assertEqual(resolve_action(ANCHOR_PARTIAL, TARGET_HIDDEN_GROUP, False), ACTION_SPLIT)
        self.assertEqual(resolve_action(ANCHOR_PARTIAL, TARGET_VISIBLE_GROUP, True), ACTION_SPLIT_THEN_RELOCATE)
        self.assertEqual(resolve_action(ANCHOR_FULL, TARGET_HIDDEN_FOCUS_GROUP, True), ACTION_HOLD)

    def test_unknown_classifiers_raise(self) -> None:
        with self.assertRaises(ValueError):
            resolve_action("sideways", TARGET_UNGROUPED, False)
        with self.assertRaises(ValueError):
            resolve_action(ANCHOR_FULL, "elsewhere", False)


if __name__ == "__main__":
    unittest.main()
