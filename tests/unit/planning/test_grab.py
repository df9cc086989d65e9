"""Tests for gathering the selection around the active tab."""

from __future__ import annotations

import unittest

from tabshift.errors import InvalidSelectionError
from tabshift.planning.grab import plan_grab_tabs
from tabshift.planning.layout import StripLayout
from tabshift.planning.operations import GroupTabs, MoveTabs
from tabshift.strip_model.notation import format_strip, parse_strip


def _grabbed(text: str) -> str:
    snapshot = parse_strip(text)
    layout = StripLayout.from_snapshots([snapshot])
    for operation in plan_grab_tabs(snapshot):
        layout.apply(operation)
    return format_strip(layout.snapshot(1))


class GrabTabsTests(unittest.TestCase):
    def test_selection_gathers_on_both_sides_of_active_tab(self) -> None:
        snapshot = parse_strip("1* 2 3! 4 5*")

        self.assertEqual(plan_grab_tabs(snapshot), [MoveTabs((1,), 1), MoveTabs((5,), 3)])
        self.assertEqual(_grabbed("1* 2 3! 4 5*"), "2 1* 3! 5* 4")

    def test_grabbed_tabs_join_the_active_tabs_group(self) -> None:
        snapshot = parse_strip("1* [g5: 2 3!] 4*")

        plan = plan_grab_tabs(snapshot)

        self.assertEqual(plan[-1], GroupTabs((1, 4), 5))
        self.assertEqual(_grabbed("1* [g5: 2 3!] 4*"), "[g5: 2 1* 3! 4*]")

    def test_grabbed_tabs_leave_their_group_next_to_ungrouped_active_tab(self) -> None:
        self.assertEqual(_grabbed("[g5: 1* 2] 3!"), "[g5: 2] 1* 3!")

    def test_pinned_tabs_stop_at_pinned_prefix(self) -> None:
        self.assertEqual(_grabbed("p1* p2 p3! 4 5*"), "p2 p1* p3! 5* 4")
        self.assertEqual(_grabbed("p1* p2 3! 4"), "p2 p1* 3! 4")

    def test_explicit_tab_and_missing_tab(self) -> None:
        snapshot = parse_strip("1* 2 3")

        self.assertEqual(plan_grab_tabs(snapshot, tab_id=3), [MoveTabs((1,), 1)])
        with self.assertRaises(InvalidSelectionError):
            plan_grab_tabs(snapshot)
        with self.assertRaises(InvalidSelectionError):
            plan_grab_tabs(snapshot, tab_id=9)


if __name__ == "__main__":
    unittest.main()
