"""Command handler tests against the in-memory host."""

from __future__ import annotations

import unittest

from tabshift.errors import HostOperationFailedError
from tabshift.planning.operations import END_INDEX, ActivateTab, CreateGroup, FocusWindow, HighlightTabs, MoveTabs
from tabshift.runtime import commands
from tabshift.runtime.commands import CommandContext
from tabshift.runtime.host import MemoryTabHost
from tabshift.runtime.recent_tabs import RecentTabs
from tabshift.strip_model.notation import format_strip, parse_strip


class _SilentHost(MemoryTabHost):
    """Host that activates tabs without announcing it."""

    async def activate_tab(self, tab_id: int) -> None:
        self._apply(ActivateTab(tab_id))


def _host(*strips: str, minimized: tuple[int, ...] = (), host_type: type[MemoryTabHost] = MemoryTabHost):
    return host_type(
        parse_strip(text, window_id, minimized=window_id in minimized)
        for window_id, text in enumerate(strips, start=1)
    )


def _context(host: MemoryTabHost, tab_id: int, **kwargs) -> CommandContext:
    snapshot = host.layout.snapshot(host.layout.window_of(tab_id))
    tab = snapshot.tab_by_id(tab_id)
    assert tab is not None
    kwargs.setdefault("recent_tabs", RecentTabs())
    return CommandContext(host=host, tab=tab, **kwargs)


def _strips(host: MemoryTabHost) -> dict[int, str]:
    return {snapshot.window_id: format_strip(snapshot) for snapshot in host.layout.snapshots()}


class MoveCommandTests(unittest.IsolatedAsyncioTestCase):
    async def test_move_left_and_right(self) -> None:
        host = _host("1 2 3*!")

        self.assertEqual(await commands.move_tab_left(_context(host, 3)), 1)
        self.assertEqual(_strips(host), {1: "1 3*! 2"})
        self.assertEqual(await commands.move_tab_right(_context(host, 3)), 1)
        self.assertEqual(_strips(host), {1: "1 2 3*!"})

    async def test_move_at_boundary_issues_nothing(self) -> None:
        host = _host("1 2 3*!")

        self.assertEqual(await commands.move_tab_right(_context(host, 3)), 0)
        self.assertEqual(host.history, [])

    async def test_move_to_edges(self) -> None:
        host = _host("1 2 3*!")

        await commands.move_tab_first(_context(host, 3))
        self.assertEqual(_strips(host), {1: "3*! 1 2"})
        await commands.move_tab_last(_context(host, 3))
        self.assertEqual(_strips(host), {1: "1 2 3*!"})

    async def test_move_to_new_window_drops_placeholder(self) -> None:
        host = _host("1 2*! 3*")

        count = await commands.move_tab_new_window(_context(host, 2))

        self.assertEqual(count, 3)
        self.assertEqual(
            host.history,
            [MoveTabs((2, 3), END_INDEX, 2), FocusWindow(2), HighlightTabs(2, (1, 2))],
        )
        self.assertEqual(_strips(host), {1: "1*!", 2: "2*! 3*"})
        self.assertEqual(host.layout.focused_window, 2)

    async def test_move_to_previous_window_skips_minimized_windows(self) -> None:
        host = _host("1!", "2*!", "3!", minimized=(3,))

        await commands.move_tab_previous_window(_context(host, 2))

        self.assertEqual(_strips(host), {1: "1 2*!", 3: "3!"})

    async def test_move_to_previous_window_wraps_around(self) -> None:
        host = _host("1*!", "2!")

        await commands.move_tab_previous_window(_context(host, 1))

        self.assertEqual(_strips(host), {2: "2 1*!"})

    async def test_move_to_previous_window_needs_another_window(self) -> None:
        host = _host("1*!", "2!", minimized=(2,))

        self.assertEqual(await commands.move_tab_previous_window(_context(host, 1)), 0)
        self.assertEqual(host.history, [])

    async def test_grab_pulls_selection_to_active_tab(self) -> None:
        host = _host("1* 2 3! 4*")

        await commands.grab_tab(_context(host, 3))

        self.assertEqual(_strips(host), {1: "2 1* 3! 4*"})


class SelectionCommandTests(unittest.IsolatedAsyncioTestCase):
    async def test_select_next_extends_selection(self) -> None:
        host = _host("1 2*! 3 4")

        await commands.select_next_tab(_context(host, 2))

        self.assertEqual(_strips(host), {1: "1 2*! 3* 4"})

    async def test_select_all_keeps_invoking_tab_active(self) -> None:
        host = _host("1 2! 3")

        await commands.select_all_tabs(_context(host, 2))

        self.assertEqual(_strips(host), {1: "1* 2*! 3*"})


class FocusCommandTests(unittest.IsolatedAsyncioTestCase):
    async def test_focus_next_waits_for_activation_and_feeds_tracker(self) -> None:
        host = _host("1! 2 3")
        recent = RecentTabs()
        host.activations.add_listener(recent.on_tab_activated)

        count = await commands.focus_next_tab(_context(host, 1, recent_tabs=recent, navigation_timeout=1.0))

        self.assertEqual(count, 1)
        self.assertEqual(_strips(host), {1: "1 2*! 3"})
        self.assertEqual(recent.most_recent(), [2])

    async def test_focus_first_and_last_tab(self) -> None:
        host = _host("1 2! 3")

        self.assertEqual(await commands.focus_last_tab(_context(host, 2)), 2)
        self.assertEqual(host.history[-2:], [ActivateTab(3), FocusWindow(1)])
        self.assertEqual(await commands.focus_first_tab(_context(host, 3)), 2)
        self.assertEqual(host.history[-2:], [ActivateTab(1), FocusWindow(1)])

    async def test_missing_activation_event_times_out(self) -> None:
        host = _host("1! 2", host_type=_SilentHost)

        with self.assertRaises(HostOperationFailedError) as caught:
            await commands.focus_next_tab(_context(host, 1, navigation_timeout=0.01))

        self.assertEqual(caught.exception.context["tab_id"], 2)
        self.assertEqual(_strips(host), {1: "1 2*!"})

    async def test_last_active_tab_crosses_windows(self) -> None:
        host = _host("1! 2", "3!")
        recent = RecentTabs()
        recent.record_activation(3)
        host.activations.add_listener(recent.on_tab_activated)

        count = await commands.focus_last_active_tab(_context(host, 1, recent_tabs=recent))

        self.assertEqual(count, 2)
        self.assertEqual(host.history, [ActivateTab(3), FocusWindow(2)])
        self.assertEqual(host.layout.focused_window, 2)
        self.assertEqual(recent.most_recent(), [3, 1])

    async def test_last_active_tab_skips_closed_tabs(self) -> None:
        host = _host("1! 2")
        recent = RecentTabs()
        recent.record_activation(2)
        recent.record_activation(99)

        count = await commands.focus_last_active_tab(_context(host, 1, recent_tabs=recent))

        self.assertEqual(count, 1)
        self.assertEqual(host.history, [ActivateTab(2)])
        self.assertNotIn(99, recent.most_recent())

    async def test_last_active_tab_without_history_does_nothing(self) -> None:
        host = _host("1! 2")

        self.assertEqual(await commands.focus_last_active_tab(_context(host, 1)), 0)
        self.assertEqual(host.history, [])

    async def test_focus_tab_by_index_skips_collapsed_groups(self) -> None:
        host = _host("1! 2 [g5-: 3] 4")

        self.assertEqual(await commands.focus_tab_by_index(_context(host, 1), 2), 2)
        self.assertEqual(host.history, [ActivateTab(4), FocusWindow(1)])
        self.assertEqual(await commands.focus_tab_by_index(_context(host, 4), 7), 0)

    async def test_recent_tab_by_index_counts_back_through_history(self) -> None:
        host = _host("1! 2 3")
        recent = RecentTabs()
        recent.record_activation(2)
        recent.record_activation(3)

        self.assertEqual(await commands.focus_recent_tab_by_index(_context(host, 1, recent_tabs=recent), 1), 1)
        self.assertEqual(host.history, [ActivateTab(2)])
        self.assertEqual(await commands.focus_recent_tab_by_index(_context(host, 2, recent_tabs=recent), 8), 0)

    async def test_focus_next_and_previous_window_wrap_around(self) -> None:
        host = _host("1!", "2!", "3!")

        self.assertEqual(await commands.focus_next_window(_context(host, 1)), 1)
        self.assertEqual(host.layout.focused_window, 2)
        self.assertEqual(await commands.focus_previous_window(_context(host, 1)), 1)
        self.assertEqual(host.layout.focused_window, 3)

    async def test_focus_window_skips_minimized_windows(self) -> None:
        host = _host("1!", "2!", minimized=(2,))

        self.assertEqual(await commands.focus_next_window(_context(host, 1)), 0)
        self.assertEqual(host.history, [])


class ToggleCommandTests(unittest.IsolatedAsyncioTestCase):
    async def test_toggle_pin_pins_then_unpins_selection(self) -> None:
        host = _host("1 2*! 3*")

        self.assertEqual(await commands.toggle_pin_tab(_context(host, 2)), 2)
        self.assertEqual(_strips(host), {1: "p2*! p3* 1"})
        await commands.toggle_pin_tab(_context(host, 2))
        self.assertEqual(_strips(host), {1: "2*! 3* 1"})

    async def test_toggle_group_groups_then_ungroups_selection(self) -> None:
        host = _host("1 2*! 3*")

        await commands.toggle_group_tab(_context(host, 2))
        self.assertEqual(host.history, [CreateGroup((2, 3))])
        self.assertEqual(_strips(host), {1: "1 [g1: 2*! 3*]"})
        await commands.toggle_group_tab(_context(host, 2))
        self.assertEqual(_strips(host), {1: "1 2*! 3*"})

    async def test_toggle_collapse_keeps_selected_group_open(self) -> None:
        host = _host("[g5: 1*!] [g6: 2] [g7: 3]")

        await commands.toggle_collapse_tab_groups(_context(host, 1))
        self.assertEqual(_strips(host), {1: "[g5: 1*!] [g6-: 2] [g7-: 3]"})
        await commands.toggle_collapse_tab_groups(_context(host, 1))
        self.assertEqual(_strips(host), {1: "[g5: 1*!] [g6: 2] [g7: 3]"})


if __name__ == "__main__":
    unittest.main()
