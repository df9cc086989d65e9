"""Async command handlers.

Each handler reads fresh snapshots from the host, asks a planner for a plan
and executes it. Handlers return how many operations ran; zero means the
command had nothing to do.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import HostOperationFailedError
from ..planning.cross_window import plan_move_to_window
from ..planning.directional import plan_directional_move
from ..planning.edge import plan_edge_move
from ..planning.grab import plan_grab_tabs
from ..planning.operations import ActivateTab, FocusWindow, Operation
from ..planning.selection import (
    plan_flip_tab_selection,
    plan_focus_relative_tab,
    plan_focus_tab_by_index,
    plan_select_adjacent_tab,
    plan_select_all_tabs,
    plan_select_right_tabs,
    plan_select_tab,
    plan_select_tabs_in_group,
)
from ..planning.toggles import plan_toggle_collapse_groups, plan_toggle_group, plan_toggle_pin
from ..strip_model.snapshot import WindowSnapshot
from ..strip_model.types import BACKWARD, FORWARD, Tab
from .events import OneShotWaiter, TabActivated
from .executor import execute_plan
from .host import TabHost, read_window_snapshot
from .recent_tabs import RecentTabs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandContext:
    """Collaborators handed to every command.

    ``tab`` is the tab the command was invoked from. ``notify`` surfaces
    failures to the user and may be ``None``. ``navigation_timeout`` bounds
    waits for activation events; ``None`` waits forever.
    """

    host: TabHost
    tab: Tab
    recent_tabs: RecentTabs
    notify: Callable[[str], None] | None = None
    navigation_timeout: float | None = None


async def _current_snapshot(context: CommandContext) -> WindowSnapshot:
    return await read_window_snapshot(context.host, context.tab.window_id)


async def _run(context: CommandContext, operations: list[Operation]) -> int:
    if not operations:
        return 0
    return await execute_plan(context.host, operations)


async def _run_and_await_activation(context: CommandContext, operations: list[Operation]) -> int:
    """Execute a focus plan and wait until the host reports the activation."""
    if not operations or not isinstance(operations[0], ActivateTab):
        return await _run(context, operations)
    target_id = operations[0].tab_id

    def _is_target(event: TabActivated) -> bool:
        return event.tab_id == target_id

    waiter = OneShotWaiter(context.host.activations, _is_target)
    try:
        count = await execute_plan(context.host, operations)
    except BaseException:
        waiter.cancel()
        raise
    try:
        await waiter.wait(context.navigation_timeout)
    except asyncio.TimeoutError as exc:
        raise HostOperationFailedError(
            f"tab {target_id} was not activated in time",
            context={"tab_id": target_id, "timeout": context.navigation_timeout},
            cause=exc,
        ) from exc
    return count


# Moving ---------------------------------------------------------------------


async def move_tab_left(context: CommandContext) -> int:
    return await _run(context, plan_directional_move(await _current_snapshot(context), BACKWARD))


async def move_tab_right(context: CommandContext) -> int:
    return await _run(context, plan_directional_move(await _current_snapshot(context), FORWARD))


async def move_tab_first(context: CommandContext) -> int:
    return await _run(context, plan_edge_move(await _current_snapshot(context), BACKWARD))


async def move_tab_last(context: CommandContext) -> int:
    return await _run(context, plan_edge_move(await _current_snapshot(context), FORWARD))


async def move_tabs_to_window(context: CommandContext, window_id: int) -> int:
    """Move the selection of the invoking window into ``window_id``."""
    source = await _current_snapshot(context)
    destination = await read_window_snapshot(context.host, window_id)
    plan = plan_move_to_window(source, destination, initiating_tab_id=context.tab.id)
    return await _run(context, plan)


async def move_tab_new_window(context: CommandContext) -> int:
    """Open a window, move the selection there and close its placeholder tab."""
    window_id, placeholder_id = await context.host.create_window()
    logger.debug("created window %s with placeholder tab %s", window_id, placeholder_id)
    count = await move_tabs_to_window(context, window_id)
    await context.host.remove_tab(placeholder_id)
    return count


async def _relative_window_id(context: CommandContext, delta: int) -> int | None:
    """Return the open window ``delta`` steps from the invoking one, skipping minimized ones."""
    current_id = context.tab.window_id
    windows = [
        info.id for info in await context.host.list_windows() if not info.minimized or info.id == current_id
    ]
    if current_id not in windows or len(windows) < 2:
        logger.debug("no other open window next to window %s", current_id)
        return None
    return windows[(windows.index(current_id) + delta) % len(windows)]


async def move_tab_previous_window(context: CommandContext) -> int:
    """Move the selection to the previous non-minimized window, wrapping around."""
    previous_id = await _relative_window_id(context, -1)
    if previous_id is None:
        return 0
    return await move_tabs_to_window(context, previous_id)


async def grab_tab(context: CommandContext) -> int:
    return await _run(context, plan_grab_tabs(await _current_snapshot(context), context.tab.id))


# Selecting --------------------------------------------------------------------


async def select_tab(context: CommandContext) -> int:
    return await _run(context, plan_select_tab(await _current_snapshot(context), context.tab.id))


async def select_previous_tab(context: CommandContext) -> int:
    snapshot = await _current_snapshot(context)
    return await _run(context, plan_select_adjacent_tab(snapshot, BACKWARD, context.tab.id))


async def select_next_tab(context: CommandContext) -> int:
    snapshot = await _current_snapshot(context)
    return await _run(context, plan_select_adjacent_tab(snapshot, FORWARD, context.tab.id))


async def select_tabs_in_group(context: CommandContext) -> int:
    return await _run(context, plan_select_tabs_in_group(await _current_snapshot(context), context.tab.id))


async def select_all_tabs(context: CommandContext) -> int:
    return await _run(context, plan_select_all_tabs(await _current_snapshot(context), context.tab.id))


async def select_right_tabs(context: CommandContext) -> int:
    return await _run(context, plan_select_right_tabs(await _current_snapshot(context), context.tab.id))


async def flip_tab_selection(context: CommandContext) -> int:
    return await _run(context, plan_flip_tab_selection(await _current_snapshot(context), context.tab.id))


# Focusing ---------------------------------------------------------------------


async def focus_next_tab(context: CommandContext) -> int:
    snapshot = await _current_snapshot(context)
    return await _run_and_await_activation(context, plan_focus_relative_tab(snapshot, 1, context.tab.id))


async def focus_previous_tab(context: CommandContext) -> int:
    snapshot = await _current_snapshot(context)
    return await _run_and_await_activation(context, plan_focus_relative_tab(snapshot, -1, context.tab.id))


async def focus_tab_by_index(context: CommandContext, index: int) -> int:
    """Activate the ``index``-th visible tab of the invoking window; negative counts from the end."""
    snapshot = await _current_snapshot(context)
    return await _run_and_await_activation(context, plan_focus_tab_by_index(snapshot, index))


async def focus_first_tab(context: CommandContext) -> int:
    return await focus_tab_by_index(context, 0)


async def focus_last_tab(context: CommandContext) -> int:
    return await focus_tab_by_index(context, -1)


async def focus_recent_tab_by_index(context: CommandContext, index: int) -> int:
    """Switch to the ``index``-th most recently active other tab, in any window.

    Tabs that no longer exist are dropped from the tracker on the way and do
    not count toward ``index``.
    """
    recent_tabs = context.recent_tabs
    recent_tabs.record_activation(context.tab.id)
    position = 0
    for tab_id in recent_tabs.most_recent(exclude=context.tab.id):
        tab = await context.host.get_tab(tab_id)
        if tab is None:
            recent_tabs.forget(tab_id)
            continue
        if position < index:
            position += 1
            continue
        operations: list[Operation] = [ActivateTab(tab.id)]
        if tab.window_id != context.tab.window_id:
            operations.append(FocusWindow(tab.window_id))
        return await _run_and_await_activation(context, operations)
    return 0


async def focus_last_active_tab(context: CommandContext) -> int:
    return await focus_recent_tab_by_index(context, 0)


async def focus_next_window(context: CommandContext) -> int:
    window_id = await _relative_window_id(context, 1)
    if window_id is None:
        return 0
    return await _run(context, [FocusWindow(window_id)])


async def focus_previous_window(context: CommandContext) -> int:
    window_id = await _relative_window_id(context, -1)
    if window_id is None:
        return 0
    return await _run(context, [FocusWindow(window_id)])


# Toggling ---------------------------------------------------------------------


async def toggle_pin_tab(context: CommandContext) -> int:
    return await _run(context, plan_toggle_pin(await _current_snapshot(context)))


async def toggle_group_tab(context: CommandContext) -> int:
    return await _run(context, plan_toggle_group(await _current_snapshot(context), context.tab.id))


async def toggle_collapse_tab_groups(context: CommandContext) -> int:
    return await _run(context, plan_toggle_collapse_groups(await _current_snapshot(context)))


__all__ = [
    "CommandContext",
    "move_tab_left",
    "move_tab_right",
    "move_tab_first",
    "move_tab_last",
    "move_tabs_to_window",
    "move_tab_new_window",
    "move_tab_previous_window",
    "grab_tab",
    "select_tab",
    "select_previous_tab",
    "select_next_tab",
    "select_tabs_in_group",
    "select_all_tabs",
    "select_right_tabs",
    "flip_tab_selection",
    "focus_next_tab",
    "focus_previous_tab",
    "focus_tab_by_index",
    "focus_first_tab",
    "focus_last_tab",
    "focus_recent_tab_by_index",
    "focus_last_active_tab",
    "focus_next_window",
    "focus_previous_window",
    "toggle_pin_tab",
    "toggle_group_tab",
    "toggle_collapse_tab_groups",
]
