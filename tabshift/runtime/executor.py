"""Strictly ordered plan execution against a ``TabHost``."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..errors import HostOperationFailedError
from ..planning.operations import (
    ActivateTab,
    CreateGroup,
    FocusWindow,
    GroupTabs,
    HighlightTabs,
    MoveGroup,
    MoveTabs,
    Operation,
    SetGroupCollapsed,
    SetPinned,
    UngroupTabs,
    describe_operation,
)
from .host import TabHost

logger = logging.getLogger(__name__)


async def apply_operation(host: TabHost, operation: Operation) -> None:
    """Issue the host call matching one abstract operation."""
    if isinstance(operation, MoveTabs):
        await host.move_tabs(operation.tab_ids, operation.index, operation.window_id)
    elif isinstance(operation, MoveGroup):
        await host.move_group(operation.group_id, operation.index, operation.window_id)
    elif isinstance(operation, GroupTabs):
        await host.group_tabs(operation.tab_ids, operation.group_id)
    elif isinstance(operation, CreateGroup):
        group_id = await host.create_group(operation.tab_ids)
        logger.debug("host created group %s", group_id)
    elif isinstance(operation, UngroupTabs):
        await host.ungroup_tabs(operation.tab_ids)
    elif isinstance(operation, SetPinned):
        await host.set_pinned(operation.tab_id, operation.pinned)
    elif isinstance(operation, SetGroupCollapsed):
        await host.set_group_collapsed(operation.group_id, operation.collapsed)
    elif isinstance(operation, FocusWindow):
        await host.focus_window(operation.window_id)
    elif isinstance(operation, ActivateTab):
        await host.activate_tab(operation.tab_id)
    elif isinstance(operation, HighlightTabs):
        await host.highlight_tabs(operation.window_id, operation.indices)
    else:
        raise TypeError(f"unknown operation: {operation!r}")


async def execute_plan(host: TabHost, operations: Sequence[Operation]) -> int:
    """Run ``operations`` one after another and return how many completed.

    Each call is awaited before the next one is issued. The first failure
    abandons the rest of the plan and is re-raised as
    ``HostOperationFailedError``; operations already applied stay applied.
    """
    total = len(operations)
    for position, operation in enumerate(operations):
        logger.debug("executing %d/%d: %s", position + 1, total, describe_operation(operation))
        try:
            await apply_operation(host, operation)
        except Exception as exc:
            abandoned = total - position - 1
            logger.warning(
                "host rejected %s (%s); abandoning %d queued operation(s)",
                describe_operation(operation),
                exc,
                abandoned,
            )
            raise HostOperationFailedError(
                f"host operation failed: {describe_operation(operation)}",
                context={
                    "index": position,
                    "operation": describe_operation(operation),
                    "completed": position,
                    "abandoned": abandoned,
                },
                cause=exc,
            ) from exc
    return total


__all__ = ["apply_operation", "execute_plan"]
