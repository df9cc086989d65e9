"""Abstract host operations emitted by planners.

Each value mirrors one host call. Plans are plain ordered lists of these and
are executed strictly in order.
"""

from __future__ import annotations

from dataclasses import dataclass

END_INDEX = -1


@dataclass(frozen=True)
class MoveTabs:
    """Reposition tabs so the first lands at ``index`` (``END_INDEX`` appends).

    A ``window_id`` different from the tabs' own window moves them across
    windows, which drops their pinned flag and group membership.
    """

    tab_ids: tuple[int, ...]
    index: int
    window_id: int | None = None


@dataclass(frozen=True)
class MoveGroup:
    """Relocate a whole group as one unit; members keep order and membership."""

    group_id: int
    index: int
    window_id: int | None = None


@dataclass(frozen=True)
class GroupTabs:
    """Add tabs to an existing group without reordering them."""

    tab_ids: tuple[int, ...]
    group_id: int


@dataclass(frozen=True)
class CreateGroup:
    """Gather tabs into a new group placed where the first of them sits."""

    tab_ids: tuple[int, ...]


@dataclass(frozen=True)
class UngroupTabs:
    """Remove tabs from whatever group they belong to."""

    tab_ids: tuple[int, ...]


@dataclass(frozen=True)
class SetPinned:
    tab_id: int
    pinned: bool


@dataclass(frozen=True)
class SetGroupCollapsed:
    group_id: int
    collapsed: bool


@dataclass(frozen=True)
class FocusWindow:
    window_id: int


@dataclass(frozen=True)
class ActivateTab:
    tab_id: int


@dataclass(frozen=True)
class HighlightTabs:
    """Replace the selection of a window; the first index becomes the active tab."""

    window_id: int
    indices: tuple[int, ...]


Operation = (
    MoveTabs
    | MoveGroup
    | GroupTabs
    | CreateGroup
    | UngroupTabs
    | SetPinned
    | SetGroupCollapsed
    | FocusWindow
    | ActivateTab
    | HighlightTabs
)


def _ids(tab_ids: tuple[int, ...]) -> str:
    return ",".join(str(tab_id) for tab_id in tab_ids)


def describe_operation(operation: Operation) -> str:
    """Return a compact one-line description used in logs and CLI output."""
    if isinstance(operation, MoveTabs):
        where = "end" if operation.index == END_INDEX else str(operation.index)
        suffix = f" in window {operation.window_id}" if operation.window_id is not None else ""
        return f"move tabs [{_ids(operation.tab_ids)}] to {where}{suffix}"
    if isinstance(operation, MoveGroup):
        where = "end" if operation.index == END_INDEX else str(operation.index)
        suffix = f" in window {operation.window_id}" if operation.window_id is not None else ""
        return f"move group {operation.group_id} to {where}{suffix}"
    if isinstance(operation, GroupTabs):
        return f"group tabs [{_ids(operation.tab_ids)}] into {operation.group_id}"
    if isinstance(operation, CreateGroup):
        return f"group tabs [{_ids(operation.tab_ids)}] into a new group"
    if isinstance(operation, UngroupTabs):
        return f"ungroup tabs [{_ids(operation.tab_ids)}]"
    if isinstance(operation, SetPinned):
        return f"{'pin' if operation.pinned else 'unpin'} tab {operation.tab_id}"
    if isinstance(operation, SetGroupCollapsed):
        return f"{'collapse' if operation.collapsed else 'expand'} group {operation.group_id}"
    if isinstance(operation, FocusWindow):
        return f"focus window {operation.window_id}"
    if isinstance(operation, ActivateTab):
        return f"activate tab {operation.tab_id}"
    if isinstance(operation, HighlightTabs):
        return f"highlight [{_ids(operation.indices)}] in window {operation.window_id}"
    raise TypeError(f"unknown operation: {operation!r}")


__all__ = [
    "END_INDEX",
    "MoveTabs",
    "MoveGroup",
    "GroupTabs",
    "CreateGroup",
    "UngroupTabs",
    "SetPinned",
    "SetGroupCollapsed",
    "FocusWindow",
    "ActivateTab",
    "HighlightTabs",
    "Operation",
    "describe_operation",
]
