"""Planners turning a strip snapshot into ordered host operations.

Planners are pure: they never call the host. Destination indices are resolved
by replaying emitted operations on a ``StripLayout`` working copy.
"""

from __future__ import annotations

from .operations import (
    END_INDEX,
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
from .layout import StripLayout
from .directional import plan_directional_move, resolve_action
from .edge import plan_edge_move
from .cross_window import plan_move_to_window
from .grab import plan_grab_tabs
from .selection import (
    plan_flip_tab_selection,
    plan_focus_relative_tab,
    plan_focus_tab_by_index,
    plan_select_adjacent_tab,
    plan_select_all_tabs,
    plan_select_right_tabs,
    plan_select_tab,
    plan_select_tabs_in_group,
)
from .toggles import plan_toggle_collapse_groups, plan_toggle_group, plan_toggle_pin

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
    "StripLayout",
    "plan_directional_move",
    "resolve_action",
    "plan_edge_move",
    "plan_move_to_window",
    "plan_grab_tabs",
    "plan_select_tab",
    "plan_select_adjacent_tab",
    "plan_select_tabs_in_group",
    "plan_select_all_tabs",
    "plan_select_right_tabs",
    "plan_flip_tab_selection",
    "plan_focus_relative_tab",
    "plan_focus_tab_by_index",
    "plan_toggle_pin",
    "plan_toggle_group",
    "plan_toggle_collapse_groups",
]
