"""Read-only model of a window's tab strip.

This package contains the planning inputs:
- tab, group and window datatypes
- validated window snapshots and their JSON document form
- the selection and group topology view derived from a snapshot
- a one-line text notation for strips
"""

from __future__ import annotations

from .types import BACKWARD, DIRECTIONS, FORWARD, GROUP_NONE, Tab, TabGroup, WindowInfo, check_direction
from .snapshot import (
    WindowSnapshot,
    build_window_snapshot,
    dump_document,
    load_document,
    resolve_selection,
    window_snapshot_from_dict,
    window_snapshot_to_dict,
    with_selection,
)
from .notation import format_strip, parse_strip
from .topology import SELECTION_FULL, SELECTION_NONE, SELECTION_PARTIAL, StripTopology, build_topology

__all__ = [
    "GROUP_NONE",
    "BACKWARD",
    "FORWARD",
    "DIRECTIONS",
    "check_direction",
    "Tab",
    "TabGroup",
    "WindowInfo",
    "WindowSnapshot",
    "build_window_snapshot",
    "resolve_selection",
    "with_selection",
    "window_snapshot_from_dict",
    "window_snapshot_to_dict",
    "load_document",
    "dump_document",
    "SELECTION_NONE",
    "SELECTION_PARTIAL",
    "SELECTION_FULL",
    "StripTopology",
    "build_topology",
    "format_strip",
    "parse_strip",
]
