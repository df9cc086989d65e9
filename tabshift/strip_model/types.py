"""Domain datatypes for tabs, tab groups and travel directions."""

from __future__ import annotations

from dataclasses import dataclass

GROUP_NONE = -1

BACKWARD = -1
FORWARD = 1
DIRECTIONS = (BACKWARD, FORWARD)


def check_direction(direction: int) -> int:
    """Return ``direction`` unchanged, rejecting anything but ``BACKWARD``/``FORWARD``."""
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be {BACKWARD} or {FORWARD}, got {direction!r}")
    return direction


@dataclass(frozen=True)
class Tab:
    """One tab as observed in a window snapshot.

    ``index`` is the dense 0-based position inside ``window_id``. Ungrouped
    tabs carry ``GROUP_NONE`` rather than ``None``.
    """

    id: int
    index: int
    window_id: int
    group_id: int = GROUP_NONE
    pinned: bool = False
    selected: bool = False
    active: bool = False
    title: str = ""

    @property
    def grouped(self) -> bool:
        return self.group_id != GROUP_NONE


@dataclass(frozen=True)
class TabGroup:
    """Tab group metadata; only ``collapsed`` affects rearrangement."""

    id: int
    window_id: int
    collapsed: bool = False
    title: str = ""
    color: str = "grey"


@dataclass(frozen=True)
class WindowInfo:
    """Window-level facts needed to pick a destination window."""

    id: int
    minimized: bool = False
    focused: bool = False


__all__ = [
    "GROUP_NONE",
    "BACKWARD",
    "FORWARD",
    "DIRECTIONS",
    "check_direction",
    "Tab",
    "TabGroup",
    "WindowInfo",
]
