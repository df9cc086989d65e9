"""Read-only selection and group indices derived from a window snapshot.

Planners classify runs through this view: where the pinned prefix ends, which
contiguous run each group occupies, how much of a group is selected, and which
groups are collapsed (hidden).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .snapshot import WindowSnapshot, resolve_selection
from .types import GROUP_NONE, Tab, check_direction

SELECTION_NONE = "none"
SELECTION_PARTIAL = "partial"
SELECTION_FULL = "full"


@dataclass(frozen=True)
class StripTopology:
    """Pinned split point, group runs and selection state for one window."""

    snapshot: WindowSnapshot
    selected_ids: frozenset[int]
    pinned_boundary: int
    group_runs: dict[int, tuple[Tab, ...]]
    collapsed_groups: frozenset[int]

    @property
    def pinned_tabs(self) -> tuple[Tab, ...]:
        return self.snapshot.tabs[: self.pinned_boundary]

    @property
    def unpinned_tabs(self) -> tuple[Tab, ...]:
        return self.snapshot.tabs[self.pinned_boundary :]

    def is_selected(self, tab: Tab) -> bool:
        return tab.id in self.selected_ids

    def group_selection_status(self, group_id: int) -> str:
        """Return ``SELECTION_NONE``/``SELECTION_PARTIAL``/``SELECTION_FULL`` for a group.

        Ungrouped tabs are not a group, so ``GROUP_NONE`` is rejected.
        """
        if group_id == GROUP_NONE:
            raise ValueError("ungrouped tabs have no group selection status")
        members = self.group_runs.get(group_id)
        if members is None:
            raise KeyError(group_id)
        selected_count = sum(1 for tab in members if tab.id in self.selected_ids)
        if selected_count == 0:
            return SELECTION_NONE
        if selected_count == len(members):
            return SELECTION_FULL
        return SELECTION_PARTIAL

    def is_group_hidden(self, group_id: int) -> bool:
        return group_id in self.collapsed_groups

    def neighbor(self, tab: Tab, direction: int) -> Tab | None:
        """Return the tab next to ``tab`` in ``direction``, or ``None`` at the strip edge."""
        position = tab.index + check_direction(direction)
        if 0 <= position < len(self.snapshot.tabs):
            return self.snapshot.tabs[position]
        return None

    def visible_tabs(self) -> list[Tab]:
        """Tabs not hidden inside a collapsed group."""
        return [tab for tab in self.snapshot.tabs if tab.group_id not in self.collapsed_groups]


def build_topology(snapshot: WindowSnapshot, selection: Iterable[int] | None = None) -> StripTopology:
    """Derive a ``StripTopology``; ``selection`` defaults to the snapshot's flags."""
    selected_ids = resolve_selection(snapshot, selection)
    group_runs: dict[int, list[Tab]] = {}
    for tab in snapshot.tabs:
        if tab.grouped:
            group_runs.setdefault(tab.group_id, []).append(tab)
    return StripTopology(
        snapshot=snapshot,
        selected_ids=selected_ids,
        pinned_boundary=snapshot.pinned_count(),
        group_runs={group_id: tuple(tabs) for group_id, tabs in group_runs.items()},
        collapsed_groups=frozenset(group.id for group in snapshot.groups if group.collapsed),
    )


__all__ = [
    "SELECTION_NONE",
    "SELECTION_PARTIAL",
    "SELECTION_FULL",
    "StripTopology",
    "build_topology",
]
