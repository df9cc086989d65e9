"""One-line text notation for a window's tab strip.

``p1 p2* [g5: 3* 4!] [g6-: 7] 8`` reads as: pinned tabs 1 and 2 (2 selected),
group 5 holding tab 3 (selected) and tab 4 (active), collapsed group 6 holding
tab 7, then ungrouped tab 8. ``format_strip`` and ``parse_strip`` are inverses
for tab ids, pin, group, collapse, selection and activity.
"""

from __future__ import annotations

import re

from ..errors import InvalidSnapshotError
from .snapshot import WindowSnapshot, build_window_snapshot
from .types import GROUP_NONE, Tab, TabGroup

_TAB_RE = re.compile(r"(p?)(\d+)(\*?)(!?)")
_ITEM_RE = re.compile(r"\[g(\d+)(-?):([^\]]*)\]|(\S+)")


def _tab_token(tab: Tab) -> str:
    token = f"{'p' if tab.pinned else ''}{tab.id}"
    if tab.selected:
        token += "*"
    if tab.active:
        token += "!"
    return token


def format_strip(snapshot: WindowSnapshot) -> str:
    parts: list[str] = []
    index = 0
    tabs = snapshot.tabs
    while index < len(tabs):
        tab = tabs[index]
        if not tab.grouped:
            parts.append(_tab_token(tab))
            index += 1
            continue
        members: list[str] = []
        while index < len(tabs) and tabs[index].group_id == tab.group_id:
            members.append(_tab_token(tabs[index]))
            index += 1
        group = snapshot.group_by_id(tab.group_id)
        marker = "-" if group is not None and group.collapsed else ""
        parts.append(f"[g{tab.group_id}{marker}: {' '.join(members)}]")
    return " ".join(parts)


def parse_strip(text: str, window_id: int = 1, *, minimized: bool = False) -> WindowSnapshot:
    """Build a validated snapshot from strip notation.

    Raises ``InvalidSnapshotError`` for unreadable tokens and for strips that
    break the snapshot invariants.
    """
    tabs: list[Tab] = []
    groups: list[TabGroup] = []

    def _add_tab(token: str, group_id: int) -> None:
        match = _TAB_RE.fullmatch(token)
        if match is None:
            raise InvalidSnapshotError(f"unreadable tab token {token!r}", context={"window_id": window_id})
        pinned, raw_id, selected, active = match.groups()
        tabs.append(
            Tab(
                id=int(raw_id),
                index=len(tabs),
                window_id=window_id,
                group_id=group_id,
                pinned=bool(pinned),
                selected=bool(selected),
                active=bool(active),
            )
        )

    for match in _ITEM_RE.finditer(text):
        raw_group, collapsed, body, token = match.groups()
        if token is not None:
            _add_tab(token, GROUP_NONE)
            continue
        group_id = int(raw_group)
        groups.append(TabGroup(id=group_id, window_id=window_id, collapsed=bool(collapsed)))
        for member in body.split():
            _add_tab(member, group_id)
    return build_window_snapshot(window_id, tabs, groups, minimized=minimized)


__all__ = ["format_strip", "parse_strip"]
