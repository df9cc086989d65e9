"""Command-line front door for tabshift.

Loads a JSON snapshot document into an in-memory host, runs one command
through the registry and prints the operations it issued plus the resulting
tab strips.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .errors import TabShiftError
from .planning.operations import describe_operation
from .runtime.command_registry import default_registry
from .runtime.commands import CommandContext
from .runtime.config import load_navigation_timeout, load_notify_on_failure, load_recent_tabs_capacity
from .runtime.host import MemoryTabHost
from .runtime.recent_tabs import RecentTabs
from .strip_model.notation import format_strip
from .strip_model.snapshot import WindowSnapshot, dump_document, load_document
from .strip_model.types import Tab


def render_strip(snapshot: WindowSnapshot) -> str:
    """Render one window as a labelled line of strip notation."""
    suffix = " (minimized)" if snapshot.minimized else ""
    return f"window {snapshot.window_id}{suffix}: {format_strip(snapshot)}"


def _resolve_tab(snapshots: list[WindowSnapshot], window_id: int | None, tab_id: int | None) -> Tab:
    if tab_id is not None:
        for snapshot in snapshots:
            tab = snapshot.tab_by_id(tab_id)
            if tab is not None:
                return tab
        raise SystemExit(f"Tab not found: {tab_id}")
    candidates = snapshots if window_id is None else [s for s in snapshots if s.window_id == window_id]
    if not candidates:
        raise SystemExit(f"Window not found: {window_id}")
    snapshot = candidates[0]
    tab = snapshot.active_tab()
    if tab is None:
        if not snapshot.tabs:
            raise SystemExit(f"Window {snapshot.window_id} has no tabs")
        tab = snapshot.tabs[0]
    return tab


def _load_snapshot_document(path: Path) -> tuple[list[WindowSnapshot], list[int]]:
    """Read the document; an optional ``recent_tabs`` list seeds the MRU tracker."""
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Cannot read snapshot {path}: {exc}") from exc
    try:
        snapshots = load_document(data)
    except TabShiftError as exc:
        raise SystemExit(f"Invalid snapshot {path}: {exc}") from exc
    raw_recent = data.get("recent_tabs", [])
    recent = [value for value in raw_recent if isinstance(value, int)] if isinstance(raw_recent, list) else []
    return snapshots, recent


def _notify(message: str) -> None:
    sys.stderr.write(f"tabshift: {message}\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, run one command and print what it did.

    Exits with status 1 when the command fails.
    """
    registry = default_registry(notify_on_failure=load_notify_on_failure())
    parser = argparse.ArgumentParser(description="Rearrange tabs of a JSON tab-strip snapshot.")
    parser.add_argument("snapshot", help='Path to a JSON document shaped like {"windows": [...]}.')
    parser.add_argument("command", help=f"Command name ({', '.join(registry.names())}).")
    parser.add_argument("--window", type=int, default=None, help="Window whose active tab invokes the command.")
    parser.add_argument("--tab", type=int, default=None, help="Tab invoking the command (overrides --window).")
    parser.add_argument("--plan", action="store_true", help="Print only the issued operations.")
    parser.add_argument("--json", action="store_true", help="Print operations and resulting windows as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Log planner and executor decisions.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command not in registry:
        raise SystemExit(f"Unknown command: {args.command}")
    snapshots, recent_ids = _load_snapshot_document(Path(args.snapshot))
    tab = _resolve_tab(snapshots, args.window, args.tab)

    host = MemoryTabHost(snapshots)
    recent_tabs = RecentTabs(load_recent_tabs_capacity())
    for tab_id in reversed(recent_ids):
        recent_tabs.record_activation(tab_id)
    host.activations.add_listener(recent_tabs.on_tab_activated)
    context = CommandContext(
        host=host,
        tab=tab,
        recent_tabs=recent_tabs,
        notify=_notify,
        navigation_timeout=load_navigation_timeout(),
    )
    ok = asyncio.run(registry.dispatch(args.command, context))

    operations = [describe_operation(operation) for operation in host.history]
    if args.json:
        document = dump_document(host.layout.snapshots())
        payload = {"ok": ok, "operations": operations, **document}
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        for line in operations:
            sys.stdout.write(f"{line}\n")
        if not args.plan:
            for snapshot in host.layout.snapshots():
                sys.stdout.write(f"{render_strip(snapshot)}\n")
    if not ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
