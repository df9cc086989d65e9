"""Public package surface for tabshift.

Exports ``main`` for programmatic CLI invocation.
Planners live in ``tabshift.planning``; host-facing code in ``tabshift.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
