"""Error taxonomy shared by planners, the executor and command handlers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {str(key): _normalize_context_value(val) for key, val in context.items()}


class TabShiftError(Exception):
    """Base error type carrying a structured context mapping."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class InvalidSnapshotError(TabShiftError):
    """Snapshot violates strip invariants (dense positions, pinned prefix, contiguous groups)."""


class InvalidSelectionError(TabShiftError):
    """Selection references a tab that is not part of the snapshot."""


class InvalidOperationError(TabShiftError):
    """Operation targets a tab, group or window the strip does not know."""


class HostOperationFailedError(TabShiftError):
    """A host call failed while executing a plan; remaining operations were abandoned."""


class UnknownCommandError(TabShiftError):
    """No command handler is registered under the requested name."""


__all__ = [
    "normalize_context",
    "TabShiftError",
    "InvalidSnapshotError",
    "InvalidSelectionError",
    "InvalidOperationError",
    "HostOperationFailedError",
    "UnknownCommandError",
]
