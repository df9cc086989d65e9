"""Name-to-handler command dispatch.

Names are normalized so ``moveTabLeft``, ``move-tab-left`` and
``move_tab_left`` reach the same handler.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from ..errors import TabShiftError, UnknownCommandError
from . import commands
from .commands import CommandContext

logger = logging.getLogger(__name__)

CommandHandler = Callable[[CommandContext], Awaitable[int]]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Ordinal command names start at index 1; "first" and "last" have their own commands.
_ORDINALS = ("second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth")


def normalize_command_name(name: str) -> str:
    """Map camelCase or kebab-case command names onto snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name.strip()).replace("-", "_").lower()


@dataclass(frozen=True)
class CommandBinding:
    """Mapping from one or more command names to a single handler."""

    names: tuple[str, ...]
    handler: CommandHandler


class CommandRegistry:
    """Dispatch table that reports command failures instead of raising them."""

    def __init__(self, notify_on_failure: bool = True) -> None:
        self.notify_on_failure = notify_on_failure
        self._handlers: dict[str, CommandHandler] = {}

    def register_binding(self, binding: CommandBinding) -> CommandRegistry:
        """Register one binding, overwriting existing handlers for the same names."""
        for name in binding.names:
            self._handlers[normalize_command_name(name)] = binding.handler
        return self

    def register_bindings(self, *bindings: CommandBinding) -> CommandRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_command_name(name) in self._handlers

    async def dispatch(self, name: str, context: CommandContext) -> bool:
        """Run the handler for ``name`` and return whether it succeeded.

        Unknown names raise ``UnknownCommandError``. Engine failures are logged,
        passed to ``context.notify`` when notification is enabled, and reported
        as ``False``.
        """
        handler = self._handlers.get(normalize_command_name(name))
        if handler is None:
            raise UnknownCommandError(f"unknown command: {name}", context={"command": name})
        try:
            await handler(context)
        except TabShiftError as exc:
            logger.warning("command %s failed: %s", name, exc)
            if self.notify_on_failure and context.notify is not None:
                context.notify(f"{name} failed: {exc}")
            return False
        return True


def default_registry(notify_on_failure: bool = True) -> CommandRegistry:
    """Registry holding every built-in command."""
    registry = CommandRegistry(notify_on_failure=notify_on_failure)
    return registry.register_bindings(
        CommandBinding(("move_tab_left",), commands.move_tab_left),
        CommandBinding(("move_tab_right",), commands.move_tab_right),
        CommandBinding(("move_tab_first",), commands.move_tab_first),
        CommandBinding(("move_tab_last",), commands.move_tab_last),
        CommandBinding(("move_tab_new_window",), commands.move_tab_new_window),
        CommandBinding(("move_tab_previous_window",), commands.move_tab_previous_window),
        CommandBinding(("grab_tab",), commands.grab_tab),
        CommandBinding(("select_tab",), commands.select_tab),
        CommandBinding(("select_previous_tab",), commands.select_previous_tab),
        CommandBinding(("select_next_tab",), commands.select_next_tab),
        CommandBinding(("select_tabs_in_group",), commands.select_tabs_in_group),
        CommandBinding(("select_all_tabs",), commands.select_all_tabs),
        CommandBinding(("select_right_tabs",), commands.select_right_tabs),
        CommandBinding(("flip_tab_selection",), commands.flip_tab_selection),
        CommandBinding(("focus_next_tab",), commands.focus_next_tab),
        CommandBinding(("focus_previous_tab",), commands.focus_previous_tab),
        CommandBinding(("focus_first_tab",), commands.focus_first_tab),
        CommandBinding(("focus_last_tab",), commands.focus_last_tab),
        CommandBinding(("focus_last_active_tab", "focus_recent_tab"), commands.focus_last_active_tab),
        *(
            CommandBinding((f"focus_{ordinal}_tab",), partial(commands.focus_tab_by_index, index=index))
            for index, ordinal in enumerate(_ORDINALS[:7], start=1)
        ),
        *(
            CommandBinding(
                (f"focus_{ordinal}_last_active_tab",), partial(commands.focus_recent_tab_by_index, index=index)
            )
            for index, ordinal in enumerate(_ORDINALS, start=1)
        ),
        CommandBinding(("focus_next_window",), commands.focus_next_window),
        CommandBinding(("focus_previous_window",), commands.focus_previous_window),
        CommandBinding(("toggle_pin_tab",), commands.toggle_pin_tab),
        CommandBinding(("toggle_group_tab",), commands.toggle_group_tab),
        CommandBinding(("toggle_collapse_tab_groups",), commands.toggle_collapse_tab_groups),
    )


__all__ = [
    "CommandHandler",
    "normalize_command_name",
    "CommandBinding",
    "CommandRegistry",
    "default_registry",
]
