"""Short alternative names for commands and groups."""

from collections.abc import Callable
from typing import TypeVar

import click

CommandT = TypeVar("CommandT", bound=click.Command)

ALIASES_ATTR = "_repotend_aliases"


def alias(*names: str) -> Callable[[CommandT], CommandT]:
    """Attach aliases to a command; register_with_aliases() picks them up.

    Example:
        @alias("wt")
        @click.group("worktree")
        def worktree_group() -> None: ...
    """

    def decorator(cmd: CommandT) -> CommandT:
        setattr(cmd, ALIASES_ATTR, (*getattr(cmd, ALIASES_ATTR, ()), *names))
        return cmd

    return decorator


def get_aliases(cmd: click.Command) -> tuple[str, ...]:
    return getattr(cmd, ALIASES_ATTR, ())


def register_with_aliases(group: click.Group, cmd: click.Command) -> None:
    """Add cmd to group under its own name and under every alias."""
    group.add_command(cmd)
    for name in get_aliases(cmd):
        group.add_command(cmd, name=name)
