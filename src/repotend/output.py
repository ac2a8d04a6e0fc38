"""Output helpers separating human-facing messages from machine-readable data."""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a message meant for a person (stderr)."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", *, nl: bool = True) -> None:
    """Write data meant for pipes and files (stdout)."""
    click.echo(message, nl=nl)
