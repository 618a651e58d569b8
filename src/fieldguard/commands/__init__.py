"""Subcommand modules for fieldguard.

Provides register_commands() which uses deferred imports to keep
``fieldguard --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from fieldguard.commands.compile_cmd import compile_cmd
    from fieldguard.commands.rules import rules

    cli.add_command(rules)
    cli.add_command(compile_cmd)
