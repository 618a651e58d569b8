"""Command: list the registered validators and filters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fieldguard.commands._base import FieldguardCommand
from fieldguard.output.formatters import CommandReport

if TYPE_CHECKING:
    from fieldguard.commands._context import AppContext


@click.command(
    cls=FieldguardCommand,
    examples="""\
  fieldguard rules
  fieldguard rules --kind filter
  fieldguard --plugins-dir ./rules --json rules""",
)
@click.option(
    "--kind",
    type=click.Choice(["all", "validator", "filter"]),
    default="all",
    help="Only list one partition of the registry.",
)
@click.pass_obj
def rules(app: AppContext, kind: str) -> None:
    """List registered rules (built-ins, custom and plugin-provided)."""
    registry = app.validator.registry
    data: dict[str, list[str]] = {}
    if kind in ("all", "validator"):
        data["validators"] = registry.validator_names()
    if kind in ("all", "filter"):
        data["filters"] = registry.filter_names()
    app.emit(CommandReport(op="rules", data=data))
