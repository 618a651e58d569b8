"""Command: compile record schemas and report broken declarations.

Intended for CI: importing every record type and compiling it surfaces
typos in rule names, malformed declarations and unsupported shapes before
any request is served.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

import click

from fieldguard.commands._base import FieldguardCommand
from fieldguard.errors import CompileError
from fieldguard.output.formatters import CommandReport

if TYPE_CHECKING:
    from fieldguard.commands._context import AppContext

logger = logging.getLogger(__name__)


def resolve_target(target: str) -> Any:
    """Import ``package.module:Qualified.Name`` and return the object.

    Raises:
        click.BadParameter: If the target is malformed or cannot be imported.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        msg = f"expected 'module:Type', got {target!r}"
        raise click.BadParameter(msg, param_hint="TARGET")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"cannot import {module_name!r}: {exc}"
        raise click.BadParameter(msg, param_hint="TARGET") from exc
    for attr in qualname.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            msg = f"{module_name!r} has no attribute {qualname!r}"
            raise click.BadParameter(msg, param_hint="TARGET") from None
    return obj


@click.command(
    "compile",
    cls=FieldguardCommand,
    examples="""\
  fieldguard compile myapp.forms:SignupForm
  fieldguard compile myapp.forms:SignupForm myapp.forms:Address
  fieldguard --json compile myapp.models:Order""",
)
@click.argument("targets", nargs=-1, required=True)
@click.pass_obj
def compile_cmd(app: AppContext, targets: tuple[str, ...]) -> None:
    """Compile the schemas of record types given as module:Type."""
    record_types = [resolve_target(t) for t in targets]
    validator = app.validator

    schemas: list[dict[str, Any]] = []
    errors: list[str] = []
    for target, record_type in zip(targets, record_types, strict=True):
        try:
            schema = validator.compile_schema(record_type)
        except CompileError as exc:
            logger.debug("Compile failed for %s", target, exc_info=True)
            errors.append(str(exc))
            continue
        schemas.append(
            {"type": schema.key, "fields": [spec.describe() for spec in schema]}
        )

    app.emit(CommandReport(op="compile", ok=not errors, data={"schemas": schemas}, errors=errors))
