"""Human/JSON output helpers.

Every CLI command produces one :class:`CommandReport`. The formatter renders
it for humans (plain text) or machines (``--json``).
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field


class CommandReport(BaseModel):
    """Outcome of one CLI command.

    Attributes:
        op: Command name (``rules``, ``compile``).
        ok: False when the command should exit non-zero.
        data: Command-specific payload.
        errors: Human-readable problems, one per failed item.
    """

    model_config = {"frozen": True}

    op: str
    ok: bool = True
    data: dict[str, Any] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)


def _format_data_human(data: dict[str, Any]) -> list[str]:
    """Format result data as indented key-value pairs."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            lines.append(f"  {key}: {_json.dumps(value, separators=(',', ':'))}")
        else:
            lines.append(f"  {key}: {value}")
    return lines


def _render_rules(data: dict[str, Any]) -> list[str]:
    lines: list[str] = []
    for section in ("validators", "filters"):
        if section not in data:
            continue
        names = data[section]
        lines.append(f"  {section} ({len(names)}):")
        lines.extend(f"    {name}" for name in names)
    return lines


def _render_compile(data: dict[str, Any]) -> list[str]:
    lines: list[str] = []
    for schema in data.get("schemas", []):
        lines.append(f"  {schema['type']} ({len(schema['fields'])} field(s))")
        for spec in schema["fields"]:
            chain = " | ".join(spec["validators"]) or "-"
            filters = " | ".join(spec["filters"]) or "-"
            lines.append(
                f"    {spec['path']} [{spec['kind']}] validators: {chain}; filters: {filters}"
            )
    return lines


_HUMAN_RENDERERS: dict[str, Callable[[dict[str, Any]], list[str]]] = {
    "rules": _render_rules,
    "compile": _render_compile,
}


def format_report(report: CommandReport, *, json_output: bool = False) -> str:
    """Format a CommandReport for display.

    Args:
        report: The command report to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return report.model_dump_json(indent=2)
    render = _HUMAN_RENDERERS.get(report.op, _format_data_human)
    parts = [f"{'OK' if report.ok else 'ERROR'}: {report.op}"]
    if report.data:
        parts.extend(render(report.data))
    parts.extend(f"  error: {message}" for message in report.errors)
    return "\n".join(parts)
