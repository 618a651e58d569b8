"""Root CLI group for fieldguard with global flags and command registration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from fieldguard import __version__
from fieldguard.commands import register_commands
from fieldguard.commands._context import AppContext
from fieldguard.config.settings import FieldguardSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="fieldguard")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging (compilation, plugins).")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--plugins-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Load single-file rule plugins from this directory.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    plugins_dir: Path | None,
) -> None:
    """fieldguard: declarative field validation and normalization."""
    ctx.ensure_object(dict)
    # Unset flags must not shadow env vars or fieldguard.toml.
    flags: dict[str, Any] = {
        "json_output": json_output,
        "verbose": verbose,
        "log_json": log_json,
        "plugins_dir": plugins_dir,
    }
    overrides = {k: v for k, v in flags.items() if v}
    settings = FieldguardSettings.load(config_path=config_path, **overrides)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
