"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy engine construction and centralized
report emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fieldguard.config.logging import configure_logging
from fieldguard.output.formatters import CommandReport, format_report

if TYPE_CHECKING:
    from fieldguard.config.settings import FieldguardSettings
    from fieldguard.engine.validator import Validator


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The engine is built on first use so ``--help`` and ``--version`` never
    trigger plugin discovery.
    """

    def __init__(self, settings: FieldguardSettings) -> None:
        self.settings = settings
        self._validator: Validator | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def validator(self) -> Validator:
        """The engine, built from settings (plugins loaded) on first access."""
        if self._validator is None:
            from fieldguard.engine.validator import Validator

            self._validator = Validator.from_settings(self.settings)
        return self._validator

    def emit(self, report: CommandReport) -> None:
        """Format and output a CommandReport with correct exit semantics.

        * Success (``report.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_report(report, json_output=self.settings.json_output)
        if report.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
