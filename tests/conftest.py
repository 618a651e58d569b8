"""Shared pytest fixtures and test helpers for fieldguard tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest
from click.testing import CliRunner

from fieldguard.config.models import ValidationOptions
from fieldguard.domain.kinds import ValueKind
from fieldguard.engine.accessor import wrap
from fieldguard.engine.cache import SchemaCache
from fieldguard.engine.context import ValidationContext
from fieldguard.engine.registry import RuleRegistry
from fieldguard.engine.validator import Validator


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore the fieldguard logger after each test.

    configure_logging() (called directly or by the CLI) installs a handler and
    stops propagation; a handler bound to a CliRunner stream must not outlive it.
    """
    package_logger = logging.getLogger("fieldguard")
    original_handlers = package_logger.handlers[:]
    original_level = package_logger.level
    original_propagate = package_logger.propagate
    yield
    package_logger.handlers = original_handlers
    package_logger.setLevel(original_level)
    package_logger.propagate = original_propagate


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's FIELDGUARD_* environment out of every test."""
    for name in (
        "FIELDGUARD_CONFIG",
        "FIELDGUARD_PLUGINS_DIR",
        "FIELDGUARD_LOAD_ENTRY_POINTS",
        "FIELDGUARD_VERBOSE",
        "FIELDGUARD_JSON_OUTPUT",
        "FIELDGUARD_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry() -> RuleRegistry:
    """A private registry with the built-in rules, never the process-wide one."""
    return RuleRegistry.with_builtins()


@pytest.fixture
def validator(registry: RuleRegistry) -> Validator:
    """An engine with default options over a private registry and cache."""
    return Validator(registry=registry, cache=SchemaCache())


@pytest.fixture
def make_validator(registry: RuleRegistry) -> Generator[Any]:
    """Factory for engines sharing the private registry with custom options."""

    def _make(**options: Any) -> Validator:
        return Validator(ValidationOptions(**options), registry=registry, cache=SchemaCache())

    yield _make


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_context(
    value: Any,
    kind: ValueKind = ValueKind.STRING,
    *args: str,
    nullable: bool = True,
    label: str = "field",
    rule_name: str = "rule",
    options: ValidationOptions | None = None,
) -> ValidationContext:
    """Build a ValidationContext for calling a rule function directly."""
    return ValidationContext(
        value=wrap(value),
        kind=kind,
        nullable=nullable,
        args=tuple(args),
        label=label,
        rule_name=rule_name,
        options=options or ValidationOptions(),
    )
