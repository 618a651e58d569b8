"""Exception hierarchy for fieldguard.

Three disjoint categories:

- Structural/usage errors (broken schema, misused rule, bad filter result)
  are exceptions. They abort compilation or the current ``validate`` call.
- Validation failures are never exceptions. They are ``FieldError`` entries
  on the ``ValidationResult``.
- Rule-internal recoverable errors (e.g. an unparsable date) are folded into
  the failing rule's message by the rule itself.

INVARIANT: Nothing in this module is raised for data that merely failed a rule.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fieldguard.engine.result import ValidationResult


class FieldguardError(Exception):
    """Base class for every error raised by fieldguard."""


# --- Schema compilation ---


class CompileError(FieldguardError):
    """A record type's declarations cannot be compiled into a schema.

    Attributes:
        record_type: Qualified name of the record type, when known.
        field: Dotted path of the offending field, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        record_type: str | None = None,
        field: str | None = None,
    ) -> None:
        self.record_type = record_type
        self.field = field
        location = ".".join(p for p in (record_type, field) if p)
        super().__init__(f"{location}: {message}" if location else message)


class DeclarationSyntaxError(CompileError):
    """A rule, trigger or flag declaration string is malformed."""


class UnknownRuleError(CompileError):
    """A declaration references a rule name absent from the registry."""


# --- Registry ---


class RegistryError(FieldguardError):
    """Base class for rule registration problems."""


class DuplicateRuleError(RegistryError):
    """A rule name is already registered and no override was requested."""


class RegistryFrozenError(RegistryError):
    """Registration was attempted after the registry was frozen."""


class InvalidRuleNameError(RegistryError):
    """A rule name cannot be referenced from a declaration string."""


# --- Execution ---


class RuleUsageError(FieldguardError):
    """A rule was applied in a way its contract does not allow."""


class RuleTypeError(RuleUsageError):
    """A rule received a value whose kind it does not support."""


class RuleArgumentError(RuleUsageError):
    """A rule's static arguments are missing or unusable."""


class FilterTypeError(FieldguardError):
    """A filter returned a value incompatible with the field's declared type."""


class RecordInvalidError(FieldguardError):
    """Raised on demand by :meth:`ValidationResult.raise_for_invalid`."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        if result.structural_error is not None:
            summary = result.structural_error.message
        else:
            summary = "; ".join(e.message for e in result.field_errors)
        super().__init__(summary or "record is invalid")


# --- Configuration ---


class ConfigFileError(FieldguardError):
    """fieldguard.toml exists but cannot be parsed."""
