"""ValidationResult, FieldError and StructuralError: the outbound contract.

INVARIANT: ``valid`` holds iff there is no structural error and
``field_errors`` is empty. It is computed, never stored, so the two can
never disagree. Consumers (HTTP handlers, CLIs) format these further.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field, computed_field

from fieldguard.errors import RecordInvalidError


class FieldError(BaseModel):
    """One failing validator on one field.

    Attributes:
        field: The field's display label.
        message: Fixed template, rule-provided, or generated default message.
        rule: Name of the validator that failed.
        path: Dotted attribute path from the validated record.
    """

    model_config = {"frozen": True}

    field: str
    message: str
    rule: str | None = None
    path: str | None = None


class StructuralError(BaseModel):
    """The call itself was unusable (e.g. the input is not a record)."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(BaseModel):
    """Outcome of validating one record."""

    model_config = {"frozen": True}

    structural_error: StructuralError | None = None
    field_errors: list[FieldError] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return self.structural_error is None and not self.field_errors

    def errors_for(self, field: str) -> list[FieldError]:
        """FieldErrors whose label or path equals *field*."""
        return [e for e in self.field_errors if field in (e.field, e.path)]

    def raise_for_invalid(self) -> None:
        """Raise :class:`RecordInvalidError` unless the result is valid."""
        if not self.valid:
            raise RecordInvalidError(self)


def aggregate(
    field_errors: Iterable[FieldError],
    structural_error: StructuralError | None = None,
) -> ValidationResult:
    """Collect FieldErrors (already in schema order) into a ValidationResult."""
    return ValidationResult(structural_error=structural_error, field_errors=list(field_errors))


def not_a_record(obj: object) -> ValidationResult:
    """The structural result for input that is not a record instance."""
    kind = type(obj).__name__ if not isinstance(obj, type) else f"class {obj.__name__}"
    return aggregate(
        (),
        StructuralError(
            code="not_a_record",
            message=f"Invalid input type. Expected a record instance, got {kind}",
            detail={"type": kind},
        ),
    )
