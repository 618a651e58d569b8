"""Run one FieldSpec's rule chains against a live record.

Per field:

1. Resolve the storage slot (skip when a parent record is None).
2. ``allow_zero``: a null or zero value skips validators *and* filters.
   Otherwise implicit pre-filters (``auto_trim_strings``) run first.
3. Validators in declared order. Each failure yields one FieldError. With
   ``stop_on_first_error`` the field returns immediately, filters included.
4. Filters in declared order, unconditionally, each result written back.

INVARIANT: Filters run even when a validator on the same field failed.
INVARIANT: A filter never turns null into a value or changes the declared type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from fieldguard.domain.flags import ValidationFlag
from fieldguard.engine.accessor import FieldSlot, resolve_slot, wrap
from fieldguard.engine.context import ValidationContext
from fieldguard.engine.result import FieldError
from fieldguard.errors import FilterTypeError

if TYPE_CHECKING:
    from fieldguard.config.models import ValidationOptions
    from fieldguard.engine.compiler import FieldSpec
    from fieldguard.engine.registry import BoundRule

logger = logging.getLogger(__name__)


def execute_schema(
    fields: Iterable[FieldSpec],
    record: Any,
    options: ValidationOptions,
) -> list[FieldError]:
    """Run every spec in *fields* against *record*, preserving order."""
    errors: list[FieldError] = []
    for spec in fields:
        errors.extend(execute_field(spec, record, options))
    return errors


def execute_field(spec: FieldSpec, record: Any, options: ValidationOptions) -> list[FieldError]:
    """Run one field's validators then filters; return its FieldErrors."""
    slot = resolve_slot(record, spec)
    if slot is None:
        logger.debug("Skipping %s: parent record is None", spec.field_path)
        return []

    if spec.has_flag(ValidationFlag.ALLOW_ZERO) and spec.is_zero(slot.get()):
        return []

    for rule in spec.pre_filters:
        _apply_filter(spec, slot, rule, options)

    errors: list[FieldError] = []
    for rule in spec.validators:
        ctx = _new_context(spec, slot, rule, options)
        if rule(ctx):
            continue
        errors.append(
            FieldError(
                field=spec.label,
                message=_message_for(spec, rule, ctx, options),
                rule=rule.name,
                path=spec.field_path,
            )
        )
        if options.stop_on_first_error:
            return errors

    for rule in spec.filters:
        _apply_filter(spec, slot, rule, options)

    return errors


def _apply_filter(
    spec: FieldSpec,
    slot: FieldSlot,
    rule: BoundRule,
    options: ValidationOptions,
) -> None:
    before = slot.get()
    after = rule(_new_context(spec, slot, rule, options))
    _check_filter_result(spec, rule, before, after)
    slot.set(after)


def _new_context(
    spec: FieldSpec,
    slot: FieldSlot,
    rule: BoundRule,
    options: ValidationOptions,
) -> ValidationContext:
    return ValidationContext(
        value=wrap(slot.get()),
        kind=spec.kind,
        nullable=slot.nullable,
        args=rule.args,
        label=spec.label,
        rule_name=rule.name,
        options=options,
    )


def _message_for(
    spec: FieldSpec,
    rule: BoundRule,
    ctx: ValidationContext,
    options: ValidationOptions,
) -> str:
    """Fixed template, else the rule's own message, else a generated default."""
    if spec.message is not None:
        return spec.message
    if ctx.error_message:
        return ctx.error_message
    message = f"{spec.label}: field validation failed"
    if options.expose_rule_names:
        message += f" using rule {rule.name}"
    return message


def _check_filter_result(spec: FieldSpec, rule: BoundRule, before: Any, after: Any) -> None:
    where = f"filter {rule.name!r} on field {spec.field_path!r}"
    if before is None:
        if after is not None:
            msg = f"{where} produced a value from null"
            raise FilterTypeError(msg)
        return
    if after is None:
        if not spec.nullable:
            msg = f"{where} returned None for a non-nullable field"
            raise FilterTypeError(msg)
        return

    expected = spec.declared_type
    if expected is None or isinstance(after, expected):
        return
    if expected is float and isinstance(after, int) and not isinstance(after, bool):
        return
    msg = (
        f"{where} returned {type(after).__name__}, "
        f"declared type is {expected.__name__}"
    )
    raise FilterTypeError(msg)
