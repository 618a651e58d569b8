"""Select the compiled fields that run for a given activation token."""

from __future__ import annotations

from collections.abc import Iterable

from fieldguard.engine.compiler import ALL_TRIGGER, FieldSpec


def select_fields(fields: Iterable[FieldSpec], trigger: str | None = None) -> list[FieldSpec]:
    """Keep the specs activated by *trigger*, preserving schema order.

    A spec is selected when its trigger set contains *trigger* or the
    reserved ``"all"`` token. *trigger* defaults to ``"all"``.

    Examples:
        A field tagged ``trigger="update"`` is skipped for ``"create"`` and
        selected for ``"update"``; an untagged field is selected for both.
    """
    token = ALL_TRIGGER if trigger is None else trigger
    return [spec for spec in fields if spec.is_active(token)]
