"""Built-in filters.

Every filter returns ``None`` for a null value and otherwise a value of the
same type it received. String filters map over list/tuple/set/frozenset and
dict values, rebuilding the same container type.
"""

from __future__ import annotations

import decimal
import re
from collections.abc import Callable
from typing import Any

from fieldguard.domain.kinds import NUMERIC_KINDS, ValueKind
from fieldguard.engine.context import ValidationContext
from fieldguard.errors import RuleTypeError

_WHITESPACE_RUN = re.compile(r"\s+")


def _map_values(value: Any, fn: Callable[[Any], Any]) -> Any:
    """Apply *fn* to a scalar or to each element. Null elements stay null."""

    def keep_null(v: Any) -> Any:
        return None if v is None else fn(v)

    if isinstance(value, dict):
        return type(value)((k, keep_null(v)) for k, v in value.items())
    if isinstance(value, (list, tuple, set, frozenset)):
        return type(value)(keep_null(v) for v in value)
    return fn(value)


def _string_filter(transform: Callable[[ValidationContext, str], str]) -> Callable[..., Any]:
    def apply(ctx: ValidationContext) -> Any:
        ctx.value_must_be_of_kind(ValueKind.STRING)
        if ctx.is_null:
            return None
        return _map_values(ctx.value, lambda v: transform(ctx, v))

    return apply


def _chars(ctx: ValidationContext) -> str | None:
    """Optional single argument: the characters to strip."""
    ctx.require_args(0, at_most=1)
    return ctx.arg(0) if ctx.args else None


trim = _string_filter(lambda ctx, v: v.strip(_chars(ctx)))
ltrim = _string_filter(lambda ctx, v: v.lstrip(_chars(ctx)))
rtrim = _string_filter(lambda ctx, v: v.rstrip(_chars(ctx)))
upper = _string_filter(lambda _ctx, v: v.upper())
lower = _string_filter(lambda _ctx, v: v.lower())
title = _string_filter(lambda _ctx, v: v.title())
squash = _string_filter(lambda _ctx, v: _WHITESPACE_RUN.sub(" ", v).strip())


def abs_(ctx: ValidationContext) -> Any:
    ctx.value_must_be_of_kind(*NUMERIC_KINDS)
    if ctx.is_null:
        return None
    return _map_values(ctx.value, abs)


def round_(ctx: ValidationContext) -> Any:
    """Round floats and Decimals to ``ndigits`` (default 0). Ints pass through."""
    ctx.value_must_be_of_kind(*NUMERIC_KINDS)
    ctx.require_args(0, at_most=1)
    ndigits = ctx.int_arg(0) if ctx.args else 0
    if ctx.is_null:
        return None

    def _round(v: Any) -> Any:
        if isinstance(v, int):
            return v
        if isinstance(v, decimal.Decimal):
            return v.quantize(decimal.Decimal(1).scaleb(-ndigits))
        if isinstance(v, float):
            return float(round(v, ndigits))
        msg = f"filter 'round' cannot round {type(v).__name__} (field {ctx.label!r})"
        raise RuleTypeError(msg)

    return _map_values(ctx.value, _round)


BUILTIN_FILTERS: dict[str, Callable[[ValidationContext], Any]] = {
    "trim": trim,
    "ltrim": ltrim,
    "rtrim": rtrim,
    "upper": upper,
    "lower": lower,
    "title": title,
    "squash": squash,
    "abs": abs_,
    "round": round_,
}
