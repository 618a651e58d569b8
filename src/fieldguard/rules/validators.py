"""Built-in validators.

Conventions shared by every rule here:

- A null value is "not provided": every rule except ``required`` accepts it.
- Collections are checked element by element, except for the size rules
  (``min``/``max``/``length`` measure a collection's length).
- An unsupported kind raises RuleTypeError; unusable arguments raise
  RuleArgumentError. Both are schema bugs, not validation failures.
- Recoverable per-value problems (an unparsable date) become the message.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import functools
import re
import uuid
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from fieldguard.domain.comparators import Comparator
from fieldguard.domain.kinds import TEMPORAL_KINDS, ValueKind
from fieldguard.engine.context import ValidationContext
from fieldguard.errors import RuleArgumentError, RuleTypeError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_TEXT_KINDS = (ValueKind.STRING,)


def _elements(value: Any) -> Iterator[Any]:
    """Yield the values a per-element rule must check. Null elements are skipped."""
    if isinstance(value, Mapping):
        yield from (v for v in value.values() if v is not None)
    elif isinstance(value, (list, tuple, set, frozenset)):
        yield from (v for v in value if v is not None)
    else:
        yield value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, decimal.Decimal)) and not isinstance(value, bool)


@functools.lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(ctx: ValidationContext) -> bool:
    """Reject null. Any non-null value (including zero and "") passes."""
    if ctx.is_null:
        return ctx.fail(f"{ctx.label} is required")
    return True


# ---------------------------------------------------------------------------
# Size and bounds
# ---------------------------------------------------------------------------


def _bound(comparator: Comparator) -> Callable[[ValidationContext], bool]:
    def check(ctx: ValidationContext) -> bool:
        ctx.require_args(1)
        if ctx.is_null:
            return True
        value = ctx.value
        if _is_number(value):
            limit = ctx.number_arg(0)
            if comparator.compare(value, limit):
                return True
            return ctx.fail(f"{ctx.label} must be {comparator.numeric_description} {limit}")
        if isinstance(value, (str, bytes, list, tuple, set, frozenset, Mapping)):
            limit = ctx.int_arg(0)
            if comparator.compare(len(value), limit):
                return True
            return ctx.fail(
                f"{ctx.label} length must be {comparator.numeric_description} {limit}"
            )
        msg = f"rule {ctx.rule_name!r} needs a number, string or collection (field {ctx.label!r})"
        raise RuleTypeError(msg)

    return check


min_ = _bound(Comparator.GREATER_THAN_OR_EQUAL)
max_ = _bound(Comparator.LESS_THAN_OR_EQUAL)


def length(ctx: ValidationContext) -> bool:
    """Exact length of a string, bytes or collection."""
    ctx.require_args(1)
    if ctx.is_null:
        return True
    expected = ctx.int_arg(0)
    try:
        actual = len(ctx.value)
    except TypeError:
        msg = f"rule 'length' needs a sized value (field {ctx.label!r})"
        raise RuleTypeError(msg) from None
    if actual == expected:
        return True
    return ctx.fail(f"{ctx.label} length must be exactly {expected}")


# ---------------------------------------------------------------------------
# Membership and patterns
# ---------------------------------------------------------------------------


def _enum_token(value: Any) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def enum_(ctx: ValidationContext) -> bool:
    """Accept only values whose string form is one of the arguments."""
    if not ctx.args:
        msg = "rule 'enum' needs at least one allowed value"
        raise RuleArgumentError(msg)
    if ctx.is_null:
        return True
    allowed = set(ctx.args)
    if all(_enum_token(v) in allowed for v in _elements(ctx.value)):
        return True
    message = f"{ctx.label} has an invalid value"
    if ctx.options.expose_allowed_values:
        message += f"; allowed values: {', '.join(ctx.args)}"
    return ctx.fail(message)


def regex(ctx: ValidationContext) -> bool:
    """Full-match every string against the pattern argument."""
    ctx.value_must_be_of_kind(*_TEXT_KINDS)
    ctx.require_args(1)
    try:
        pattern = _compile_pattern(ctx.arg(0))
    except re.error as exc:
        msg = f"rule 'regex' has an invalid pattern {ctx.arg(0)!r}: {exc}"
        raise RuleArgumentError(msg) from exc
    if ctx.is_null:
        return True
    if all(pattern.fullmatch(v) for v in _elements(ctx.value)):
        return True
    return ctx.fail(f"{ctx.label} has an invalid format")


def _string_predicate(
    predicate: Callable[[str], bool], description: str
) -> Callable[[ValidationContext], bool]:
    def check(ctx: ValidationContext) -> bool:
        ctx.value_must_be_of_kind(*_TEXT_KINDS)
        if ctx.is_null:
            return True
        if all(predicate(v) for v in _elements(ctx.value)):
            return True
        return ctx.fail(f"{ctx.label} {description}")

    return check


email = _string_predicate(
    lambda v: EMAIL_PATTERN.match(v) is not None, "must be a valid email address"
)
alpha = _string_predicate(str.isalpha, "must contain only letters")
alnum = _string_predicate(str.isalnum, "must contain only letters and digits")
digits = _string_predicate(str.isdigit, "must contain only digits")


def uuid_(ctx: ValidationContext) -> bool:
    """Accept UUID values and strings that parse as UUIDs."""
    ctx.value_must_be_of_kind(ValueKind.STRING, ValueKind.UUID)
    if ctx.is_null or ctx.kind is ValueKind.UUID:
        return True
    for v in _elements(ctx.value):
        try:
            uuid.UUID(v)
        except ValueError:
            return ctx.fail(f"{ctx.label} must be a valid UUID")
    return True


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def date(ctx: ValidationContext) -> bool:
    """Strings must parse with the ``strptime`` format argument (ISO date by default)."""
    ctx.value_must_be_of_kind(*_TEXT_KINDS)
    ctx.require_args(0, at_most=1)
    if ctx.is_null:
        return True
    fmt = ctx.arg(0) if ctx.args else "%Y-%m-%d"
    for v in _elements(ctx.value):
        try:
            datetime.datetime.strptime(v, fmt)
        except ValueError as exc:
            return ctx.fail(f"{ctx.label} is not a valid date: {exc}")
    return True


def _temporal_bound(comparator: Comparator) -> Callable[[ValidationContext], bool]:
    def check(ctx: ValidationContext) -> bool:
        ctx.value_must_be_of_kind(*TEMPORAL_KINDS)
        ctx.require_args(1)
        limit = ctx.date_arg(0)
        if ctx.is_null:
            return True
        for v in _elements(ctx.value):
            left, right = _align_temporal(v, limit)
            if not comparator.compare(left, right):
                return ctx.fail(
                    f"{ctx.label} must be {comparator.temporal_description} {limit.isoformat()}"
                )
        return True

    return check


def _align_temporal(value: Any, limit: datetime.date) -> tuple[Any, Any]:
    """Make a date/datetime pair comparable."""
    value_is_dt = isinstance(value, datetime.datetime)
    limit_is_dt = isinstance(limit, datetime.datetime)
    if value_is_dt and not limit_is_dt:
        return value.date(), limit
    if limit_is_dt and not value_is_dt:
        return value, limit.date()
    if value_is_dt and limit_is_dt and (value.tzinfo is None) != (limit.tzinfo is None):
        return value.replace(tzinfo=None), limit.replace(tzinfo=None)
    return value, limit


before = _temporal_bound(Comparator.LESS_THAN)
after = _temporal_bound(Comparator.GREATER_THAN)


BUILTIN_VALIDATORS: dict[str, Callable[[ValidationContext], bool]] = {
    "required": required,
    "min": min_,
    "max": max_,
    "length": length,
    "enum": enum_,
    "regex": regex,
    "email": email,
    "uuid": uuid_,
    "alpha": alpha,
    "alnum": alnum,
    "digits": digits,
    "date": date,
    "before": before,
    "after": after,
}
