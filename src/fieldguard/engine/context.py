"""The per-invocation carrier handed to every rule.

A fresh context is built for each validator/filter call and discarded
afterwards. Rules read the value and static arguments from it and may leave
a message in :attr:`ValidationContext.error_message`.

Rule contract::

    def my_validator(ctx: ValidationContext) -> bool: ...
    def my_filter(ctx: ValidationContext) -> Any: ...   # None in, None out
"""

from __future__ import annotations

import datetime
import decimal
from typing import TYPE_CHECKING, Any

from fieldguard.domain.kinds import ValueKind
from fieldguard.engine.accessor import ABSENT, Present, Value
from fieldguard.errors import RuleArgumentError, RuleTypeError

if TYPE_CHECKING:
    from fieldguard.config.models import ValidationOptions


class ValidationContext:
    """Value, null state and static arguments for one rule invocation.

    Attributes:
        kind: Semantic kind of the field (element kind for collections).
        nullable: Whether ``None`` is part of the field's declared type.
        args: The rule's static arguments as raw strings.
        label: Display label of the field.
        rule_name: Name the rule was invoked under.
        options: Engine-wide options.
        error_message: Set by a failing validator to explain the failure.
    """

    __slots__ = (
        "_value",
        "args",
        "error_message",
        "kind",
        "label",
        "nullable",
        "options",
        "rule_name",
    )

    def __init__(
        self,
        *,
        value: Value,
        kind: ValueKind,
        nullable: bool,
        args: tuple[str, ...],
        label: str,
        rule_name: str,
        options: ValidationOptions,
    ) -> None:
        self._value = value
        self.kind = kind
        self.nullable = nullable
        self.args = args
        self.label = label
        self.rule_name = rule_name
        self.options = options
        self.error_message: str | None = None

    # --- value ---

    @property
    def current(self) -> Value:
        """The value as ``Present(value)`` or ``ABSENT``."""
        return self._value

    @property
    def is_null(self) -> bool:
        return self._value is ABSENT

    @property
    def value(self) -> Any:
        """The raw value; ``None`` when null."""
        if isinstance(self._value, Present):
            return self._value.value
        return None

    def is_value_of_kind(self, *kinds: ValueKind) -> bool:
        return self.kind in kinds

    def value_must_be_of_kind(self, *kinds: ValueKind) -> None:
        """Raise RuleTypeError unless the field's kind is one of *kinds*."""
        if self.kind not in kinds:
            expected = ", ".join(str(k) for k in kinds)
            msg = (
                f"rule {self.rule_name!r} does not support {self.kind} values "
                f"(field {self.label!r}; expected {expected})"
            )
            raise RuleTypeError(msg)

    def fail(self, message: str) -> bool:
        """Record *message* and return False, for ``return ctx.fail(...)``."""
        self.error_message = message
        return False

    # --- static arguments ---

    @property
    def arg_count(self) -> int:
        return len(self.args)

    def require_args(self, count: int, *, at_most: int | None = None) -> None:
        """Raise RuleArgumentError unless between *count* and *at_most* args were given."""
        upper = count if at_most is None else at_most
        if not count <= len(self.args) <= upper:
            wanted = str(count) if upper == count else f"{count}-{upper}"
            msg = f"rule {self.rule_name!r} expects {wanted} argument(s), got {len(self.args)}"
            raise RuleArgumentError(msg)

    def arg(self, index: int) -> str:
        try:
            return self.args[index]
        except IndexError:
            msg = f"rule {self.rule_name!r} is missing argument #{index + 1}"
            raise RuleArgumentError(msg) from None

    def int_arg(self, index: int) -> int:
        raw = self.arg(index)
        try:
            return int(raw)
        except ValueError:
            msg = f"rule {self.rule_name!r} argument #{index + 1} is not an integer: {raw!r}"
            raise RuleArgumentError(msg) from None

    def number_arg(self, index: int) -> int | float | decimal.Decimal:
        """Parse an int, float or (for DECIMAL fields) Decimal argument."""
        raw = self.arg(index)
        try:
            if self.kind is ValueKind.DECIMAL:
                return decimal.Decimal(raw)
            try:
                return int(raw)
            except ValueError:
                return float(raw)
        except (ValueError, decimal.InvalidOperation):
            msg = f"rule {self.rule_name!r} argument #{index + 1} is not a number: {raw!r}"
            raise RuleArgumentError(msg) from None

    def date_arg(self, index: int) -> datetime.date:
        """Parse an ISO-8601 date or datetime argument."""
        raw = self.arg(index)
        try:
            if "T" in raw or " " in raw:
                return datetime.datetime.fromisoformat(raw)
            return datetime.date.fromisoformat(raw)
        except ValueError:
            msg = f"rule {self.rule_name!r} argument #{index + 1} is not an ISO date: {raw!r}"
            raise RuleArgumentError(msg) from None
