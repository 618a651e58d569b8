"""Tests for rule-chain execution: null/zero semantics, short-circuiting, filters."""

import dataclasses
import decimal

import pytest

from fieldguard.engine.context import ValidationContext
from fieldguard.engine.registry import RuleRegistry
from fieldguard.engine.validator import Validator
from fieldguard.errors import FilterTypeError, RuleTypeError
from fieldguard.fields import declare


@dataclasses.dataclass
class Nullable:
    name: str | None = declare("min(3)|regex(^[a-z]+$)|email", default=None)


@dataclasses.dataclass
class Required:
    name: str | None = declare("required|min(3)", default=None)


@dataclasses.dataclass
class TrimAfterFailure:
    code: str = declare("min(10)", filter="trim", default="")


@dataclasses.dataclass
class Ordered:
    first: str = declare("min(5)|alpha", default="")
    second: int = declare("min(10)|max(1)", default=0)
    third: str = declare("required", default="")


@dataclasses.dataclass
class ZeroAllowed:
    age: int = declare("min(18)", flags="allow_zero", default=0)
    nick: str | None = declare("min(3)", filter="upper", flags="allow_zero", default=None)
    score: decimal.Decimal = declare("min(1)", flags="allow_zero", default=decimal.Decimal(0))


@dataclasses.dataclass
class Messages:
    fixed: int = declare("min(10)|max(0)", message="please pick a sane value", default=0)
    generated: int = declare("never", default=0)
    labelled: int = declare("never", label="Level", default=0)


@dataclasses.dataclass
class StringifiedCount:
    count: int = declare(filter="stringify", default=0)


@dataclasses.dataclass
class VanishNullable:
    maybe: str | None = declare(filter="vanish", default="x")


@dataclasses.dataclass
class VanishRequired:
    text: str = declare(filter="vanish", default="x")


@dataclasses.dataclass
class Revived:
    revive: str | None = declare(filter="revive", default=None)


@dataclasses.dataclass
class Truncated:
    weight: float = declare(filter="truncate", default=1.5)


@dataclasses.dataclass
class Tagged:
    labels: list[str] = declare("min(2)", filter="trim|lower", default_factory=list)
    weight: float = declare(filter="round(1)", default=0.0)


@dataclasses.dataclass
class Misused:
    count: int = declare("regex(^a$)", default=1)


@dataclasses.dataclass
class Inner:
    age: int = declare("min(18)", default=0)


@dataclasses.dataclass
class Outer:
    inner: Inner | None = None
    bar: int = declare("min(10)", default=0)


@dataclasses.dataclass
class RequiredInner:
    inner: Inner | None = declare("required", default=None)
    bar: int = declare("min(10)", default=0)


@dataclasses.dataclass
class Padded:
    code: str = declare("min(2)|alpha", filter="upper", default="")


@dataclasses.dataclass
class SparseTags:
    labels: list[str | None] = declare("alpha", filter="trim", default_factory=list)


def _never(ctx: ValidationContext) -> bool:
    return False


def _stringify(ctx: ValidationContext) -> object:
    return str(ctx.value)


def _vanish(ctx: ValidationContext) -> object:
    return None


def _revive(ctx: ValidationContext) -> object:
    return "alive"


def _truncate(ctx: ValidationContext) -> object:
    return int(ctx.value)


@pytest.fixture
def engine(registry: RuleRegistry) -> Validator:
    registry.register_validator("never", _never)
    registry.register_filter("stringify", _stringify)
    registry.register_filter("vanish", _vanish)
    registry.register_filter("revive", _revive)
    registry.register_filter("truncate", _truncate)
    return Validator(registry=registry)


class TestNullSemantics:
    def test_null_skips_non_required_rules(self, engine: Validator) -> None:
        assert engine.validate(Nullable()).valid

    def test_required_blocks_null_once(self, engine: Validator) -> None:
        result = engine.validate(Required())
        assert [e.rule for e in result.field_errors] == ["required"]
        assert result.field_errors[0].message == "name is required"

    def test_required_accepts_zero_values(self, engine: Validator) -> None:
        result = engine.validate(Required(name=""))
        assert [e.rule for e in result.field_errors] == ["min"]


class TestFiltersAlwaysRun:
    def test_filter_runs_after_validator_failure(self, engine: Validator) -> None:
        record = TrimAfterFailure(code="  abc  ")
        result = engine.validate(record)
        assert not result.valid
        assert record.code == "abc"

    def test_stop_on_first_error_skips_filters(self, make_validator) -> None:
        engine = make_validator(stop_on_first_error=True)
        record = TrimAfterFailure(code="  abc  ")
        result = engine.validate(record)
        assert len(result.field_errors) == 1
        assert record.code == "  abc  "

    def test_filters_see_previous_filter_output(self, engine: Validator) -> None:
        record = Tagged(labels=["  Foo ", "BAR"], weight=2.345)
        assert engine.validate(record).valid
        assert record.labels == ["foo", "bar"]
        assert record.weight == 2.3


class TestOrdering:
    def test_field_then_rule_order(self, engine: Validator) -> None:
        result = engine.validate(Ordered(first="ab1", second=5, third=""))
        assert [(e.path, e.rule) for e in result.field_errors] == [
            ("first", "min"),
            ("first", "alpha"),
            ("second", "min"),
            ("second", "max"),
        ]

    def test_stop_on_first_error_is_per_field(self, make_validator) -> None:
        result = make_validator(stop_on_first_error=True).validate(Ordered(first="ab1", second=5))
        assert [(e.path, e.rule) for e in result.field_errors] == [
            ("first", "min"),
            ("second", "min"),
        ]


class TestAllowZero:
    def test_zero_values_skip_everything(self, engine: Validator) -> None:
        record = ZeroAllowed()
        assert engine.validate(record).valid
        assert record.nick is None

    def test_non_zero_values_are_checked(self, engine: Validator) -> None:
        record = ZeroAllowed(age=5, nick="ab", score=decimal.Decimal("0.5"))
        result = engine.validate(record)
        assert [e.path for e in result.field_errors] == ["age", "nick", "score"]
        assert record.nick == "AB"

    def test_empty_string_is_zero(self, engine: Validator) -> None:
        record = ZeroAllowed(nick="")
        assert engine.validate(record).valid
        assert record.nick == ""


class TestMessages:
    def test_fixed_message_for_every_failure(self, engine: Validator) -> None:
        result = engine.validate(Messages(fixed=5))
        fixed = result.errors_for("fixed")
        assert [e.message for e in fixed] == ["please pick a sane value"] * 2

    def test_generated_default_message(self, engine: Validator) -> None:
        result = engine.validate(Messages(fixed=5))
        assert result.errors_for("generated")[0].message == "generated: field validation failed"

    def test_default_message_uses_label(self, engine: Validator) -> None:
        result = engine.validate(Messages())
        assert result.errors_for("Level")[0].message == "Level: field validation failed"

    def test_expose_rule_names(self, registry: RuleRegistry, make_validator) -> None:
        registry.register_validator("never", _never)
        result = make_validator(expose_rule_names=True).validate(Messages(fixed=50))
        assert result.errors_for("generated")[0].message == (
            "generated: field validation failed using rule never"
        )

    def test_built_in_message_wins_over_generated(self, engine: Validator) -> None:
        inner = engine.validate(Outer(inner=Inner(age=3), bar=20))
        assert inner.field_errors[0].message == "age must be greater than or equal to 18"


class TestFilterTypeChecks:
    def test_filter_changing_type_raises(self, engine: Validator) -> None:
        with pytest.raises(FilterTypeError, match="declared type is int"):
            engine.validate(StringifiedCount())

    def test_none_for_nullable_field_is_allowed(self, engine: Validator) -> None:
        record = VanishNullable()
        assert engine.validate(record).valid
        assert record.maybe is None

    def test_none_for_non_nullable_field_raises(self, engine: Validator) -> None:
        with pytest.raises(FilterTypeError, match="non-nullable"):
            engine.validate(VanishRequired())

    def test_filter_must_not_turn_null_into_a_value(self, engine: Validator) -> None:
        with pytest.raises(FilterTypeError, match="from null"):
            engine.validate(Revived())

    def test_int_result_accepted_for_float_field(self, engine: Validator) -> None:
        record = Truncated()
        assert engine.validate(record).valid
        assert record.weight == 1


class TestRuleUsage:
    def test_rule_on_unsupported_kind_raises(self, engine: Validator) -> None:
        with pytest.raises(RuleTypeError):
            engine.validate(Misused())


class TestNested:
    def test_none_parent_skips_nested_fields(self, engine: Validator) -> None:
        result = engine.validate(Outer(inner=None, bar=20))
        assert result.valid

    def test_nested_failure_reported_with_path(self, engine: Validator) -> None:
        result = engine.validate(Outer(inner=Inner(age=10), bar=15))
        assert [(e.field, e.path) for e in result.field_errors] == [("age", "inner.age")]

    def test_required_nested_record_missing(self, engine: Validator) -> None:
        result = engine.validate(RequiredInner(bar=20))
        assert [(e.field, e.rule) for e in result.field_errors] == [("inner", "required")]

    def test_required_nested_record_present_still_checks_children(
        self, engine: Validator
    ) -> None:
        result = engine.validate(RequiredInner(inner=Inner(age=10), bar=20))
        assert [e.path for e in result.field_errors] == ["inner.age"]


class TestNullElements:
    def test_null_elements_survive_filters_and_validators(self, engine: Validator) -> None:
        record = SparseTags(labels=[" ab ", None])
        result = engine.validate(record)
        assert record.labels == ["ab", None]
        # alpha sees the untrimmed " ab " first.
        assert [e.field for e in result.field_errors] == ["labels"]

    def test_only_null_elements(self, engine: Validator) -> None:
        record = SparseTags(labels=[None])
        assert engine.validate(record).valid
        assert record.labels == [None]


class TestAutoTrim:
    def test_trims_before_validators(self, make_validator) -> None:
        record = Padded(code="  ab ")
        result = make_validator(auto_trim_strings=True).validate(record)
        assert result.valid
        assert record.code == "AB"

    def test_off_by_default(self, make_validator) -> None:
        record = Padded(code="  ab ")
        result = make_validator().validate(record)
        assert [e.rule for e in result.field_errors] == ["alpha"]
        assert record.code == "  AB "
