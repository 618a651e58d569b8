"""Tests for the built-in filters, called directly with a context."""

import decimal

import pytest

from fieldguard.domain.kinds import ValueKind
from fieldguard.errors import RuleArgumentError, RuleTypeError
from fieldguard.rules.filters import (
    abs_,
    lower,
    ltrim,
    round_,
    rtrim,
    squash,
    title,
    trim,
    upper,
)
from tests.conftest import make_context


class TestStringFilters:
    def test_trim_family(self) -> None:
        assert trim(make_context("  hi  ")) == "hi"
        assert ltrim(make_context("  hi  ")) == "hi  "
        assert rtrim(make_context("  hi  ")) == "  hi"

    def test_trim_custom_chars(self) -> None:
        assert trim(make_context("--hi--", ValueKind.STRING, "-")) == "hi"

    def test_trim_too_many_args(self) -> None:
        with pytest.raises(RuleArgumentError):
            trim(make_context("x", ValueKind.STRING, "a", "b"))

    def test_casing(self) -> None:
        assert upper(make_context("Ada")) == "ADA"
        assert lower(make_context("Ada")) == "ada"
        assert title(make_context("ada lovelace")) == "Ada Lovelace"

    def test_squash(self) -> None:
        assert squash(make_context("  a \t b\n\nc ")) == "a b c"

    def test_null_stays_null(self) -> None:
        assert trim(make_context(None)) is None
        assert upper(make_context(None)) is None

    def test_containers_keep_their_type(self) -> None:
        assert trim(make_context([" a ", "b "])) == ["a", "b"]
        assert trim(make_context((" a ",))) == ("a",)
        assert upper(make_context({"k": "v"})) == {"k": "V"}
        assert lower(make_context(frozenset({"A"}))) == frozenset({"a"})

    def test_null_elements_pass_through(self) -> None:
        assert trim(make_context([" a ", None])) == ["a", None]
        assert upper(make_context({"k": None, "j": "v"})) == {"k": None, "j": "V"}

    def test_wrong_kind(self) -> None:
        with pytest.raises(RuleTypeError):
            upper(make_context(1, ValueKind.INT))


class TestNumericFilters:
    def test_abs(self) -> None:
        assert abs_(make_context(-3, ValueKind.INT)) == 3
        assert abs_(make_context([-1.5, 2.0], ValueKind.FLOAT)) == [1.5, 2.0]
        assert abs_(make_context([-1, None], ValueKind.INT)) == [1, None]

    def test_round_float(self) -> None:
        assert round_(make_context(2.345, ValueKind.FLOAT, "1")) == 2.3
        assert round_(make_context(2.6, ValueKind.FLOAT)) == 3.0

    def test_round_keeps_ints(self) -> None:
        assert round_(make_context(7, ValueKind.INT, "2")) == 7

    def test_round_decimal_quantizes(self) -> None:
        result = round_(make_context(decimal.Decimal("1.005"), ValueKind.DECIMAL, "2"))
        assert result == decimal.Decimal("1.00")

    def test_null(self) -> None:
        assert round_(make_context(None, ValueKind.FLOAT)) is None

    def test_wrong_kind(self) -> None:
        with pytest.raises(RuleTypeError):
            abs_(make_context("x"))
