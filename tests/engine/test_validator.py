"""End-to-end tests for the Validator facade and the process-wide engine."""

import dataclasses
from pathlib import Path

import pytest
from pydantic import BaseModel, Field

import fieldguard
from fieldguard.config.models import ValidationOptions
from fieldguard.config.settings import FieldguardSettings
from fieldguard.engine import validator as validator_module
from fieldguard.engine.cache import SchemaCache
from fieldguard.engine.context import ValidationContext
from fieldguard.engine.registry import RuleRegistry
from fieldguard.engine.validator import Validator
from fieldguard.errors import CompileError, RegistryFrozenError
from fieldguard.fields import declare, tags


@dataclasses.dataclass
class Applicant:
    age: int = declare("min(18)|max(65)", default=0)


@dataclasses.dataclass
class Greeting:
    name: str | None = declare(filter="trim", default=None)


@dataclasses.dataclass
class Entity:
    ident: int = declare("min(1000)", trigger="update", default=0)


@dataclasses.dataclass
class Inner:
    age: int = declare("min(18)", default=0)


@dataclasses.dataclass
class Outer:
    inner: Inner = dataclasses.field(default_factory=Inner)
    bar: int = declare("min(10)", default=0)


@dataclasses.dataclass
class Strict:
    code: str = declare("min(5)|digits", default="")


@dataclasses.dataclass
class Broken:
    name: str = declare("required|does_not_exist", default="")


@dataclasses.dataclass
class Even:
    number: int = declare("even", default=0)


class SignupForm(BaseModel):
    email: str = Field(json_schema_extra=tags("required|email", filter="trim|lower"))
    plan: str = Field(default="free", json_schema_extra=tags("enum(free,pro)"))
    referrer: str | None = Field(default=None, json_schema_extra=tags("min(3)"))


def _is_even(ctx: ValidationContext) -> bool:
    if ctx.is_null or ctx.value % 2 == 0:
        return True
    return ctx.fail(f"{ctx.label} must be even")


class TestScenarios:
    def test_out_of_range_age(self, validator: Validator) -> None:
        result = validator.validate(Applicant(age=16))
        assert result.valid is False
        assert len(result.field_errors) == 1
        assert result.field_errors[0].field == "age"

    def test_trim_writes_back(self, validator: Validator) -> None:
        record = Greeting(name=" hi ")
        result = validator.validate(record)
        assert record.name == "hi"
        assert result.valid is True

    def test_update_only_field_excluded_on_create(self, validator: Validator) -> None:
        assert validator.validate(Entity(ident=0), trigger="create").valid is True

    def test_update_only_field_included_on_update(self, validator: Validator) -> None:
        result = validator.validate(Entity(ident=0), trigger="update")
        assert result.valid is False
        assert [e.field for e in result.field_errors] == ["ident"]

    def test_nested_record(self, validator: Validator) -> None:
        result = validator.validate(Outer(inner=Inner(age=10), bar=15))
        assert [e.field for e in result.field_errors] == ["age"]


class TestPydanticRecords:
    def test_filters_normalize_after_validators_pass(self, validator: Validator) -> None:
        form = SignupForm(email="Ada@Example.COM")
        result = validator.validate(form)
        assert result.valid is True
        assert form.email == "ada@example.com"

    def test_validators_see_the_unfiltered_value(self, validator: Validator) -> None:
        form = SignupForm(email="  Ada@Example.COM ")
        result = validator.validate(form)
        assert [e.field for e in result.field_errors] == ["email"]
        assert form.email == "ada@example.com"

    def test_failures(self, validator: Validator) -> None:
        form = SignupForm(email="nope", plan="gold", referrer="x")
        result = validator.validate(form)
        assert [e.field for e in result.field_errors] == ["email", "plan", "referrer"]

    def test_allowed_values_exposed(self, make_validator) -> None:
        result = make_validator(expose_allowed_values=True).validate(
            SignupForm(email="a@b.co", plan="gold")
        )
        assert result.field_errors[0].message == "plan has an invalid value; allowed values: free, pro"


class TestStructuralErrors:
    @pytest.mark.parametrize("value", [None, 42, "text", {"age": 1}, Applicant])
    def test_non_record_input(self, validator: Validator, value: object) -> None:
        result = validator.validate(value)
        assert result.valid is False
        assert result.structural_error is not None
        assert result.structural_error.code == "not_a_record"
        assert result.field_errors == []

    def test_compile_errors_raise(self, validator: Validator) -> None:
        with pytest.raises(CompileError, match="does_not_exist"):
            validator.validate(Broken())

    def test_compile_schema_fails_fast(self, validator: Validator) -> None:
        with pytest.raises(CompileError):
            validator.compile_schema(Broken)


class TestLifecycle:
    def test_custom_validator(self, validator: Validator) -> None:
        validator.register_validator("even", _is_even)
        result = validator.validate(Even(number=3))
        assert result.field_errors[0].message == "number must be even"
        assert validator.validate(Even(number=4)).valid

    def test_duplicate_registration_allowed_by_option(self, registry: RuleRegistry) -> None:
        engine = Validator(
            ValidationOptions(allow_duplicate_registration=True), registry=registry
        )
        engine.register_validator("required", _is_even)
        assert registry.get_validator("required") is _is_even

    def test_freeze(self, validator: Validator) -> None:
        validator.freeze()
        with pytest.raises(RegistryFrozenError):
            validator.register_validator("even", _is_even)
        assert validator.validate(Applicant(age=30)).valid

    def test_from_settings(self, tmp_path: Path, registry: RuleRegistry) -> None:
        plugins = tmp_path / "plugins"
        plugins.mkdir()
        (plugins / "odd.py").write_text(
            "from fieldguard.plugins import hookimpl\n\n\n"
            "class OddRules:\n"
            "    @hookimpl\n"
            "    def fieldguard_validators(self):\n"
            "        return {'odd': lambda ctx: ctx.is_null or ctx.value % 2 == 1}\n"
        )
        settings = FieldguardSettings.load(
            start=tmp_path,
            plugins_dir=plugins,
            load_entry_points=False,
            validation={"expose_rule_names": True},
        )
        engine = Validator.from_settings(settings, registry=registry)
        assert engine.options.expose_rule_names is True
        assert "odd" in registry.validator_names()


class TestProcessWideEngine:
    @pytest.fixture(autouse=True)
    def _private_default_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(validator_module, "_default_registry", RuleRegistry.with_builtins())
        monkeypatch.setattr(validator_module, "_default_cache", SchemaCache())
        monkeypatch.setattr(validator_module, "_default_validator", None)

    def test_validate(self) -> None:
        assert fieldguard.validate(Applicant(age=30)).valid
        assert not fieldguard.validate(Applicant(age=70)).valid

    def test_compile_schema_is_cached(self) -> None:
        assert fieldguard.compile_schema(Outer) is fieldguard.compile_schema(Outer)

    def test_register_and_freeze(self) -> None:
        fieldguard.register_validator("even", _is_even)
        fieldguard.freeze_registry()
        assert not fieldguard.validate(Even(number=1)).valid
        with pytest.raises(RegistryFrozenError):
            fieldguard.register_filter("late", lambda ctx: ctx.value)

    def test_configure_replaces_options(self) -> None:
        assert len(fieldguard.validate(Strict(code="ab")).field_errors) == 2
        fieldguard.configure(ValidationOptions(stop_on_first_error=True))
        assert len(fieldguard.validate(Strict(code="ab")).field_errors) == 1
        assert validator_module.get_validator().options.stop_on_first_error is True

    def test_engines_share_the_default_cache(self) -> None:
        first = Validator()
        second = Validator()
        assert first.cache is second.cache
        assert first.registry is second.registry
