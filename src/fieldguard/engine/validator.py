"""Validator: the engine facade, plus the process-wide default engine.

Typical application lifecycle::

    import fieldguard

    fieldguard.register_validator("even", is_even)   # init phase
    fieldguard.load_plugins()
    fieldguard.compile_schema(SignupForm)            # fail fast on broken schemas
    fieldguard.freeze_registry()                     # serve phase begins

    result = fieldguard.validate(form, trigger="create")

Compile errors surface as exceptions from ``compile_schema`` (or from the
first ``validate`` of a type). Data that fails a rule never raises.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fieldguard.config.models import ValidationOptions
from fieldguard.engine.cache import SchemaCache
from fieldguard.engine.compiler import Schema, SchemaCompiler
from fieldguard.engine.executor import execute_schema
from fieldguard.engine.introspection import is_record_instance
from fieldguard.engine.registry import FilterFunction, RuleRegistry, ValidatorFunction
from fieldguard.engine.result import ValidationResult, aggregate, not_a_record
from fieldguard.engine.triggers import select_fields

if TYPE_CHECKING:
    from fieldguard.config.settings import FieldguardSettings

logger = logging.getLogger(__name__)


class Validator:
    """Compiles, caches and executes rule schemas for record instances.

    Args:
        options: Engine options; defaults to ``ValidationOptions()``.
        registry: Rule registry; defaults to the process-wide registry.
        cache: Schema cache; defaults to the process-wide cache when the
            process-wide registry is used, otherwise a private cache (bound
            callables differ between registries).
    """

    def __init__(
        self,
        options: ValidationOptions | None = None,
        *,
        registry: RuleRegistry | None = None,
        cache: SchemaCache | None = None,
    ) -> None:
        self.options = options or ValidationOptions()
        if registry is None:
            registry = default_registry()
            if cache is None:
                cache = _default_cache
        self.registry = registry
        self.cache = cache if cache is not None else SchemaCache()
        self._compiler = SchemaCompiler(self.registry, self.options)

    @classmethod
    def from_settings(
        cls,
        settings: FieldguardSettings,
        *,
        registry: RuleRegistry | None = None,
    ) -> Validator:
        """Build an engine from unified settings, loading configured plugins."""
        engine = cls(settings.validation, registry=registry)
        if settings.plugins_dir is not None or settings.load_entry_points:
            engine.load_plugins(
                local_dir=settings.plugins_dir,
                entry_points=settings.load_entry_points,
            )
        return engine

    # ------------------------------------------------------------------
    # Init phase
    # ------------------------------------------------------------------

    def register_validator(self, name: str, fn: ValidatorFunction) -> None:
        self.registry.register_validator(
            name, fn, override=self.options.allow_duplicate_registration
        )

    def register_filter(self, name: str, fn: FilterFunction) -> None:
        self.registry.register_filter(
            name, fn, override=self.options.allow_duplicate_registration
        )

    def load_plugins(self, *, local_dir: Path | None = None, entry_points: bool = True) -> list[str]:
        """Discover rule plugins and register their rules. Returns plugin names."""
        from fieldguard.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load(local_dir=local_dir, entry_points=entry_points)
        pm.install_rules(self.registry, override=self.options.allow_duplicate_registration)
        return names

    def freeze(self) -> None:
        """Make the registry read-only (start of the serve phase)."""
        self.registry.freeze()

    # ------------------------------------------------------------------
    # Compile + validate
    # ------------------------------------------------------------------

    def compile_schema(self, record_type: type) -> Schema:
        """Return the cached Schema for *record_type*, compiling it on first use.

        Raises:
            CompileError: If the type's declarations are broken.
        """
        key = (record_type, self.options.compile_key())
        schema = self.cache.get(key)
        if schema is None:
            schema = self._compiler.compile(record_type)
            self.cache.store(key, schema)
        return schema

    def validate(self, record: Any, trigger: str | None = None) -> ValidationResult:
        """Validate *record*, applying filters in place.

        Args:
            record: A dataclass or pydantic model instance.
            trigger: Activation token; ``None`` means ``"all"``.

        Returns:
            A ValidationResult. Non-record input yields a structural error
            instead of raising.

        Raises:
            CompileError: If the record type's declarations are broken.
            RuleUsageError: If a rule is applied to a kind it does not
                support or given unusable arguments.
            FilterTypeError: If a filter returns an incompatible value.
        """
        if not is_record_instance(record):
            logger.debug("Rejected non-record input of type %s", type(record).__name__)
            return not_a_record(record)

        schema = self.compile_schema(type(record))
        selected = select_fields(schema, trigger)
        errors = execute_schema(selected, record, self.options)
        logger.debug(
            "Validated %s (trigger=%s): %d of %d field(s) run, %d error(s)",
            schema.key,
            trigger or "all",
            len(selected),
            len(schema),
            len(errors),
        )
        return aggregate(errors)


# ---------------------------------------------------------------------------
# Process-wide default engine
# ---------------------------------------------------------------------------

_default_registry: RuleRegistry | None = None
_default_cache = SchemaCache()
_default_validator: Validator | None = None


def default_registry() -> RuleRegistry:
    """The process-wide registry, built with the built-in rules on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = RuleRegistry.with_builtins()
    return _default_registry


def get_validator() -> Validator:
    """The process-wide engine with default options."""
    global _default_validator
    if _default_validator is None:
        _default_validator = Validator()
    return _default_validator


def configure(options: ValidationOptions) -> Validator:
    """Replace the process-wide engine's options.

    The registry and schema cache are shared, so call this during the init
    phase, before validations are in flight.
    """
    global _default_validator
    _default_validator = Validator(options)
    return _default_validator


def validate(record: Any, trigger: str | None = None) -> ValidationResult:
    return get_validator().validate(record, trigger)


def compile_schema(record_type: type) -> Schema:
    return get_validator().compile_schema(record_type)


def register_validator(name: str, fn: ValidatorFunction) -> None:
    get_validator().register_validator(name, fn)


def register_filter(name: str, fn: FilterFunction) -> None:
    get_validator().register_filter(name, fn)


def load_plugins(*, local_dir: Path | None = None) -> list[str]:
    return get_validator().load_plugins(local_dir=local_dir)


def freeze_registry() -> None:
    get_validator().freeze()
