"""fieldguard: declarative validation and normalization for record fields.

Declare rules in field metadata, then validate instances::

    from dataclasses import dataclass

    import fieldguard
    from fieldguard import declare

    @dataclass
    class Signup:
        name: str | None = declare("required", filter="trim")
        age: int = declare("min(18)|max(65)", default=0)

    result = fieldguard.validate(Signup(name="  Ada ", age=16))
    result.valid          # False
    result.field_errors   # [FieldError(field='age', ...)]
"""

from fieldguard.config.models import TagNames, ValidationOptions
from fieldguard.engine.compiler import FieldSpec, Schema
from fieldguard.engine.context import ValidationContext
from fieldguard.engine.registry import RuleRegistry
from fieldguard.engine.result import FieldError, StructuralError, ValidationResult
from fieldguard.engine.validator import (
    Validator,
    compile_schema,
    configure,
    freeze_registry,
    load_plugins,
    register_filter,
    register_validator,
    validate,
)
from fieldguard.errors import (
    CompileError,
    FieldguardError,
    FilterTypeError,
    RecordInvalidError,
    RegistryError,
    RuleUsageError,
)
from fieldguard.fields import declare, tags

__version__ = "0.1.0"

__all__ = [
    "CompileError",
    "FieldError",
    "FieldSpec",
    "FieldguardError",
    "FilterTypeError",
    "RecordInvalidError",
    "RegistryError",
    "RuleRegistry",
    "RuleUsageError",
    "Schema",
    "StructuralError",
    "TagNames",
    "ValidationContext",
    "ValidationOptions",
    "ValidationResult",
    "Validator",
    "__version__",
    "compile_schema",
    "configure",
    "declare",
    "freeze_registry",
    "load_plugins",
    "register_filter",
    "register_validator",
    "tags",
    "validate",
]
