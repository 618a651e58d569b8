"""Built-in rule catalog, loaded into every registry built via ``with_builtins``."""

from fieldguard.rules.filters import BUILTIN_FILTERS
from fieldguard.rules.validators import BUILTIN_VALIDATORS

__all__ = ["BUILTIN_FILTERS", "BUILTIN_VALIDATORS"]
