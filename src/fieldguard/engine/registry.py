"""Rule registry: name → callable, partitioned into validators and filters.

Two-phase lifecycle:

1. Init phase (single-threaded): built-ins are loaded, custom rules and
   plugin rules are registered.
2. Serve phase: :meth:`RuleRegistry.freeze` makes the registry read-only and
   validations run concurrently against it.

Names are resolved once, at schema compile time, into :class:`BoundRule`
objects stored on each FieldSpec. Execution never looks a name up again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from fieldguard.domain.declarations import RuleDeclaration, is_valid_rule_name
from fieldguard.errors import (
    DuplicateRuleError,
    InvalidRuleNameError,
    RegistryFrozenError,
    UnknownRuleError,
)

if TYPE_CHECKING:
    from fieldguard.engine.context import ValidationContext

logger = logging.getLogger(__name__)

ValidatorFunction = Callable[["ValidationContext"], bool]
FilterFunction = Callable[["ValidationContext"], Any]


class RuleKind(StrEnum):
    VALIDATOR = "validator"
    FILTER = "filter"


@dataclass(frozen=True)
class BoundRule:
    """A declaration bound to its callable."""

    name: str
    args: tuple[str, ...]
    kind: RuleKind
    fn: Callable[[ValidationContext], Any]

    def __call__(self, ctx: ValidationContext) -> Any:
        return self.fn(ctx)


class RuleRegistry:
    """Validator and filter functions addressable by name.

    The same name may exist independently in both partitions (e.g. a
    ``trim`` filter and a ``trim`` validator).
    """

    def __init__(self) -> None:
        self._partitions: dict[RuleKind, dict[str, Callable[..., Any]]] = {
            RuleKind.VALIDATOR: {},
            RuleKind.FILTER: {},
        }
        self._frozen = False

    @classmethod
    def with_builtins(cls) -> RuleRegistry:
        """Create a registry pre-populated with the built-in rule catalog."""
        from fieldguard.rules import BUILTIN_FILTERS, BUILTIN_VALIDATORS

        registry = cls()
        for name, fn in BUILTIN_VALIDATORS.items():
            registry.register_validator(name, fn)
        for name, fn in BUILTIN_FILTERS.items():
            registry.register_filter(name, fn)
        return registry

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_validator(
        self, name: str, fn: ValidatorFunction, *, override: bool = False
    ) -> None:
        """Register a validator. Rejects duplicates unless *override* is set."""
        self._register(RuleKind.VALIDATOR, name, fn, override=override)

    def register_filter(self, name: str, fn: FilterFunction, *, override: bool = False) -> None:
        """Register a filter. Rejects duplicates unless *override* is set."""
        self._register(RuleKind.FILTER, name, fn, override=override)

    def _register(
        self,
        kind: RuleKind,
        name: str,
        fn: Callable[..., Any],
        *,
        override: bool,
    ) -> None:
        if self._frozen:
            msg = f"cannot register {kind} {name!r}: registry is frozen"
            raise RegistryFrozenError(msg)
        if not is_valid_rule_name(name):
            msg = f"{kind} name {name!r} cannot be referenced from a declaration"
            raise InvalidRuleNameError(msg)
        if not callable(fn):
            msg = f"{kind} {name!r} must be callable"
            raise TypeError(msg)

        partition = self._partitions[kind]
        if name in partition:
            if not override:
                msg = f"a {kind} by the name of {name!r} already exists"
                raise DuplicateRuleError(msg)
            logger.debug("Replacing %s %s", kind, name)
        partition[name] = fn
        logger.debug("Registered %s %s", kind, name)

    def freeze(self) -> None:
        """End the init phase. Later registrations raise RegistryFrozenError."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_validator(self, name: str) -> ValidatorFunction | None:
        return self._partitions[RuleKind.VALIDATOR].get(name)

    def get_filter(self, name: str) -> FilterFunction | None:
        return self._partitions[RuleKind.FILTER].get(name)

    def validator_names(self) -> list[str]:
        return sorted(self._partitions[RuleKind.VALIDATOR])

    def filter_names(self) -> list[str]:
        return sorted(self._partitions[RuleKind.FILTER])

    def bind(self, declaration: RuleDeclaration, kind: RuleKind) -> BoundRule:
        """Resolve *declaration* into a :class:`BoundRule`.

        Raises:
            UnknownRuleError: If no rule of *kind* has that name.
        """
        fn = self._partitions[kind].get(declaration.name)
        if fn is None:
            msg = f"{kind} {declaration.name!r} not found"
            raise UnknownRuleError(msg)
        return BoundRule(name=declaration.name, args=declaration.args, kind=kind, fn=fn)
