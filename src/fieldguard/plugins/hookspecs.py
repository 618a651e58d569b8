"""Pluggy hook specifications for fieldguard rule plugins.

Both hooks run once, at load time. Each returns a ``name -> callable``
mapping (or None) whose entries are registered into a
:class:`~fieldguard.engine.registry.RuleRegistry`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from fieldguard.engine.registry import FilterFunction, ValidatorFunction

PROJECT_NAME = "fieldguard"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FieldguardHookSpec:
    """Hook specifications for the fieldguard plugin system."""

    @hookspec
    def fieldguard_validators(self) -> dict[str, ValidatorFunction] | None:
        """Return rule name -> validator function mappings."""

    @hookspec
    def fieldguard_filters(self) -> dict[str, FilterFunction] | None:
        """Return rule name -> filter function mappings."""
