"""Behavioral flags applied by the executor before any rule runs."""

from __future__ import annotations

from enum import StrEnum

from fieldguard.errors import DeclarationSyntaxError


class ValidationFlag(StrEnum):
    """Per-field modifiers declared through the ``flags`` tag channel."""

    # Skip validators and filters when the value is null or its logical zero.
    ALLOW_ZERO = "allow_zero"


def parse_flags(names: tuple[str, ...]) -> frozenset[ValidationFlag]:
    """Map raw flag names onto :class:`ValidationFlag` members."""
    flags: set[ValidationFlag] = set()
    for name in names:
        try:
            flags.add(ValidationFlag(name))
        except ValueError:
            known = ", ".join(f.value for f in ValidationFlag)
            msg = f"unknown flag {name!r} (known: {known})"
            raise DeclarationSyntaxError(msg) from None
    return frozenset(flags)
