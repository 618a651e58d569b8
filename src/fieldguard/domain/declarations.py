"""Parsing for rule chains, trigger lists and flag lists.

A rule chain is a ``|``-separated list of tokens::

    required|min(10)|max(20)

Each token is a bare name, ``name()`` or ``name(a,b,c)``. Arguments are raw
strings (surrounding whitespace stripped); there is no quoting, escaping or
nesting. Splitting happens at parenthesis depth zero, so ``|`` inside an
argument list stays part of the argument.

INVARIANT: Malformed declarations raise DeclarationSyntaxError; they are
never truncated or repaired.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from fieldguard.errors import DeclarationSyntaxError

RULE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")

CHAIN_SEPARATOR = "|"
ARG_SEPARATOR = ","
TRIGGER_SEPARATOR = ","


@dataclass(frozen=True)
class RuleDeclaration:
    """One parsed token of a rule chain."""

    name: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({ARG_SEPARATOR.join(self.args)})"


def is_valid_rule_name(name: str) -> bool:
    """Whether *name* can be referenced from a declaration string."""
    return RULE_NAME_PATTERN.match(name) is not None


def _split_top_level(declaration: str) -> list[str]:
    """Split on ``|`` outside parentheses, checking balance on the way."""
    tokens: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(declaration):
        if ch == "(":
            depth += 1
            if depth > 1:
                msg = f"nested parentheses are not supported in {declaration!r}"
                raise DeclarationSyntaxError(msg)
        elif ch == ")":
            depth -= 1
            if depth < 0:
                msg = f"unbalanced ')' at position {i} in {declaration!r}"
                raise DeclarationSyntaxError(msg)
        elif ch == CHAIN_SEPARATOR and depth == 0:
            tokens.append(declaration[start:i])
            start = i + 1
    if depth != 0:
        msg = f"unclosed '(' in {declaration!r}"
        raise DeclarationSyntaxError(msg)
    tokens.append(declaration[start:])
    return tokens


def parse_rule(token: str) -> RuleDeclaration:
    """Parse a single rule token.

    Examples:
        >>> parse_rule("required")
        RuleDeclaration(name='required', args=())
        >>> parse_rule("range(1, 5)")
        RuleDeclaration(name='range', args=('1', '5'))
    """
    text = token.strip()
    if not text:
        msg = "empty rule token"
        raise DeclarationSyntaxError(msg)

    open_pos = text.find("(")
    if open_pos == -1:
        if ")" in text:
            msg = f"unbalanced ')' in rule {text!r}"
            raise DeclarationSyntaxError(msg)
        name, args = text, ()
    else:
        if not text.endswith(")"):
            msg = f"unexpected text after ')' in rule {text!r}"
            raise DeclarationSyntaxError(msg)
        inner = text[open_pos + 1 : -1]
        if "(" in inner or ")" in inner:
            msg = f"nested or unbalanced parentheses in rule {text!r}"
            raise DeclarationSyntaxError(msg)
        name = text[:open_pos].strip()
        if inner.strip():
            args = tuple(arg.strip() for arg in inner.split(ARG_SEPARATOR))
        else:
            args = ()

    if not is_valid_rule_name(name):
        msg = f"invalid rule name {name!r}"
        raise DeclarationSyntaxError(msg)
    return RuleDeclaration(name=name, args=args)


def parse_rule_chain(declaration: str) -> tuple[RuleDeclaration, ...]:
    """Parse a ``|``-separated rule chain into ordered declarations.

    Raises:
        DeclarationSyntaxError: On an empty declaration, an empty token
            (``a||b``, trailing ``|``), unbalanced or nested parentheses,
            or an invalid rule name.
    """
    if not declaration.strip():
        msg = "empty declaration; omit the tag instead"
        raise DeclarationSyntaxError(msg)
    return tuple(parse_rule(token) for token in _split_top_level(declaration))


def parse_trigger_list(declaration: str) -> frozenset[str]:
    """Split a trigger declaration (``"create,update"``) into tokens."""
    triggers = [part.strip() for part in declaration.split(TRIGGER_SEPARATOR)]
    if not all(triggers):
        msg = f"empty trigger in {declaration!r}"
        raise DeclarationSyntaxError(msg)
    return frozenset(triggers)


def parse_flag_list(declaration: str) -> tuple[str, ...]:
    """Split a flag declaration (``"allow_zero"``) into raw flag names."""
    flags = [part.strip() for part in declaration.split(CHAIN_SEPARATOR)]
    if not all(flags):
        msg = f"empty flag in {declaration!r}"
        raise DeclarationSyntaxError(msg)
    return tuple(flags)
