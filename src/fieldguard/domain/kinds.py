"""Value kinds and annotation resolution.

Rules dispatch on the *semantic* kind of a field, never on its wrapper
shape: ``list[str]``, ``str | None`` and ``dict[str, str]`` all resolve to
``ValueKind.STRING``. The wrapper still matters for two things, recorded
alongside the kind in :class:`ResolvedType`: whether ``None`` is a declared
value, and which runtime class a filter must hand back.
"""

from __future__ import annotations

import collections.abc
import datetime
import decimal
import enum
import types
import typing
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ValueKind(StrEnum):
    """Semantic kinds used for rule dispatch."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOL = "bool"
    BYTES = "bytes"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    UUID = "uuid"
    ENUM = "enum"
    ANY = "any"


NUMERIC_KINDS = frozenset({ValueKind.INT, ValueKind.FLOAT, ValueKind.DECIMAL})
TEMPORAL_KINDS = frozenset({ValueKind.DATE, ValueKind.DATETIME})

# Order matters: bool before int, datetime before date, enums before their mixins.
_LEAF_KINDS: tuple[tuple[type, ValueKind], ...] = (
    (enum.Enum, ValueKind.ENUM),
    (bool, ValueKind.BOOL),
    (int, ValueKind.INT),
    (float, ValueKind.FLOAT),
    (decimal.Decimal, ValueKind.DECIMAL),
    (str, ValueKind.STRING),
    (bytes, ValueKind.BYTES),
    (datetime.datetime, ValueKind.DATETIME),
    (datetime.date, ValueKind.DATE),
    (datetime.time, ValueKind.TIME),
    (uuid.UUID, ValueKind.UUID),
)

_ZERO_VALUES: dict[ValueKind, Any] = {
    ValueKind.STRING: "",
    ValueKind.INT: 0,
    ValueKind.FLOAT: 0.0,
    ValueKind.DECIMAL: decimal.Decimal(0),
    ValueKind.BOOL: False,
    ValueKind.BYTES: b"",
}

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)
_ABSTRACT_SEQUENCES = {
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
}
_ABSTRACT_MAPPINGS = {
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}


class _NoZero:
    """Sentinel for kinds without a logical zero value."""

    _instance: _NoZero | None = None

    def __new__(cls) -> _NoZero:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_ZERO"


NO_ZERO: Any = _NoZero()


@dataclass(frozen=True)
class ResolvedType:
    """Outcome of resolving a field annotation.

    Attributes:
        kind: Semantic kind for rule dispatch (element kind for collections).
        nullable: Whether ``None`` is part of the declared type.
        runtime_type: Class (or collection ABC) a non-null value must be an instance of, or
            None when the annotation gives no usable class.
        leaf_type: The element/leaf class behind any wrappers.
        zero_value: The logical zero for ``allow_zero`` checks, or NO_ZERO.
    """

    kind: ValueKind
    nullable: bool
    runtime_type: type | None
    leaf_type: Any
    zero_value: Any = NO_ZERO

    @property
    def is_collection(self) -> bool:
        return self.runtime_type is not None and self.leaf_type is not self.runtime_type


def _strip_annotated(tp: Any) -> Any:
    while typing.get_origin(tp) is typing.Annotated:
        tp = typing.get_args(tp)[0]
    return tp


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Return ``(inner, nullable)`` for ``X | None`` / ``Optional[X]``.

    Unions of several non-None members are returned unchanged (``typing.Union``
    objects) and later resolve to ``ValueKind.ANY``.
    """
    tp = _strip_annotated(tp)
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(tp) if a is not type(None)]
        nullable = len(members) != len(typing.get_args(tp))
        if len(members) == 1:
            return _strip_annotated(members[0]), nullable
        return tp, nullable
    if tp is None or tp is type(None):
        return type(None), True
    return tp, False


def leaf_kind(tp: Any) -> ValueKind:
    """Map a plain class to its semantic kind."""
    if not isinstance(tp, type):
        return ValueKind.ANY
    for base, kind in _LEAF_KINDS:
        if issubclass(tp, base):
            return kind
    return ValueKind.ANY


def _element_type(origin: Any, args: tuple[Any, ...]) -> Any:
    if origin in (dict, *_ABSTRACT_MAPPINGS):
        return args[1] if len(args) == 2 else Any
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if args and all(a == args[0] for a in args):
            return args[0]
        return Any
    return args[0] if args else Any


def resolve_annotation(annotation: Any) -> ResolvedType:
    """Resolve a field annotation into kind, nullability and runtime class.

    Examples:
        >>> resolve_annotation(list[int]).kind
        <ValueKind.INT: 'int'>
        >>> resolve_annotation(str | None).nullable
        True
    """
    inner, nullable = unwrap_optional(annotation)
    origin = typing.get_origin(inner)

    container: type | None = None
    if origin is not None:
        if origin in _SEQUENCE_ORIGINS or origin is dict:
            container = origin
        elif origin in _ABSTRACT_SEQUENCES:
            container = _ABSTRACT_SEQUENCES[origin]
        elif origin in _ABSTRACT_MAPPINGS:
            container = _ABSTRACT_MAPPINGS[origin]
    elif inner in _SEQUENCE_ORIGINS or inner is dict:
        # Bare ``list`` / ``dict`` without parameters.
        return ResolvedType(
            kind=ValueKind.ANY,
            nullable=nullable,
            runtime_type=inner,
            leaf_type=Any,
            zero_value=inner(),
        )

    if container is not None:
        element, _ = unwrap_optional(_element_type(origin, typing.get_args(inner)))
        kind = leaf_kind(element)
        return ResolvedType(
            kind=kind,
            nullable=nullable,
            runtime_type=origin,
            leaf_type=element,
            zero_value=container(),
        )

    kind = leaf_kind(inner)
    runtime_type = inner if isinstance(inner, type) and inner not in (type(None), Any) else None
    return ResolvedType(
        kind=kind,
        nullable=nullable,
        runtime_type=runtime_type,
        leaf_type=inner,
        zero_value=_ZERO_VALUES.get(kind, NO_ZERO),
    )
