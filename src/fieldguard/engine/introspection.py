"""Enumerate record fields with their annotations and declaration tags.

Two record shapes are understood:

- ``@dataclass`` classes: tags live in ``field(metadata={...})``.
- pydantic ``BaseModel`` subclasses: tags live in
  ``Field(json_schema_extra={...})``.

Both yield :class:`RecordField` in declaration order (inherited fields first),
which is all the schema compiler needs.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from fieldguard.errors import CompileError


@dataclass(frozen=True)
class RecordField:
    """One declared field of a record type."""

    name: str
    annotation: Any
    tags: Mapping[str, Any] = field(default_factory=dict)


def qualified_name(record_type: type) -> str:
    return f"{record_type.__module__}.{record_type.__qualname__}"


def is_record_type(tp: Any) -> bool:
    """Whether *tp* is a class the compiler can introspect."""
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_record_instance(obj: Any) -> bool:
    return not isinstance(obj, type) and is_record_type(type(obj))


def is_frozen(record_type: type) -> bool:
    """Whether instances of *record_type* reject attribute assignment."""
    if issubclass(record_type, BaseModel):
        return bool(record_type.model_config.get("frozen", False))
    params = getattr(record_type, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def iter_record_fields(record_type: type) -> Iterator[RecordField]:
    """Yield the declared fields of *record_type* in declaration order."""
    if issubclass(record_type, BaseModel):
        yield from _iter_model_fields(record_type)
    elif dataclasses.is_dataclass(record_type):
        yield from _iter_dataclass_fields(record_type)
    else:
        msg = "not a dataclass or pydantic model"
        raise CompileError(msg, record_type=qualified_name(record_type))


def _iter_dataclass_fields(record_type: type) -> Iterator[RecordField]:
    try:
        hints = typing.get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as exc:
        msg = f"cannot resolve field annotations: {exc}"
        raise CompileError(msg, record_type=qualified_name(record_type)) from exc

    for f in dataclasses.fields(record_type):
        yield RecordField(
            name=f.name,
            annotation=hints.get(f.name, f.type),
            tags=f.metadata,
        )


def _iter_model_fields(record_type: type[BaseModel]) -> Iterator[RecordField]:
    for name, info in record_type.model_fields.items():
        extra = info.json_schema_extra
        tags: Mapping[str, Any] = extra if isinstance(extra, Mapping) else {}
        yield RecordField(name=name, annotation=info.annotation, tags=tags)
