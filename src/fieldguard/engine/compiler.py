"""Schema compiler: record type → ordered, bound FieldSpecs.

Compilation happens once per (type, compile-relevant options) pair and the
result is cached by :class:`fieldguard.engine.cache.SchemaCache`. It is a pure
function of the type, the options and the registry contents, so redundant
concurrent compiles of the same type are harmless.

Traversal uses an explicit LIFO work list instead of recursion. Each popped
type contributes its direct leaf fields first; nested record fields are
pushed afterwards (in reverse, so the first-declared one is traversed
next). For::

    Outer(inner: Inner, bar: int)        Inner(age: int)

the schema order is ``bar``, then ``inner.age``.

A nested record field may carry validators of its own (``required`` on an
``Inner | None`` field). They run against the nested record itself, in the
owner's field order, while its children are still flattened.

INVARIANT: A FieldSpec exists only for fields declaring at least one
validator or filter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from fieldguard.domain.declarations import (
    RuleDeclaration,
    parse_flag_list,
    parse_rule_chain,
    parse_trigger_list,
)
from fieldguard.domain.flags import ValidationFlag, parse_flags
from fieldguard.domain.kinds import NO_ZERO, ValueKind, resolve_annotation, unwrap_optional
from fieldguard.engine.introspection import (
    RecordField,
    is_frozen,
    is_record_type,
    iter_record_fields,
    qualified_name,
)
from fieldguard.engine.registry import BoundRule, RuleKind
from fieldguard.errors import CompileError

if TYPE_CHECKING:
    from fieldguard.config.models import TagNames, ValidationOptions
    from fieldguard.engine.registry import RuleRegistry

logger = logging.getLogger(__name__)

ALL_TRIGGER = "all"


@dataclass(frozen=True)
class FieldSpec:
    """Compiled metadata and bound rule chains for one field."""

    path: tuple[str, ...]
    kind: ValueKind
    nullable: bool
    declared_type: type | None
    validators: tuple[BoundRule, ...]
    filters: tuple[BoundRule, ...]
    label: str
    message: str | None
    triggers: frozenset[str]
    flags: frozenset[ValidationFlag]
    zero_value: Any = NO_ZERO
    pre_filters: tuple[BoundRule, ...] = ()

    @property
    def name(self) -> str:
        return self.path[-1]

    @property
    def field_path(self) -> str:
        return ".".join(self.path)

    def has_flag(self, flag: ValidationFlag) -> bool:
        return flag in self.flags

    def is_active(self, trigger: str) -> bool:
        return trigger in self.triggers or ALL_TRIGGER in self.triggers

    def is_zero(self, value: Any) -> bool:
        """Null, or equal to the kind's logical zero."""
        if value is None:
            return True
        return self.zero_value is not NO_ZERO and value == self.zero_value

    def describe(self) -> dict[str, Any]:
        """Plain-data view for reports and ``fieldguard compile --json``."""
        return {
            "path": self.field_path,
            "label": self.label,
            "kind": str(self.kind),
            "nullable": self.nullable,
            "validators": [_rule_text(r) for r in self.validators],
            "filters": [_rule_text(r) for r in self.filters],
            "pre_filters": [_rule_text(r) for r in self.pre_filters],
            "triggers": sorted(self.triggers),
            "flags": sorted(str(f) for f in self.flags),
            "message": self.message,
        }


@dataclass(frozen=True)
class Schema:
    """Ordered FieldSpecs for one record type."""

    record_type: type
    fields: tuple[FieldSpec, ...]

    @property
    def key(self) -> str:
        return qualified_name(self.record_type)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def field_paths(self) -> list[str]:
        return [spec.field_path for spec in self.fields]


def _rule_text(rule: BoundRule) -> str:
    return f"{rule.name}({','.join(rule.args)})" if rule.args else rule.name


@dataclass(frozen=True)
class _WorkItem:
    record_type: type
    prefix: tuple[str, ...]
    ancestors: frozenset[type]


class SchemaCompiler:
    """Builds :class:`Schema` objects against a registry and options."""

    def __init__(self, registry: RuleRegistry, options: ValidationOptions) -> None:
        self._registry = registry
        self._options = options

    @property
    def _tags(self) -> TagNames:
        return self._options.tag_names

    def compile(self, record_type: type) -> Schema:
        """Introspect *record_type* and bind every declared rule.

        Raises:
            CompileError: On malformed declarations, unknown rule names,
                recursive record types, or declarations the engine could
                never honor (filters on frozen records or on nested
                record fields).
        """
        if not is_record_type(record_type):
            msg = "expected a dataclass or pydantic model class"
            raise CompileError(msg, record_type=repr(record_type))

        specs: list[FieldSpec] = []
        stack: list[_WorkItem] = [_WorkItem(record_type, (), frozenset({record_type}))]
        while stack:
            item = stack.pop()
            nested: list[_WorkItem] = []
            for record_field in iter_record_fields(item.record_type):
                if record_field.name.startswith("_") and not self._options.include_private_fields:
                    continue
                path = (*item.prefix, record_field.name)
                inner, _ = unwrap_optional(record_field.annotation)
                if is_record_type(inner):
                    self._check_nested(item, record_field, inner, path)
                    nested.append(_WorkItem(inner, path, item.ancestors | {inner}))
                spec = self._build_spec(item.record_type, record_field, path)
                if spec is not None:
                    specs.append(spec)
            stack.extend(reversed(nested))

        schema = Schema(record_type=record_type, fields=tuple(specs))
        logger.debug(
            "Compiled schema %s with %d field(s): %s",
            schema.key,
            len(schema),
            ", ".join(schema.field_paths()),
        )
        return schema

    # ------------------------------------------------------------------
    # Per-field compilation
    # ------------------------------------------------------------------

    def _check_nested(
        self,
        item: _WorkItem,
        record_field: RecordField,
        nested_type: type,
        path: tuple[str, ...],
    ) -> None:
        if nested_type in item.ancestors:
            msg = f"recursive record type {qualified_name(nested_type)} cannot be flattened"
            raise CompileError(
                msg, record_type=qualified_name(item.record_type), field=".".join(path)
            )
        if self._tags.filter in record_field.tags:
            msg = (
                "nested record fields cannot declare filters; "
                "declare them on the nested record's own fields"
            )
            raise CompileError(
                msg, record_type=qualified_name(item.record_type), field=".".join(path)
            )

    def _build_spec(
        self,
        owner_type: type,
        record_field: RecordField,
        path: tuple[str, ...],
    ) -> FieldSpec | None:
        owner_name = qualified_name(owner_type)
        field_path = ".".join(path)
        try:
            spec = self._parse_field(record_field, path)
        except CompileError as exc:
            raise type(exc)(str(exc), record_type=owner_name, field=field_path) from exc
        if spec is None or not is_frozen(owner_type):
            return spec
        if spec.filters:
            msg = "filters need to write values back but the record is frozen"
            raise CompileError(msg, record_type=owner_name, field=field_path)
        return replace(spec, pre_filters=())

    def _parse_field(self, record_field: RecordField, path: tuple[str, ...]) -> FieldSpec | None:
        tags = record_field.tags
        names = self._tags

        validator_decl = _tag(tags, names.validator)
        filter_decl = _tag(tags, names.filter)
        if validator_decl is None and filter_decl is None:
            stray = [n for n in (names.trigger, names.message, names.label, names.flags) if n in tags]
            if stray:
                msg = f"{', '.join(stray)} declared without any validator or filter"
                raise CompileError(msg)
            return None

        trigger_decl = _tag(tags, names.trigger)
        triggers = (
            parse_trigger_list(trigger_decl) if trigger_decl is not None else frozenset({ALL_TRIGGER})
        )
        flag_decl = _tag(tags, names.flags)
        flags = parse_flags(parse_flag_list(flag_decl)) if flag_decl is not None else frozenset()

        label = _tag(tags, names.label)
        if label is None:
            label = ".".join(path) if self._options.use_qualified_field_names else path[-1]

        resolved = resolve_annotation(record_field.annotation)
        pre_filters: tuple[BoundRule, ...] = ()
        if self._options.auto_trim_strings and resolved.kind is ValueKind.STRING:
            pre_filters = (self._registry.bind(RuleDeclaration("trim"), RuleKind.FILTER),)
        return FieldSpec(
            path=path,
            kind=resolved.kind,
            nullable=resolved.nullable,
            declared_type=resolved.runtime_type,
            validators=self._bind_chain(validator_decl, RuleKind.VALIDATOR),
            filters=self._bind_chain(filter_decl, RuleKind.FILTER),
            label=label,
            message=_tag(tags, names.message),
            triggers=triggers,
            flags=flags,
            zero_value=resolved.zero_value,
            pre_filters=pre_filters,
        )

    def _bind_chain(self, declaration: str | None, kind: RuleKind) -> tuple[BoundRule, ...]:
        if declaration is None:
            return ()
        return tuple(self._registry.bind(d, kind) for d in parse_rule_chain(declaration))


def _tag(tags: Mapping[str, Any], name: str) -> str | None:
    """Read a declaration tag; non-string values are a compile error."""
    if name not in tags:
        return None
    value = tags[name]
    if not isinstance(value, str):
        msg = f"tag {name!r} must be a string, got {type(value).__name__}"
        raise CompileError(msg)
    return value
