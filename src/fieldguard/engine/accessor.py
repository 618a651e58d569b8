"""One field's live storage slot, and the Present | ABSENT value type.

Optional values are modeled explicitly as ``Present(value) | ABSENT``, so
rule code never has to guess between "declared optional", "currently None"
and "zero".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from fieldguard.engine.compiler import FieldSpec


@dataclass(frozen=True)
class Present:
    """A non-null field value."""

    value: Any


class _Absent:
    """The null state of a field."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()

Value = Present | _Absent


def wrap(value: Any) -> Value:
    """Lift a raw Python value into the ``Present | ABSENT`` sum type."""
    return ABSENT if value is None else Present(value)


class FieldSlot:
    """The owner object and attribute holding one field's value.

    Attributes:
        owner: The (possibly nested) record instance that holds the field.
        attr: The attribute name on *owner*.
        nullable: Whether ``None`` is part of the field's declared type.
    """

    __slots__ = ("attr", "nullable", "owner")

    def __init__(self, owner: Any, attr: str, *, nullable: bool) -> None:
        self.owner = owner
        self.attr = attr
        self.nullable = nullable

    @property
    def current(self) -> Value:
        return wrap(getattr(self.owner, self.attr))

    @property
    def is_null(self) -> bool:
        return getattr(self.owner, self.attr) is None

    def get(self) -> Any:
        """The raw value, ``None`` when null."""
        return getattr(self.owner, self.attr)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.attr, value)


def resolve_slot(record: Any, spec: FieldSpec) -> FieldSlot | None:
    """Walk *spec.path* from *record* down to the field's owner.

    Returns None when an intermediate nested record is None: the field does
    not exist on this instance and is skipped entirely.
    """
    owner = record
    for attr in spec.path[:-1]:
        owner = getattr(owner, attr)
        if owner is None:
            return None
    return FieldSlot(owner, spec.path[-1], nullable=spec.nullable)
