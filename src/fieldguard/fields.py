"""Declaration helpers for record fields.

Declarations are plain metadata, so these helpers are optional sugar::

    @dataclass
    class Signup:
        email: str = declare("required|email", filter="trim|lower")
        age: int | None = declare("min(18)", flags="allow_zero", default=None)

    class Signup(BaseModel):
        email: str = Field(json_schema_extra=tags("required|email", filter="trim"))

Both use the default channel names. Options with custom ``tag_names`` need
the metadata dict spelled out by hand.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from fieldguard.config.models import TagNames

_DEFAULT_TAGS = TagNames()


def tags(
    validator: str | None = None,
    *,
    filter: str | None = None,  # noqa: A002
    trigger: str | None = None,
    message: str | None = None,
    label: str | None = None,
    flags: str | None = None,
) -> dict[str, str]:
    """Build a metadata dict, omitting channels that were not given."""
    channels = {
        _DEFAULT_TAGS.validator: validator,
        _DEFAULT_TAGS.filter: filter,
        _DEFAULT_TAGS.trigger: trigger,
        _DEFAULT_TAGS.message: message,
        _DEFAULT_TAGS.label: label,
        _DEFAULT_TAGS.flags: flags,
    }
    return {name: value for name, value in channels.items() if value is not None}


def declare(
    validator: str | None = None,
    *,
    filter: str | None = None,  # noqa: A002
    trigger: str | None = None,
    message: str | None = None,
    label: str | None = None,
    flags: str | None = None,
    **field_kwargs: Any,
) -> Any:
    """``dataclasses.field`` carrying fieldguard declarations.

    Remaining keyword arguments (``default``, ``default_factory``, ``repr``,
    ...) are passed through to :func:`dataclasses.field`.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata.update(
        tags(
            validator,
            filter=filter,
            trigger=trigger,
            message=message,
            label=label,
            flags=flags,
        )
    )
    return dataclasses.field(metadata=metadata, **field_kwargs)
