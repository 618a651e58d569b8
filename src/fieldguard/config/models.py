"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fieldguard.toml only contains
overrides. An empty file (or no file at all) yields the defaults below.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class TagNames(BaseModel):
    """[validation.tag_names] section: metadata keys read per channel."""

    model_config = {"frozen": True}

    validator: str = "validator"
    filter: str = "filter"
    trigger: str = "trigger"
    message: str = "message"
    label: str = "label"
    flags: str = "flags"

    @field_validator("*")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "tag names must not be blank"
            raise ValueError(msg)
        return value

    def as_tuple(self) -> tuple[str, ...]:
        return (self.validator, self.filter, self.trigger, self.message, self.label, self.flags)


class ValidationOptions(BaseModel):
    """[validation] section: engine behavior.

    Attributes:
        tag_names: Per-channel metadata key overrides.
        stop_on_first_error: Stop a field's validator chain (and skip its
            filters) at the first failure. Other fields still run.
        expose_rule_names: Suffix generated default messages with the
            failing rule's name.
        expose_allowed_values: Let rules such as ``enum`` list the accepted
            values in their messages.
        allow_duplicate_registration: Registering an existing rule name
            replaces it instead of raising.
        use_qualified_field_names: Default labels of nested fields use the
            dotted path (``inner.age``) instead of the bare name (``age``).
        include_private_fields: Compile ``_``-prefixed fields too.
        auto_trim_strings: Trim string fields that declare any rule before
            their validators run. Frozen records are left untouched.
    """

    model_config = {"frozen": True}

    tag_names: TagNames = Field(default_factory=TagNames)
    stop_on_first_error: bool = False
    expose_rule_names: bool = False
    expose_allowed_values: bool = False
    allow_duplicate_registration: bool = False
    use_qualified_field_names: bool = False
    include_private_fields: bool = True
    auto_trim_strings: bool = False

    def compile_key(self) -> tuple[object, ...]:
        """The subset of options that changes what a compiled schema contains."""
        return (
            self.tag_names.as_tuple(),
            self.use_qualified_field_names,
            self.include_private_fields,
            self.auto_trim_strings,
        )
