"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags or application code
  2. Env vars: ``FIELDGUARD_*`` prefix, ``__`` for nesting
     (``FIELDGUARD_VALIDATION__STOP_ON_FIRST_ERROR=true``)
  3. TOML file: ``fieldguard.toml`` discovered via walk-up
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`fieldguard.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from fieldguard.config.discovery import find_config, read_config
from fieldguard.config.models import ValidationOptions
from fieldguard.errors import ConfigFileError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``fieldguard.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = read_config(toml_path)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigFileError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class FieldguardSettings(BaseSettings):
    """Unified settings for applications and the ``fieldguard`` CLI.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        plugins_dir: Directory of single-file rule plugins to load.
        load_entry_points: Load rule plugins from the ``fieldguard.rules``
            entry-point group.
        validation: Engine options (``[validation]`` section).
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FIELDGUARD_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Plugins ---
    plugins_dir: Path | None = None
    load_entry_points: bool = True

    # --- TOML sections ---
    validation: ValidationOptions = Field(default_factory=ValidationOptions)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> FieldguardSettings:
        """Construct settings, discovering ``fieldguard.toml`` unless given.

        *overrides* (CLI flags, application code) take the highest priority.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
