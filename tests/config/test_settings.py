"""Tests for FieldguardSettings: unified settings with TOML source."""

from pathlib import Path

import pytest

from fieldguard.config.settings import FieldguardSettings
from fieldguard.errors import ConfigFileError


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = FieldguardSettings.load(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.plugins_dir is None
        assert settings.load_entry_points is True
        assert settings.validation.stop_on_first_error is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = FieldguardSettings.load(start=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "fieldguard.toml"
        toml.write_text('plugins_dir = "rules"\n[validation]\nexpose_rule_names = true\n')
        settings = FieldguardSettings.load(start=tmp_path)
        assert settings.config_path == toml
        assert settings.plugins_dir == Path("rules")
        assert settings.validation.expose_rule_names is True
        assert settings.validation.stop_on_first_error is False

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[validation]\nstop_on_first_error = true\n")
        settings = FieldguardSettings.load(config_path=str(custom))
        assert settings.validation.stop_on_first_error is True
        assert settings.config_path == custom

    def test_missing_explicit_config_uses_defaults(self, tmp_path: Path) -> None:
        settings = FieldguardSettings.load(config_path=tmp_path / "missing.toml")
        assert settings.config_path is None

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "fieldguard.toml").write_text("[validation\n")
        with pytest.raises(ConfigFileError, match="Invalid TOML"):
            FieldguardSettings.load(start=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "fieldguard.toml").write_text("[validation]\nstop_on_first_error = false\n")
        monkeypatch.setenv("FIELDGUARD_VALIDATION__STOP_ON_FIRST_ERROR", "true")
        settings = FieldguardSettings.load(start=tmp_path)
        assert settings.validation.stop_on_first_error is True

    def test_overrides_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIELDGUARD_VERBOSE", "false")
        settings = FieldguardSettings.load(start=tmp_path, verbose=True)
        assert settings.verbose is True

    def test_overrides_beat_toml(self, tmp_path: Path) -> None:
        (tmp_path / "fieldguard.toml").write_text("json_output = true\n")
        settings = FieldguardSettings.load(start=tmp_path, json_output=False)
        assert settings.json_output is False
