"""Tests for pydantic-settings configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from annoselect.config import SelectionConfig, Settings, get_settings


class TestDefaults:
    def test_selection_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.selection.annotation_class == "r6o-annotation"
        assert s.selection.selection_class == "r6o-selection"
        assert s.selection.hide_selection_class == "r6o-hide-selection"
        assert s.selection.id_attribute == "data-id"
        assert s.selection.read_only is False

    def test_logging_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.log.log_dir == Path("logs")
        assert s.log.console_level == "INFO"
        assert s.log.file_level == "DEBUG"


class TestEnvironment:
    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SELECTION__READ_ONLY", "true")
        monkeypatch.setenv("LOG__CONSOLE_LEVEL", "WARNING")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.selection.read_only is True
        assert s.log.console_level == "WARNING"

    def test_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("SELECTION__SELECTION_CLASS=pending\n")

        s = Settings(_env_file=env_file)  # type: ignore[call-arg]

        assert s.selection.selection_class == "pending"

    def test_invalid_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG__FILE_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestValidation:
    def test_selection_class_must_differ(self) -> None:
        with pytest.raises(ValidationError, match="SELECTION_CLASS"):
            SelectionConfig(selection_class="r6o-annotation")

    def test_hide_class_must_be_distinct(self) -> None:
        with pytest.raises(ValidationError, match="HIDE_SELECTION_CLASS"):
            SelectionConfig(hide_selection_class="r6o-selection")


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("SELECTION__READ_ONLY", "true")
        get_settings.cache_clear()

        second = get_settings()

        assert second is not first
        assert second.selection.read_only is True

    def test_logs_env_source(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="annoselect.config"):
            get_settings()

        messages = [r.message for r in caplog.records]
        assert any("Settings" in m and ".env" in m for m in messages)
