"""Tests for pydantic-settings configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from scriptflow.config import ReviewConfig, Settings

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove nested settings variables that would leak into Settings()."""
    prefixes = ("STYTCH__", "DATABASE__", "APP__", "REVIEW__", "DEV__")
    for key in list(os.environ):
        if key.startswith(prefixes):
            monkeypatch.delenv(key, raising=False)


class TestDefaults:
    """Settings with no environment."""

    @pytest.mark.usefixtures("clean_env")
    def test_review_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.review.selection_debounce_ms == 10
        assert s.review.composer_width == 360
        assert s.review.composer_height == 300
        assert s.review.viewport_margin == 20
        assert s.review.trigger_offset == 40
        assert s.review.persist_attempts == 3

    @pytest.mark.usefixtures("clean_env")
    def test_app_and_dev_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.port == 8080
        assert s.database.url is None
        assert s.dev.auth_mock is False


class TestEnvironmentOverrides:
    """Double-underscore variables populate nested models."""

    @pytest.mark.usefixtures("clean_env")
    def test_nested_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REVIEW__PERSIST_ATTEMPTS", "5")
        monkeypatch.setenv("DEV__AUTH_MOCK", "true")
        monkeypatch.setenv("STYTCH__SECRET", "shh")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.review.persist_attempts == 5
        assert s.dev.auth_mock is True
        assert s.stytch.secret.get_secret_value() == "shh"
        assert "shh" not in repr(s.stytch)

    @pytest.mark.usefixtures("clean_env")
    def test_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("APP__PORT=9000\nDATABASE__URL=postgresql://x/db\n")
        s = Settings(_env_file=env_file)  # type: ignore[call-arg]
        assert s.app.port == 9000
        assert s.database.url == "postgresql://x/db"


class TestReviewConfigValidation:
    def test_zero_attempts_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least 1"):
            ReviewConfig(persist_attempts=0)
