"""Unit tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from larascope.core.config import DEFAULT_RESTRICTED_FILES, Settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # no stray .env from the working directory
    monkeypatch.chdir(tmp_path)
    for name in ("LARASCOPE_SCORE_FLOOR", "LARASCOPE_CATEGORY_PRIORITY", "LARASCOPE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self, tmp_path):
        settings = Settings()
        assert settings.project_root == Path.cwd()
        assert settings.host_marker == "artisan"
        assert settings.score_floor == 0.1
        assert settings.generic_confidence == 0.5
        assert settings.category_priority == []
        assert settings.restricted_files == DEFAULT_RESTRICTED_FILES
        assert settings.phpstan_enabled is False
        assert settings.log_level == "info"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LARASCOPE_SCORE_FLOOR", "0.25")
        monkeypatch.setenv("LARASCOPE_CATEGORY_PRIORITY", '["admin_dashboard", "ecommerce"]')
        settings = Settings()
        assert settings.score_floor == 0.25
        assert settings.category_priority == ["admin_dashboard", "ecommerce"]

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("LARASCOPE_LOG_LEVEL", "WARNING")
        assert Settings().log_level == "warning"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_floor_out_of_range(self):
        with pytest.raises(ValidationError):
            Settings(score_floor=1.5)

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("LARASCOPE_BATCH_LIMIT=7\n")
        assert Settings().batch_limit == 7

    def test_lists_not_shared_between_instances(self):
        first = Settings()
        first.allowed_paths.append("lib/")
        assert "lib/" not in Settings().allowed_paths
