from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_PATHS: list[str] = [
    "app/",
    "config/",
    "routes/",
    "database/migrations/",
    "resources/views/",
    "tests/",
]

DEFAULT_RESTRICTED_FILES: list[str] = [
    ".env",
    ".env.local",
    ".env.production",
    "config/database.php",
    "config/services.php",
    "storage/oauth-private.key",
    "storage/oauth-public.key",
]

_LOG_LEVELS = {"debug", "info", "warning", "error"}


class Settings(BaseSettings):
    """Analyzer settings loaded from environment variables.

    Every field can be overridden with a ``LARASCOPE_``-prefixed variable,
    e.g. ``LARASCOPE_SCORE_FLOOR=0.2``. List fields take JSON arrays:
    ``LARASCOPE_CATEGORY_PRIORITY='["admin_dashboard", "ecommerce"]'``.

    Detection tuning
    ────────────────
    • score_floor        best score below this falls back to "generic"
    • generic_confidence nominal confidence reported for "generic"
    • category_priority  explicit tie-break order; empty = catalog order
    """

    model_config = SettingsConfigDict(
        env_prefix="LARASCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Target project
    project_root: Path = Field(default_factory=Path.cwd)
    host_marker: str = "artisan"
    manifest_file: str = "composer.json"

    # Detection
    score_floor: float = Field(default=0.1, ge=0.0, le=1.0)
    generic_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    category_priority: list[str] = []

    # Security. Developer mode bypasses the allow-list (never the
    # dangerous-pattern check). Development only.
    allowed_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_PATHS))
    restricted_files: list[str] = Field(default_factory=lambda: list(DEFAULT_RESTRICTED_FILES))
    developer_mode: bool = False
    max_file_size_mb: int = Field(default=10, gt=0)
    log_security_events: bool = True

    # Analysis. Thresholds left unset use the adapter defaults
    # (complexity 10, or 12 for ecommerce; confidence 0.7, or 0.75).
    complexity_threshold: Optional[int] = Field(default=None, gt=0)
    confidence_threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    enable_caching: bool = True
    batch_limit: int = Field(default=100, gt=0)

    # PHPStan integration
    phpstan_enabled: bool = False
    phpstan_binary: str = "vendor/bin/phpstan"
    phpstan_config: str = "phpstan.neon"
    phpstan_level: int = Field(default=5, ge=0, le=10)
    analysis_timeout: int = Field(default=30, gt=0)

    # Logging
    log_level: str = "info"
    debug: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = str(v).strip().lower()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level


def get_settings() -> Settings:
    return Settings()
