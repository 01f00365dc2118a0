"""Configuration for courses-scraper using pydantic-settings.

All settings are driven by environment variables with the COURSES_ prefix.
The extraction core never reads them; only the fetcher, the pipeline and the
CLI do.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Scraper configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COURSES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_root: Path = Path(".")
    datasets_dir: Path = Path("datasets")

    course_url_template: str = "https://www.udemy.com/course/{identifier}/"
    base_url: str = "https://www.udemy.com"

    user_agent: str = "courses-scraper/0.1 (contact: your-email@example.com)"
    accept_language: str = "en-US,en;q=0.9"

    min_delay_seconds: float = 0.0
    timeout_total: float = 30.0

    max_attempts: int = 3
    backoff_multiplier: float = 1.0
    backoff_min: float = 1.0
    backoff_max: float = 30.0

    workers: int = 4

    def ensure_dirs(self) -> None:
        """Create the output directory if it doesn't exist."""
        path = self.project_root / self.datasets_dir
        path.mkdir(parents=True, exist_ok=True)
        logger.debug("Ensured directory: %s", path)


def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings()
