"""Configuration management using pydantic-settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Cortana OCR API", description="Service title")
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, description="Listening port")

    tesseract_cmd: str = Field(
        default="tesseract", description="Path or name of the tesseract executable"
    )
    tesseract_lang: Optional[str] = Field(
        None, description="Language passed to tesseract with -l (e.g. eng+deu)"
    )
    tesseract_psm: Optional[int] = Field(
        None, description="Page segmentation mode passed with --psm"
    )
    recognizer_timeout: float = Field(
        default=60.0, gt=0, description="Seconds before a tesseract run is killed"
    )

    upload_dir: Path = Field(default=Path("uploads"), description="Staged input images")
    output_dir: Path = Field(default=Path("output"), description="Tesseract output files")

    max_body_size: int = Field(
        default=50 * 1024 * 1024, description="Maximum request body size in bytes"
    )

    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached settings object loaded from environment.
    """
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger for the service."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
