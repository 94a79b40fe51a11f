"""
Application configuration using Pydantic Settings.

Centralizes all environment variables and app settings.
Using Pydantic BaseSettings gives us validation and type safety for config.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    All sensitive/configurable values should live here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # Application
    app_name: str = "OCR Document Service"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP
    api_prefix: str = "/api"
    cors_origins: List[str] = ["*"]

    # MongoDB - Motor (async driver) connection string
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "ocr_documents_db"

    # Uploads are kept inside the document record, so this also bounds record size
    max_upload_size_mb: int = 10

    # OCR - Tesseract
    ocr_language: str = "eng"
    tesseract_cmd: Optional[str] = None
    ocr_timeout_seconds: Optional[float] = 300.0

    # Background tasks still running at shutdown get this long before cancellation
    shutdown_grace_seconds: float = 10.0

    @field_validator("tesseract_cmd", mode="before")
    @classmethod
    def strip_tesseract_cmd(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not isinstance(v, str):
            return v
        return v.strip() or None

    @field_validator("ocr_timeout_seconds", mode="before")
    @classmethod
    def disable_empty_timeout(cls, v):
        # "" or 0 turns the timeout off entirely
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if float(v) <= 0:
            return None
        return v

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Using lru_cache avoids re-reading .env on every request.
    """
    return Settings()
