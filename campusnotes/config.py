"""
CampusNotes Backend — Application Configuration
=================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py when wiring the application together.
When:  Loaded once at module import time; validated before the app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development. Deployments
    must supply the Cloudinary credentials.
    """

    # ── Note Store ────────────────────────────────────────────────────────
    # Path of the JSON array holding every note record.
    # Created (with its parent directory) on first use.
    data_file: str = Field(
        default="./data/notes-data.json",
        description="Backing file for the note record collection",
    )

    # ── Cloudinary ────────────────────────────────────────────────────────
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")

    # Uploads land in <blob_root_folder>/<type>, e.g. campusnotes/notes
    blob_root_folder: str = Field(default="campusnotes")

    # ── Uploads ───────────────────────────────────────────────────────────
    # Default: 50MB = 50 * 1024 * 1024 = 52428800
    max_upload_size: int = Field(default=52_428_800, ge=1, le=524_288_000)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows every origin.
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the Cloudinary credentials are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every missing setting and raises one ValueError listing them.
        """
        errors = []
        if not self.cloudinary_cloud_name:
            errors.append("CLOUDINARY_CLOUD_NAME is not set.")
        if not self.cloudinary_api_key:
            errors.append("CLOUDINARY_API_KEY is not set.")
        if not self.cloudinary_api_secret:
            errors.append("CLOUDINARY_API_SECRET is not set.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, read by the application factory
settings = Settings()
