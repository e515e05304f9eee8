"""
Application configuration using Pydantic Settings.
Loads environment variables with validation and type coercion.
"""

from functools import lru_cache
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Production deployments MUST set sensitive values via environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "TypeMotion"
    debug: bool = True
    api_v1_prefix: str = "/api/v1"

    # Database (local profile record)
    database_url: str = "sqlite+aiosqlite:///./typemotion.db"

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    # Gemini API
    gemini_api_key: str = ""
    text_model: str = "gemini-3-flash-preview"
    image_model: str = "gemini-3-pro-image-preview"
    video_model: str = "veo-3.1-fast-generate-preview"
    caption_language: str = "PORTUGUÊS"
    http_timeout_seconds: int = 300

    # Image generation
    image_aspect_ratio: str = "16:9"
    image_size: str = "1K"

    # Video generation (Veo)
    video_resolution: str = "720p"
    video_aspect_ratio: str = "16:9"
    video_poll_interval_seconds: float = 5.0
    start_frame_width: int = 1280
    start_frame_height: int = 720

    # Token Encryption
    token_encryption_key: str = ""

    # File Storage
    static_dir: str = "static"
    max_upload_size_mb: int = 10

    # Validation
    max_text_length: int = 500


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to avoid re-reading environment on every call.
    Clear cache in tests with: get_settings.cache_clear()
    """
    return Settings()


# Export a settings instance
settings = get_settings()
