"""Environment-based configuration for FaceView."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from faceview.ui.graphics import parse_color


class Settings(BaseSettings):
    """Application settings loaded from FACEVIEW_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FACEVIEW_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8083

    # Authentication (None = disabled)
    api_key: str | None = None

    # Concurrency
    max_concurrent: int = Field(default=2, ge=1)

    # Input limits
    max_image_pixels: int = Field(default=16_777_216, ge=1)
    max_file_size: int = Field(default=52_428_800, ge=1)
    max_view_size: int = Field(default=8192, ge=1)

    # Annotation style
    eye_open_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    stroke_width: int = Field(default=5, ge=1)
    landmark_radius: int = Field(default=10, ge=1)
    iris_radius: int = Field(default=60, ge=1)
    background_color: str = "#000000"

    @field_validator("background_color")
    @classmethod
    def check_background_color(cls, value: str) -> str:
        parse_color(value)
        return value


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
