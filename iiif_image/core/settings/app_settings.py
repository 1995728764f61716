"""Application settings using pydantic-settings."""

import re

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from iiif_image.enums import Format

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})$")


class ImageSettings(BaseModel):
    """Image processing configuration."""

    max_width: int | None = Field(
        default=None, ge=1, description="Maximum output width in pixels (None = unlimited)"
    )
    max_height: int | None = Field(
        default=None,
        ge=1,
        description="Maximum output height in pixels (None = same as max_width)",
    )
    max_area: int | None = Field(
        default=None, ge=1, description="Maximum output area in pixels (None = unlimited)"
    )
    background_color: str = Field(
        default="#ffffff",
        description="Fill color for rotated corners when the format has no alpha channel",
    )
    jpeg_quality: int = Field(default=95, ge=0, le=100, description="JPEG encoder quality")
    webp_quality: int = Field(default=90, ge=1, le=100, description="WebP encoder quality")
    png_compression: int = Field(default=3, ge=0, le=9, description="PNG compression level")
    enabled_formats: list[Format] = Field(
        default_factory=lambda: list(Format),
        description="Output formats the service is allowed to produce",
    )

    @field_validator("background_color")
    @classmethod
    def validate_background_color(cls, v: str) -> str:
        """Validate and normalize background color to #rrggbb."""
        match = HEX_COLOR_PATTERN.match(v.strip())
        if match is None:
            raise ValueError(f"Background color must be a hex color like #ffffff: {v}")
        return f"#{match.group(1).lower()}"

    @model_validator(mode="after")
    def validate_limits(self) -> "ImageSettings":
        """Validate that max_height is only set together with max_width."""
        if self.max_height is not None and self.max_width is None:
            raise ValueError("max_width must be set when max_height is set")
        return self

    @property
    def background_rgb(self) -> tuple[int, int, int]:
        """
        Get the background color as an RGB tuple.

        Returns:
            tuple[int, int, int]: Red, green and blue components.
        """
        value = self.background_color.lstrip("#")
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class StorageSettings(BaseModel):
    """Source image storage configuration."""

    base_path: str = Field(default="images", description="Directory holding source images")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    loggers: dict[str, str] = Field(default={}, description="Loggers and their levels")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        description="Log format",
    )
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Log date format")
    rotate_logs: bool = Field(default=False, description="Rotate logs daily")
    log_file: str | None = Field(default=None, description="Log file to write to")


class AppSettings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="IIIF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    image: ImageSettings = Field(default_factory=ImageSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
