"""Tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from iiif_image.core.settings.app_settings import (
    AppSettings,
    ImageSettings,
    LoggingSettings,
    StorageSettings,
)
from iiif_image.enums import Format


class TestImageSettings:
    """Tests for ImageSettings."""

    def test_default_limits(self) -> None:
        """
        Test that no size limits are set by default.

        """
        settings = ImageSettings()
        assert settings.max_width is None
        assert settings.max_height is None
        assert settings.max_area is None

    def test_default_encoder_options(self) -> None:
        """
        Test default encoder options.

        """
        settings = ImageSettings()
        assert settings.jpeg_quality == 95
        assert settings.webp_quality == 90
        assert settings.png_compression == 3

    def test_default_enabled_formats(self) -> None:
        """
        Test that every format is enabled by default.

        """
        settings = ImageSettings()
        assert set(settings.enabled_formats) == set(Format)

    def test_background_color_normalized(self) -> None:
        """
        Test that background color is lowercased and prefixed with #.

        """
        assert ImageSettings(background_color="#FFAA00").background_color == "#ffaa00"
        assert ImageSettings(background_color="00ff00").background_color == "#00ff00"

    @pytest.mark.parametrize("color", ["fff", "#12345", "white", "#gggggg"])
    def test_invalid_background_color_raises(self, color: str) -> None:
        """
        Test that malformed background colors are rejected.

        Args:
            color (str): Invalid color value.

        """
        with pytest.raises(ValidationError):
            ImageSettings(background_color=color)

    def test_background_rgb(self) -> None:
        """
        Test background color conversion to RGB.

        """
        settings = ImageSettings(background_color="#ff8000")
        assert settings.background_rgb == (255, 128, 0)

    def test_max_height_requires_max_width(self) -> None:
        """
        Test that max_height without max_width is rejected.

        """
        with pytest.raises(ValidationError):
            ImageSettings(max_height=100)

    def test_max_height_with_max_width(self) -> None:
        """
        Test that max_height together with max_width is accepted.

        """
        settings = ImageSettings(max_width=200, max_height=100)
        assert settings.max_height == 100

    def test_non_positive_limit_raises(self) -> None:
        """
        Test that zero limits are rejected.

        """
        with pytest.raises(ValidationError):
            ImageSettings(max_width=0)

    def test_jpeg_quality_out_of_range_raises(self) -> None:
        """
        Test that jpeg quality above 100 is rejected.

        """
        with pytest.raises(ValidationError):
            ImageSettings(jpeg_quality=101)


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_default_base_path(self) -> None:
        """
        Test default base path.

        """
        assert StorageSettings().base_path == "images"


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_defaults(self) -> None:
        """
        Test default logging values.

        """
        settings = LoggingSettings()
        assert settings.log_level == "INFO"
        assert settings.loggers == {}
        assert settings.rotate_logs is False
        assert settings.log_file is None


class TestAppSettings:
    """Tests for AppSettings."""

    def test_default_sections(self) -> None:
        """
        Test that every section is created by default.

        """
        settings = AppSettings()
        assert isinstance(settings.image, ImageSettings)
        assert isinstance(settings.storage, StorageSettings)
        assert isinstance(settings.logging, LoggingSettings)

    def test_env_prefix(self) -> None:
        """
        Test that environment variables with IIIF_ prefix are loaded.

        """
        with patch.dict(os.environ, {"IIIF_STORAGE__BASE_PATH": "/srv/images"}, clear=False):
            settings = AppSettings()
            assert settings.storage.base_path == "/srv/images"

    def test_env_nested_delimiter(self) -> None:
        """
        Test that nested settings use __ delimiter.

        """
        with patch.dict(os.environ, {"IIIF_IMAGE__MAX_WIDTH": "500"}, clear=False):
            settings = AppSettings()
            assert settings.image.max_width == 500

    def test_custom_nested_settings(self) -> None:
        """
        Test creating settings with custom nested values.

        """
        settings = AppSettings(
            image=ImageSettings(max_area=10000),
            logging=LoggingSettings(log_level="DEBUG"),
        )
        assert settings.image.max_area == 10000
        assert settings.logging.log_level == "DEBUG"
