"""Pytest configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path

import cv2
import numpy as np
import pytest

from iiif_image.core.settings import AppSettings, reload_settings
from iiif_image.core.settings.app_settings import (
    ImageSettings,
    LoggingSettings,
    StorageSettings,
)
from iiif_image.services import ImageService, LocalStorage, get_image_service


def make_image(width: int, height: int) -> np.ndarray:
    """
    Create a BGR gradient image.

    Args:
        width (int): Image width.
        height (int): Image height.

    Returns:
        np.ndarray: Image with blue varying along x and green along y.
    """
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)[np.newaxis, :]
    image[:, :, 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, np.newaxis]
    image[:, :, 2] = 128
    return image


def encode(image: np.ndarray, extension: str) -> bytes:
    """
    Encode an image with OpenCV.

    Args:
        image (np.ndarray): Image to encode.
        extension (str): File extension, e.g. ".png".

    Returns:
        bytes: Encoded image.
    """
    _, buffer = cv2.imencode(extension, image)
    return buffer.tobytes()


@pytest.fixture
def mock_settings(tmp_path: Path) -> AppSettings:
    """
    Create mock application settings for testing.

    Args:
        tmp_path (Path): Temporary directory.

    Returns:
        AppSettings: Mock settings instance.
    """
    return AppSettings(
        image=ImageSettings(),
        storage=StorageSettings(base_path=str(tmp_path)),
        logging=LoggingSettings(
            log_level="DEBUG",
            log_format="%(message)s",
        ),
    )


@pytest.fixture
def image_service(mock_settings: AppSettings) -> ImageService:
    """
    Create an image service with mock settings.

    Args:
        mock_settings (AppSettings): Mock settings instance.

    Returns:
        ImageService: Service instance.
    """
    return ImageService(mock_settings)


@pytest.fixture
def demo_bytes() -> bytes:
    """
    Create an 800x600 JPEG source image.

    Returns:
        bytes: JPEG bytes.
    """
    return encode(make_image(800, 600), ".jpg")


@pytest.fixture
def square_bytes() -> bytes:
    """
    Create a 100x100 PNG source image.

    Returns:
        bytes: PNG bytes.
    """
    return encode(make_image(100, 100), ".png")


@pytest.fixture
def invalid_image_bytes() -> bytes:
    """
    Create bytes that are not an image.

    Returns:
        bytes: Invalid image bytes.
    """
    return b"this is not an image"


@pytest.fixture
def source_dir(
    tmp_path: Path,
    demo_bytes: bytes,
    square_bytes: bytes,
    invalid_image_bytes: bytes,
) -> Path:
    """
    Create a directory of source images.

    Args:
        tmp_path (Path): Temporary directory.
        demo_bytes (bytes): 800x600 JPEG.
        square_bytes (bytes): 100x100 PNG.
        invalid_image_bytes (bytes): Undecodable file content.

    Returns:
        Path: Directory holding demo.jpg, square.png, broken.jpg and data/nested.png.
    """
    (tmp_path / "demo.jpg").write_bytes(demo_bytes)
    (tmp_path / "square.png").write_bytes(square_bytes)
    (tmp_path / "broken.jpg").write_bytes(invalid_image_bytes)
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "nested.png").write_bytes(square_bytes)
    return tmp_path


@pytest.fixture
def storage(source_dir: Path) -> LocalStorage:
    """
    Create local storage over the source directory.

    Args:
        source_dir (Path): Directory of source images.

    Returns:
        LocalStorage: Storage instance.
    """
    return LocalStorage(source_dir)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """
    Reset settings and service caches before and after each test.

    Yields:
        None
    """
    reload_settings()
    get_image_service.cache_clear()
    yield
    reload_settings()
    get_image_service.cache_clear()
