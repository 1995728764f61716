"""Tests for source image storage."""

from pathlib import Path
from unittest.mock import patch

import pytest

from iiif_image.core.exceptions import SourceNotFound, SourceUnreadable
from iiif_image.services import LocalStorage


class TestLocalStorage:
    """Tests for LocalStorage."""

    def test_fetch(self, storage: LocalStorage, demo_bytes: bytes) -> None:
        """
        Test reading an existing image.

        Args:
            storage (LocalStorage): Storage over the source directory.
            demo_bytes (bytes): Expected file content.

        """
        assert storage.fetch("demo.jpg") == demo_bytes

    def test_fetch_nested(self, storage: LocalStorage, square_bytes: bytes) -> None:
        """
        Test reading an image in a subdirectory.

        Args:
            storage (LocalStorage): Storage over the source directory.
            square_bytes (bytes): Expected file content.

        """
        assert storage.fetch("data/nested.png") == square_bytes

    def test_fetch_missing_raises(self, storage: LocalStorage) -> None:
        """
        Test that a missing file is SourceNotFound.

        Args:
            storage (LocalStorage): Storage over the source directory.

        """
        with pytest.raises(SourceNotFound):
            storage.fetch("missing.jpg")

    def test_fetch_directory_raises(self, storage: LocalStorage) -> None:
        """
        Test that a directory is not an image.

        Args:
            storage (LocalStorage): Storage over the source directory.

        """
        with pytest.raises(SourceNotFound):
            storage.fetch("data")

    @pytest.mark.parametrize("identifier", ["../secret.jpg", "data/../../secret.jpg", ""])
    def test_path_traversal_raises(self, tmp_path: Path, identifier: str) -> None:
        """
        Test that identifiers escaping the base directory are rejected.

        Args:
            tmp_path (Path): Temporary directory.
            identifier (str): Escaping identifier.

        """
        base = tmp_path / "images"
        (base / "data").mkdir(parents=True)
        (tmp_path / "secret.jpg").write_bytes(b"secret")

        with pytest.raises(SourceNotFound):
            LocalStorage(base).fetch(identifier)

    def test_fetch_unreadable_raises(self, storage: LocalStorage) -> None:
        """
        Test that read failures are SourceUnreadable.

        Args:
            storage (LocalStorage): Storage over the source directory.

        """
        with patch(
            "iiif_image.services.storage.open",
            side_effect=PermissionError("Permission denied"),
            create=True,
        ):
            with pytest.raises(SourceUnreadable):
                storage.fetch("demo.jpg")
