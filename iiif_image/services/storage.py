"""Source image storage."""

import logging
import os
from typing import Protocol

from iiif_image.core.exceptions import SourceNotFound, SourceUnreadable

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Anything that can return the bytes of a source image."""

    def fetch(self, identifier: str) -> bytes:
        """
        Fetch the raw bytes of a source image.

        Args:
            identifier (str): Source image identifier.

        Returns:
            bytes: Raw, still encoded, image bytes.

        Raises:
            SourceNotFound: If no image exists for the identifier.
            SourceUnreadable: If the backend fails while reading.
        """
        ...


class LocalStorage:
    """Storage backed by a directory on the local filesystem."""

    def __init__(self, base_path: str | os.PathLike[str]) -> None:
        """
        Initialize the storage.

        Args:
            base_path (str | os.PathLike[str]): Directory holding source images.
        """
        self.base_path = os.path.realpath(base_path)

    def get_file_path(self, identifier: str) -> str:
        """
        Map an identifier to a path inside the base directory.

        Args:
            identifier (str): Source image identifier, may contain "/".

        Returns:
            str: Absolute path of the source file.

        Raises:
            SourceNotFound: If the identifier escapes the base directory.
        """
        path = os.path.realpath(os.path.join(self.base_path, identifier))
        # Ensure path is within base_path (prevent path traversal)
        if not path.startswith(self.base_path + os.sep):
            logger.warning(f"Path traversal attempt rejected: {identifier}")
            raise SourceNotFound(f"Image not found: {identifier}")
        return path

    def fetch(self, identifier: str) -> bytes:
        """
        Read a source image from disk.

        Args:
            identifier (str): Source image identifier.

        Returns:
            bytes: File contents.

        Raises:
            SourceNotFound: If the file does not exist.
            SourceUnreadable: If the file cannot be read.
        """
        path = self.get_file_path(identifier)
        if not os.path.isfile(path):
            raise SourceNotFound(f"Image not found: {identifier}")
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise SourceUnreadable(f"Image could not be read: {identifier}") from e
