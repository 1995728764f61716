"""Tests for iiif_image package initialization."""

import iiif_image


class TestPackageInit:
    """Tests for package initialization."""

    def test_version_is_string(self) -> None:
        """
        Test that __version__ is a string.

        Returns:
            None
        """
        assert isinstance(iiif_image.__version__, str)

    def test_version_format(self) -> None:
        """
        Test that __version__ follows semantic versioning format.

        Returns:
            None
        """
        parts = iiif_image.__version__.split(".")
        assert len(parts) >= 2
        assert parts[0].isdigit()
        assert parts[1].isdigit()
