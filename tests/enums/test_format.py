"""Tests for Format enum."""

import pytest

from iiif_image.core.exceptions import UnsupportedFormat
from iiif_image.enums import Format


class TestFormat:
    """Tests for Format enum."""

    def test_parse(self) -> None:
        """
        Test parsing format tokens.

        """
        assert Format.parse("jpg") == Format.JPG
        assert Format.parse("WEBP") == Format.WEBP

    @pytest.mark.parametrize("text", ["jpeg", "bmp", "svg", ""])
    def test_parse_unsupported_raises(self, text: str) -> None:
        """
        Test that unknown formats are rejected.

        Args:
            text (str): Unknown format token.

        """
        with pytest.raises(UnsupportedFormat):
            Format.parse(text)

    @pytest.mark.parametrize(
        ("format_", "media_type"),
        [
            (Format.JPG, "image/jpeg"),
            (Format.TIF, "image/tiff"),
            (Format.PNG, "image/png"),
            (Format.GIF, "image/gif"),
            (Format.JP2, "image/jp2"),
            (Format.PDF, "application/pdf"),
            (Format.WEBP, "image/webp"),
        ],
    )
    def test_media_type(self, format_: Format, media_type: str) -> None:
        """
        Test the media type of each format.

        Args:
            format_ (Format): Output format.
            media_type (str): Expected MIME type.

        """
        assert format_.media_type == media_type

    def test_has_alpha(self) -> None:
        """
        Test which formats can carry transparency.

        """
        assert {f for f in Format if f.has_alpha} == {Format.PNG, Format.TIF, Format.WEBP}

    def test_uses_pillow(self) -> None:
        """
        Test which formats are written by Pillow.

        """
        assert {f for f in Format if f.uses_pillow} == {Format.GIF, Format.PDF}

    def test_extension(self) -> None:
        """
        Test encoder file extensions.

        """
        assert Format.JPG.extension == ".jpg"
        assert Format.TIF.extension == ".tiff"
