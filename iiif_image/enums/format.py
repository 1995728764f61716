"""Format enum."""

from enum import StrEnum

from iiif_image.core.exceptions import UnsupportedFormat


class Format(StrEnum):
    """Output encoding of the returned image."""

    JPG = "jpg"
    TIF = "tif"
    PNG = "png"
    GIF = "gif"
    JP2 = "jp2"
    PDF = "pdf"
    WEBP = "webp"

    @classmethod
    def parse(cls, text: str) -> "Format":
        """
        Parse a format token.

        Args:
            text (str): Format token, e.g. "png".

        Returns:
            Format: The matching format.

        Raises:
            UnsupportedFormat: If the token is not a known format.
        """
        try:
            return cls(text.strip().lower())
        except ValueError as e:
            raise UnsupportedFormat(f"Unsupported format: {text}") from e

    @property
    def media_type(self) -> str:
        """MIME type of the encoding."""
        return MEDIA_TYPES[self]

    @property
    def has_alpha(self) -> bool:
        """Whether the encoding can carry an alpha channel."""
        return self in ALPHA_FORMATS

    @property
    def extension(self) -> str:
        """File extension understood by the OpenCV encoders."""
        return EXTENSIONS[self]

    @property
    def uses_pillow(self) -> bool:
        """Whether the encoding is written by Pillow instead of OpenCV."""
        return self in PILLOW_FORMATS


MEDIA_TYPES: dict[Format, str] = {
    Format.JPG: "image/jpeg",
    Format.TIF: "image/tiff",
    Format.PNG: "image/png",
    Format.GIF: "image/gif",
    Format.JP2: "image/jp2",
    Format.PDF: "application/pdf",
    Format.WEBP: "image/webp",
}

ALPHA_FORMATS: frozenset[Format] = frozenset({Format.PNG, Format.TIF, Format.WEBP})

EXTENSIONS: dict[Format, str] = {
    Format.JPG: ".jpg",
    Format.TIF: ".tiff",
    Format.PNG: ".png",
    Format.GIF: ".gif",
    Format.JP2: ".jp2",
    Format.PDF: ".pdf",
    Format.WEBP: ".webp",
}

# OpenCV has no GIF or PDF writer
PILLOW_FORMATS: dict[Format, str] = {
    Format.GIF: "GIF",
    Format.PDF: "PDF",
}
