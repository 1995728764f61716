"""Quality enum."""

from enum import StrEnum

from iiif_image.core.exceptions import UnsupportedQuality


class Quality(StrEnum):
    """Color quality of the returned image."""

    DEFAULT = "default"
    COLOR = "color"
    GRAY = "gray"
    BITONAL = "bitonal"

    @classmethod
    def parse(cls, text: str) -> "Quality":
        """
        Parse a quality token.

        Args:
            text (str): Quality token, e.g. "gray".

        Returns:
            Quality: The matching quality.

        Raises:
            UnsupportedQuality: If the token is not a known quality.
        """
        try:
            return cls(text.strip().lower())
        except ValueError as e:
            raise UnsupportedQuality(f"Unsupported quality: {text}") from e
