"""Enumerations."""

from iiif_image.enums.format import Format
from iiif_image.enums.quality import Quality

__all__ = ["Format", "Quality"]
