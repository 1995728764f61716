"""Business logic services."""

from iiif_image.services.image_service import ImageService, get_image_service, process
from iiif_image.services.storage import LocalStorage, Storage

__all__ = [
    "ImageService",
    "LocalStorage",
    "Storage",
    "get_image_service",
    "process",
]
