"""Data models."""

from iiif_image.models.encoded_image import EncodedImage
from iiif_image.models.geometry import CropBox, Dimensions, SizeLimits
from iiif_image.models.image_info import ImageInfo
from iiif_image.models.image_request import ImageRequest, RequestSegments, split_request
from iiif_image.models.region import (
    FullRegion,
    PercentRegion,
    PixelRegion,
    Region,
    SquareRegion,
    parse_region,
)
from iiif_image.models.rotation import Rotation, RotationPlan, parse_rotation
from iiif_image.models.size import (
    ConfinedSize,
    ExactSize,
    HeightSize,
    MaxSize,
    PercentSize,
    Size,
    WidthSize,
    parse_size,
)
from iiif_image.models.transform_plan import TransformPlan

__all__ = [
    "ConfinedSize",
    "CropBox",
    "Dimensions",
    "EncodedImage",
    "ExactSize",
    "FullRegion",
    "HeightSize",
    "ImageInfo",
    "ImageRequest",
    "MaxSize",
    "PercentRegion",
    "PercentSize",
    "PixelRegion",
    "Region",
    "RequestSegments",
    "Rotation",
    "RotationPlan",
    "Size",
    "SizeLimits",
    "SquareRegion",
    "TransformPlan",
    "WidthSize",
    "parse_region",
    "parse_rotation",
    "parse_size",
    "split_request",
]
