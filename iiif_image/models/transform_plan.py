"""Transform plan model."""

from pydantic import BaseModel, ConfigDict, Field

from iiif_image.enums import Format, Quality
from iiif_image.models.geometry import CropBox, Dimensions
from iiif_image.models.rotation import RotationPlan


class TransformPlan(BaseModel):
    """Every operation needed to turn a source image into the requested output."""

    source: Dimensions = Field(description="Source image dimensions")
    crop: CropBox = Field(description="Extracted region in source pixels")
    size: Dimensions = Field(description="Dimensions after scaling")
    rotation: RotationPlan = Field(description="Mirror and rotation to apply after scaling")
    quality: Quality = Field(description="Color reduction to apply")
    format: Format = Field(description="Output encoding")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "source": {"width": 800, "height": 600},
                "crop": {"x": 100, "y": 0, "width": 600, "height": 600},
                "size": {"width": 300, "height": 300},
                "rotation": {
                    "degrees": 0.0,
                    "mirror": False,
                    "axis_aligned": True,
                    "width": 300,
                    "height": 300,
                },
                "quality": "gray",
                "format": "png",
            }
        },
    )

    @property
    def output(self) -> Dimensions:
        """Dimensions of the final image."""
        return Dimensions(width=self.rotation.width, height=self.rotation.height)

    @property
    def transparent_fill(self) -> bool:
        """Whether uncovered canvas area is transparent rather than background colored."""
        return self.rotation.needs_fill and self.format.has_alpha
