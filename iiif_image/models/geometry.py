"""Resolved pixel geometry models."""

import math

from pydantic import BaseModel, ConfigDict, Field


class CropBox(BaseModel):
    """A rectangle in source pixel coordinates."""

    x: int = Field(ge=0, description="Left x coordinate")
    y: int = Field(ge=0, description="Top y coordinate")
    width: int = Field(ge=1, description="Rectangle width")
    height: int = Field(ge=1, description="Rectangle height")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "x": 100,
                "y": 0,
                "width": 600,
                "height": 600,
            }
        },
    )


class Dimensions(BaseModel):
    """Width and height of an image in pixels."""

    width: int = Field(ge=1, description="Width in pixels")
    height: int = Field(ge=1, description="Height in pixels")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={"example": {"width": 300, "height": 300}},
    )


class SizeLimits(BaseModel):
    """Server-imposed limits on output dimensions."""

    max_width: int | None = Field(default=None, ge=1, description="Maximum width")
    max_height: int | None = Field(default=None, ge=1, description="Maximum height")
    max_area: int | None = Field(default=None, ge=1, description="Maximum width * height")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def effective_max_height(self) -> int | None:
        """Maximum height, falling back to the maximum width."""
        return self.max_height if self.max_height is not None else self.max_width

    def fit_scale(self, width: int, height: int) -> float | None:
        """
        Get the largest scale factor that keeps width x height within the limits.

        Args:
            width (int): Width to scale.
            height (int): Height to scale.

        Returns:
            float | None: Scale factor, or None if no limit applies.
        """
        scales: list[float] = []
        if self.max_width is not None:
            scales.append(self.max_width / width)
        max_height = self.effective_max_height
        if max_height is not None:
            scales.append(max_height / height)
        if self.max_area is not None:
            scales.append(math.sqrt(self.max_area / (width * height)))
        return min(scales) if scales else None

    def allows(self, width: int, height: int) -> bool:
        """
        Check whether dimensions are within the limits.

        Args:
            width (int): Width to check.
            height (int): Height to check.

        Returns:
            bool: True if the dimensions respect every configured limit.
        """
        if self.max_width is not None and width > self.max_width:
            return False
        max_height = self.effective_max_height
        if max_height is not None and height > max_height:
            return False
        if self.max_area is not None and width * height > self.max_area:
            return False
        return True
