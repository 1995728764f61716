"""Rotation parameter: mirroring and clockwise rotation of the returned image."""

import math

from pydantic import BaseModel, ConfigDict, Field

from iiif_image.core.exceptions import InvalidRotation
from iiif_image.core.utils import ceil_dimension

AXIS_ALIGNED_ANGLES = frozenset({0.0, 90.0, 180.0, 270.0})


class RotationPlan(BaseModel):
    """Rotation bound to concrete input dimensions."""

    degrees: float = Field(ge=0, lt=360, description="Clockwise angle in [0, 360)")
    mirror: bool = Field(description="Flip horizontally before rotating")
    axis_aligned: bool = Field(description="Angle is a multiple of 90 degrees")
    width: int = Field(ge=1, description="Output canvas width")
    height: int = Field(ge=1, description="Output canvas height")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "degrees": 45.0,
                "mirror": False,
                "axis_aligned": False,
                "width": 142,
                "height": 142,
            }
        },
    )

    @property
    def is_identity(self) -> bool:
        """Whether the rotation leaves the pixels untouched."""
        return self.degrees == 0 and not self.mirror

    @property
    def needs_fill(self) -> bool:
        """Whether the output canvas has area not covered by the source."""
        return not self.axis_aligned


class Rotation(BaseModel):
    """Requested rotation, as written in the request."""

    angle: float = Field(ge=0, description="Requested clockwise angle in degrees")
    mirror: bool = Field(default=False, description="Whether the ! prefix was given")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={"example": {"angle": 90.0, "mirror": True}},
    )

    def __str__(self) -> str:
        return f"{'!' if self.mirror else ''}{self.angle:g}"

    @property
    def degrees(self) -> float:
        """Angle normalized into [0, 360)."""
        return self.angle % 360.0

    @property
    def is_axis_aligned(self) -> bool:
        """Whether the angle is 0, 90, 180 or 270 degrees."""
        return self.degrees in AXIS_ALIGNED_ANGLES

    def resolve(self, width: int, height: int) -> RotationPlan:
        """
        Compute the output canvas for rotating a width x height image.

        Axis-aligned angles swap or keep the dimensions. Any other angle
        yields the smallest rectangle enclosing the rotated image.

        Args:
            width (int): Width of the image to rotate.
            height (int): Height of the image to rotate.

        Returns:
            RotationPlan: The bound rotation.
        """
        degrees = self.degrees
        if self.is_axis_aligned:
            if degrees in (90.0, 270.0):
                out_w, out_h = height, width
            else:
                out_w, out_h = width, height
        else:
            theta = math.radians(degrees)
            cos_t = abs(math.cos(theta))
            sin_t = abs(math.sin(theta))
            out_w = ceil_dimension(width * cos_t + height * sin_t)
            out_h = ceil_dimension(width * sin_t + height * cos_t)

        return RotationPlan(
            degrees=degrees,
            mirror=self.mirror,
            axis_aligned=self.is_axis_aligned,
            width=out_w,
            height=out_h,
        )


def parse_rotation(text: str) -> Rotation:
    """
    Parse a rotation token: an optional ``!`` followed by a number of degrees.

    Args:
        text (str): Rotation token, e.g. "90" or "!22.5".

    Returns:
        Rotation: The parsed rotation.

    Raises:
        InvalidRotation: If the angle is missing, non-numeric, not finite or negative.
    """
    value = text.strip()
    mirror = value.startswith("!")
    if mirror:
        value = value[1:]

    try:
        angle = float(value)
    except ValueError as e:
        raise InvalidRotation(f"Invalid rotation: {text}") from e

    if not math.isfinite(angle):
        raise InvalidRotation(f"Rotation must be a finite number: {text}")
    if angle < 0:
        raise InvalidRotation(f"Rotation must not be negative: {text}")

    return Rotation(angle=angle, mirror=mirror)
