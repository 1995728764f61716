"""Region parameter: which part of the source image to return."""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from iiif_image.core.exceptions import InvalidRegion
from iiif_image.core.utils import round_half_up
from iiif_image.models.geometry import CropBox

PIXEL_PATTERN = re.compile(r"^(\d+),(\d+),(\d+),(\d+)$")
PERCENT_VALUE_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")


def _clip(x: int, y: int, w: int, h: int, width: int, height: int, text: str) -> CropBox:
    """
    Clip a pixel rectangle to the source bounds.

    Args:
        x (int): Left coordinate.
        y (int): Top coordinate.
        w (int): Requested width.
        h (int): Requested height.
        width (int): Source width.
        height (int): Source height.
        text (str): Region text, used in error messages.

    Returns:
        CropBox: The clipped rectangle.

    Raises:
        InvalidRegion: If the rectangle lies outside the source or has no area.
    """
    if x >= width or y >= height:
        raise InvalidRegion(f"Region {text} lies outside the {width}x{height} image")
    w = min(w, width - x)
    h = min(h, height - y)
    if w <= 0 or h <= 0:
        raise InvalidRegion(f"Region {text} has zero area")
    return CropBox(x=x, y=y, width=w, height=h)


class FullRegion(BaseModel):
    """The complete image."""

    kind: Literal["full"] = "full"

    model_config = ConfigDict(extra="forbid", frozen=True)

    def __str__(self) -> str:
        return "full"

    def resolve(self, width: int, height: int) -> CropBox:
        """Resolve to the whole source rectangle."""
        return CropBox(x=0, y=0, width=width, height=height)


class SquareRegion(BaseModel):
    """The largest square, centered on the longer dimension."""

    kind: Literal["square"] = "square"

    model_config = ConfigDict(extra="forbid", frozen=True)

    def __str__(self) -> str:
        return "square"

    def resolve(self, width: int, height: int) -> CropBox:
        """Resolve to a centered square with the shorter dimension as side."""
        side = min(width, height)
        return CropBox(x=(width - side) // 2, y=(height - side) // 2, width=side, height=side)


class PixelRegion(BaseModel):
    """A rectangle given in absolute source pixels."""

    kind: Literal["pixel"] = "pixel"
    x: int = Field(ge=0, description="Left x coordinate")
    y: int = Field(ge=0, description="Top y coordinate")
    w: int = Field(ge=0, description="Width")
    h: int = Field(ge=0, description="Height")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={"example": {"kind": "pixel", "x": 125, "y": 15, "w": 120, "h": 140}},
    )

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.w},{self.h}"

    def resolve(self, width: int, height: int) -> CropBox:
        """Resolve by clipping the rectangle to the source bounds."""
        return _clip(self.x, self.y, self.w, self.h, width, height, str(self))


class PercentRegion(BaseModel):
    """A rectangle given as percentages of the source dimensions."""

    kind: Literal["percent"] = "percent"
    x: float = Field(ge=0, description="Left x as percent of width")
    y: float = Field(ge=0, description="Top y as percent of height")
    w: float = Field(ge=0, description="Width as percent of width")
    h: float = Field(ge=0, description="Height as percent of height")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {"kind": "percent", "x": 41.6, "y": 7.5, "w": 40.0, "h": 70.0}
        },
    )

    def __str__(self) -> str:
        values = ",".join(f"{v:g}" for v in (self.x, self.y, self.w, self.h))
        return f"pct:{values}"

    def resolve(self, width: int, height: int) -> CropBox:
        """Resolve by converting percentages to pixels, then clipping."""
        return _clip(
            round_half_up(self.x / 100 * width),
            round_half_up(self.y / 100 * height),
            round_half_up(self.w / 100 * width),
            round_half_up(self.h / 100 * height),
            width,
            height,
            str(self),
        )


Region = Annotated[
    FullRegion | SquareRegion | PixelRegion | PercentRegion,
    Field(discriminator="kind"),
]


def parse_region(text: str) -> Region:
    """
    Parse a region token.

    Accepted forms: ``full``, ``square``, ``x,y,w,h`` and ``pct:x,y,w,h``.

    Args:
        text (str): Region token.

    Returns:
        Region: The parsed region variant.

    Raises:
        InvalidRegion: If the token matches none of the forms.
    """
    value = text.strip().lower()
    if value == "full":
        return FullRegion()
    if value == "square":
        return SquareRegion()

    if value.startswith("pct:"):
        parts = value[4:].split(",")
        if len(parts) != 4 or not all(PERCENT_VALUE_PATTERN.match(p) for p in parts):
            raise InvalidRegion(f"Invalid percent region: {text}")
        x, y, w, h = (float(p) for p in parts)
        return PercentRegion(x=x, y=y, w=w, h=h)

    match = PIXEL_PATTERN.match(value)
    if match is None:
        raise InvalidRegion(f"Invalid region format: {text}")
    x, y, w, h = (int(g) for g in match.groups())
    return PixelRegion(x=x, y=y, w=w, h=h)
