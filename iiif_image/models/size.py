"""Size parameter: dimensions of the returned image."""

import math
import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from iiif_image.core.exceptions import InvalidSize, UpscaleNotAllowed
from iiif_image.core.utils import FLOAT_PRECISION, round_dimension
from iiif_image.models.geometry import Dimensions, SizeLimits

DIMENSIONS_PATTERN = re.compile(r"^(\d*),(\d*)$")
PERCENT_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")


def _fit_within(width: int, height: int, scale: float) -> tuple[int, int]:
    """
    Scale dimensions down to fit a limit.

    Args:
        width (int): Width to scale.
        height (int): Height to scale.
        scale (float): Scale factor from the server limits.

    Returns:
        tuple[int, int]: Scaled dimensions, floored so they stay inside the limits.
    """
    return (
        max(1, math.floor(round(width * scale, FLOAT_PRECISION))),
        max(1, math.floor(round(height * scale, FLOAT_PRECISION))),
    )


class _SizeBase(BaseModel):
    """Shared behavior of every size variant."""

    upscale: bool = Field(default=False, description="Whether the ^ prefix was given")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def prefix(self) -> str:
        """Grammar prefix, "^" when upscaling is allowed."""
        return "^" if self.upscale else ""

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        """Compute the unrounded target dimensions, implemented by each variant."""
        raise NotImplementedError(f"{type(self).__name__} does not define a size rule")

    def resolve(self, width: int, height: int, limits: SizeLimits | None = None) -> Dimensions:
        """
        Resolve the size against the extracted region.

        Args:
            width (int): Width of the extracted region.
            height (int): Height of the extracted region.
            limits (SizeLimits | None): Server limits, None for unlimited.

        Returns:
            Dimensions: Target dimensions, both at least 1.

        Raises:
            UpscaleNotAllowed: If the target is larger than the region without ^.
            InvalidSize: If the target exceeds the server limits.
        """
        limits = limits or SizeLimits()
        target_w, target_h = self._compute(width, height, limits)
        target = Dimensions(width=round_dimension(target_w), height=round_dimension(target_h))

        if not self.upscale and (target.width > width or target.height > height):
            raise UpscaleNotAllowed(
                f"Size {self} would upscale {width}x{height} to "
                f"{target.width}x{target.height}; use ^ to allow upscaling"
            )
        if not limits.allows(target.width, target.height):
            raise InvalidSize(
                f"Size {self} resolves to {target.width}x{target.height}, "
                "which exceeds the server limits"
            )
        return target


class MaxSize(_SizeBase):
    """Largest size available, bounded by the server limits."""

    kind: Literal["max"] = "max"

    def __str__(self) -> str:
        return f"{self.prefix}max"

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        scale = limits.fit_scale(width, height)
        if scale is None:
            return width, height
        if not self.upscale:
            scale = min(scale, 1.0)
        return _fit_within(width, height, scale)


class WidthSize(_SizeBase):
    """Exact width, height derived from the aspect ratio."""

    kind: Literal["width"] = "width"
    w: int = Field(ge=1, description="Target width")

    def __str__(self) -> str:
        return f"{self.prefix}{self.w},"

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        return self.w, self.w * height / width


class HeightSize(_SizeBase):
    """Exact height, width derived from the aspect ratio."""

    kind: Literal["height"] = "height"
    h: int = Field(ge=1, description="Target height")

    def __str__(self) -> str:
        return f"{self.prefix},{self.h}"

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        return self.h * width / height, self.h


class ExactSize(_SizeBase):
    """Exact width and height, aspect ratio not preserved."""

    kind: Literal["exact"] = "exact"
    w: int = Field(ge=1, description="Target width")
    h: int = Field(ge=1, description="Target height")

    def __str__(self) -> str:
        return f"{self.prefix}{self.w},{self.h}"

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        return self.w, self.h


class ConfinedSize(_SizeBase):
    """Best fit inside a w x h box and the server limits, aspect ratio preserved."""

    kind: Literal["confined"] = "confined"
    w: int = Field(ge=1, description="Box width")
    h: int = Field(ge=1, description="Box height")

    def __str__(self) -> str:
        return f"{self.prefix}!{self.w},{self.h}"

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        scale = min(self.w / width, self.h / height)
        if not self.upscale:
            scale = min(scale, 1.0)
        limit = limits.fit_scale(width, height)
        if limit is not None and limit < scale:
            return _fit_within(width, height, limit)
        return width * scale, height * scale


class PercentSize(_SizeBase):
    """Both dimensions scaled by n percent."""

    kind: Literal["percent"] = "percent"
    n: float = Field(gt=0, description="Scale in percent")

    def __str__(self) -> str:
        return f"{self.prefix}pct:{self.n:g}"

    def _compute(self, width: int, height: int, limits: SizeLimits) -> tuple[float, float]:
        return width * self.n / 100, height * self.n / 100


Size = Annotated[
    MaxSize | WidthSize | HeightSize | ExactSize | ConfinedSize | PercentSize,
    Field(discriminator="kind"),
]


def _positive_int(value: str, text: str) -> int:
    number = int(value)
    if number <= 0:
        raise InvalidSize(f"Size dimensions must be positive: {text}")
    return number


def parse_size(text: str) -> Size:
    """
    Parse a size token.

    Checked in order: ``max``, then the ``^`` prefix, then ``pct:n``,
    ``!w,h``, ``w,``, ``,h`` and ``w,h``. ``,^h`` is read as ``^,h``.

    Args:
        text (str): Size token.

    Returns:
        Size: The parsed size variant.

    Raises:
        InvalidSize: If the token matches none of the forms.
    """
    value = text.strip().lower()
    upscale = value.startswith("^")
    if upscale:
        value = value[1:]
    elif value.startswith(",^"):
        upscale = True
        value = "," + value[2:]

    if value == "max":
        return MaxSize(upscale=upscale)

    if value.startswith("pct:"):
        number = value[4:]
        if not PERCENT_PATTERN.match(number) or float(number) <= 0:
            raise InvalidSize(f"Invalid percent size: {text}")
        return PercentSize(n=float(number), upscale=upscale)

    confined = value.startswith("!")
    if confined:
        value = value[1:]

    match = DIMENSIONS_PATTERN.match(value)
    if match is None:
        raise InvalidSize(f"Invalid size format: {text}")
    w_text, h_text = match.groups()

    if confined:
        if not w_text or not h_text:
            raise InvalidSize(f"Confined size needs both width and height: {text}")
        return ConfinedSize(
            w=_positive_int(w_text, text), h=_positive_int(h_text, text), upscale=upscale
        )
    if w_text and h_text:
        return ExactSize(
            w=_positive_int(w_text, text), h=_positive_int(h_text, text), upscale=upscale
        )
    if w_text:
        return WidthSize(w=_positive_int(w_text, text), upscale=upscale)
    if h_text:
        return HeightSize(h=_positive_int(h_text, text), upscale=upscale)
    raise InvalidSize(f"Invalid size format: {text}")
