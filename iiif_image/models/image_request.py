"""Image request model and path grammar."""

import re
from typing import NamedTuple
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from iiif_image.core.exceptions import MalformedRequest
from iiif_image.enums import Format, Quality
from iiif_image.models.region import Region, parse_region
from iiif_image.models.rotation import Rotation, parse_rotation
from iiif_image.models.size import Size, parse_size

SEGMENT_COUNT = 5
PARAMETER_PATTERN = re.compile(r"^[A-Za-z0-9.,:!^\-]+$")
BAD_PERCENT_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
QUERY_PATTERN = re.compile(r"[?#]")


class RequestSegments(NamedTuple):
    """Raw text fields of a request path."""

    identifier: str
    region: str
    size: str
    rotation: str
    quality: str
    format: str


def _decode_segment(segment: str) -> str:
    """
    Percent-decode one path segment.

    Args:
        segment (str): Raw segment.

    Returns:
        str: Decoded segment.

    Raises:
        MalformedRequest: If the escapes are malformed or not UTF-8.
    """
    if BAD_PERCENT_PATTERN.search(segment):
        raise MalformedRequest(f"Invalid percent-encoding in segment: {segment}")
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedRequest(f"Percent-encoded segment is not UTF-8: {segment}") from e


def split_request(text: str) -> RequestSegments:
    """
    Split a request path into its raw fields.

    The path has the form
    ``{identifier}/{region}/{size}/{rotation}/{quality}.{format}``. Only the
    structure is checked here; each field is validated by its own parser.

    Args:
        text (str): Request path, with or without a leading slash.

    Returns:
        RequestSegments: The decoded raw fields.

    Raises:
        MalformedRequest: If the structure or character set is invalid.
    """
    path = QUERY_PATTERN.split(text, maxsplit=1)[0]
    if path.startswith("/"):
        path = path[1:]

    segments = path.split("/")
    if len(segments) != SEGMENT_COUNT:
        raise MalformedRequest(
            f"Expected {SEGMENT_COUNT} path segments, got {len(segments)}: {text}"
        )
    if any(not segment for segment in segments):
        raise MalformedRequest(f"Request contains an empty segment: {text}")

    identifier, *parameters = (_decode_segment(segment) for segment in segments)

    if CONTROL_CHAR_PATTERN.search(identifier):
        raise MalformedRequest("Identifier contains control characters")
    for parameter in parameters:
        if not PARAMETER_PATTERN.match(parameter):
            raise MalformedRequest(f"Invalid characters in segment: {parameter}")

    region, size, rotation, quality_format = parameters
    quality, dot, format_ = quality_format.partition(".")
    if not dot or not quality or not format_ or "." in format_:
        raise MalformedRequest(f"Expected {{quality}}.{{format}}, got: {quality_format}")

    return RequestSegments(
        identifier=identifier,
        region=region,
        size=size,
        rotation=rotation,
        quality=quality,
        format=format_,
    )


class ImageRequest(BaseModel):
    """A parsed image request."""

    identifier: str = Field(min_length=1, description="Source image identifier")
    region: Region = Field(description="Part of the source to extract")
    size: Size = Field(description="Dimensions of the returned image")
    rotation: Rotation = Field(description="Mirroring and rotation")
    quality: Quality = Field(description="Color quality")
    format: Format = Field(description="Output encoding")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "identifier": "demo.jpg",
                "region": {"kind": "square"},
                "size": {"kind": "percent", "n": 50.0, "upscale": False},
                "rotation": {"angle": 0.0, "mirror": False},
                "quality": "gray",
                "format": "png",
            }
        },
    )

    def __str__(self) -> str:
        identifier = self.identifier.replace("%", "%25").replace("/", "%2F")
        return (
            f"{identifier}/{self.region}/{self.size}/{self.rotation}/"
            f"{self.quality}.{self.format}"
        )

    @classmethod
    def parse(cls, text: str) -> "ImageRequest":
        """
        Parse a request path.

        Args:
            text (str): Path such as ``demo.jpg/full/max/0/default.jpg``.

        Returns:
            ImageRequest: The parsed request.

        Raises:
            MalformedRequest: If the path structure is invalid.
            InvalidRegion: If the region field is invalid.
            InvalidSize: If the size field is invalid.
            InvalidRotation: If the rotation field is invalid.
            UnsupportedQuality: If the quality is unknown.
            UnsupportedFormat: If the format is unknown.
        """
        segments = split_request(text)
        return cls(
            identifier=segments.identifier,
            region=parse_region(segments.region),
            size=parse_size(segments.size),
            rotation=parse_rotation(segments.rotation),
            quality=Quality.parse(segments.quality),
            format=Format.parse(segments.format),
        )

    @classmethod
    def from_url(cls, url: str) -> "ImageRequest":
        """
        Parse a full image URL, ignoring the scheme, server and any path prefix.

        Args:
            url (str): URL such as ``https://example.org/iiif/demo.jpg/full/max/0/default.jpg``.

        Returns:
            ImageRequest: The parsed request.

        Raises:
            MalformedRequest: If the URL path has fewer than five segments.
        """
        segments = urlsplit(url).path.strip("/").split("/")
        if len(segments) < SEGMENT_COUNT:
            raise MalformedRequest(f"URL does not have enough path segments: {url}")
        return cls.parse("/".join(segments[-SEGMENT_COUNT:]))
