"""Encoded image model."""

from pydantic import BaseModel, ConfigDict, Field

from iiif_image.enums import Format


class EncodedImage(BaseModel):
    """Result of processing an image request."""

    data: bytes = Field(description="Encoded image bytes", repr=False)
    format: Format = Field(description="Output encoding")
    width: int = Field(ge=1, description="Output width in pixels")
    height: int = Field(ge=1, description="Output height in pixels")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def media_type(self) -> str:
        """MIME type of the encoded data."""
        return self.format.media_type
