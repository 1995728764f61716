"""Image information document model."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

IMAGE_CONTEXT = "http://iiif.io/api/image/3/context.json"
IMAGE_PROTOCOL = "http://iiif.io/api/image"


class ImageInfo(BaseModel):
    """Technical properties of an image service (info.json)."""

    context: str = Field(
        default=IMAGE_CONTEXT, alias="@context", description="JSON-LD context"
    )
    id: str = Field(description="Base URI of the image, without trailing slash")
    type: Literal["ImageService3"] = Field(default="ImageService3", description="Service type")
    protocol: Literal["http://iiif.io/api/image"] = Field(
        default=IMAGE_PROTOCOL, description="Image API protocol URI"
    )
    profile: Literal["level0", "level1", "level2"] = Field(
        default="level2", description="Highest compliance level fully supported"
    )
    width: int = Field(ge=1, description="Width of the full image in pixels")
    height: int = Field(ge=1, description="Height of the full image in pixels")
    max_width: int | None = Field(default=None, alias="maxWidth", description="Maximum width")
    max_height: int | None = Field(default=None, alias="maxHeight", description="Maximum height")
    max_area: int | None = Field(default=None, alias="maxArea", description="Maximum area")

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "@context": IMAGE_CONTEXT,
                "id": "https://example.org/iiif/demo.jpg",
                "type": "ImageService3",
                "protocol": IMAGE_PROTOCOL,
                "profile": "level2",
                "width": 800,
                "height": 600,
            }
        },
    )

    def to_json(self) -> str:
        """
        Serialize with the published property names, omitting unset limits.

        Returns:
            str: JSON document.
        """
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)
