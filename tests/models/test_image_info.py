"""Tests for image information document."""

import json

from iiif_image.models import ImageInfo
from iiif_image.models.image_info import IMAGE_CONTEXT


class TestImageInfo:
    """Tests for ImageInfo model."""

    def test_defaults(self) -> None:
        """
        Test default service properties.

        """
        info = ImageInfo(id="https://example.org/iiif/demo.jpg", width=800, height=600)
        assert info.type == "ImageService3"
        assert info.protocol == "http://iiif.io/api/image"
        assert info.profile == "level2"
        assert info.context == IMAGE_CONTEXT

    def test_to_json_uses_published_names(self) -> None:
        """
        Test that JSON output uses @context and camelCase limits.

        """
        info = ImageInfo(id="demo.jpg", width=800, height=600, max_width=400)
        data = json.loads(info.to_json())
        assert data["@context"] == IMAGE_CONTEXT
        assert data["maxWidth"] == 400
        assert data["width"] == 800

    def test_to_json_omits_unset_limits(self) -> None:
        """
        Test that limits that are not configured are left out.

        """
        data = json.loads(ImageInfo(id="demo.jpg", width=800, height=600).to_json())
        assert "maxWidth" not in data
        assert "maxHeight" not in data
        assert "maxArea" not in data
