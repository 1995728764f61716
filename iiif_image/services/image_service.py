"""Image service - turns image requests into encoded images."""

import logging
from functools import lru_cache
from urllib.parse import quote

import cv2
from cv2.typing import MatLike

from iiif_image.core.exceptions import (
    DecodeError,
    EncodeError,
    FormatCapabilityError,
    PipelineError,
    SourceUnreadable,
)
from iiif_image.core.settings import AppSettings, get_settings
from iiif_image.enums import Format
from iiif_image.models import (
    CropBox,
    Dimensions,
    EncodedImage,
    ImageInfo,
    ImageRequest,
    SizeLimits,
    TransformPlan,
)
from iiif_image.services import codec
from iiif_image.services.storage import Storage

logger = logging.getLogger(__name__)


class ImageService:
    """Service for resolving and applying image requests."""

    def __init__(self, settings: AppSettings) -> None:
        """
        Initialize the image service.

        Args:
            settings (AppSettings): Application settings instance.
        """
        self.settings = settings
        self.limits = SizeLimits(
            max_width=settings.image.max_width,
            max_height=settings.image.max_height,
            max_area=settings.image.max_area,
        )

    def check_format(self, format_: Format) -> None:
        """
        Ensure a format can be produced.

        Args:
            format_ (Format): Requested output format.

        Raises:
            FormatCapabilityError: If the format is disabled or has no encoder.
        """
        if format_ not in self.settings.image.enabled_formats:
            raise FormatCapabilityError(f"Format {format_} is not enabled on this server")
        if not codec.is_format_available(format_):
            raise FormatCapabilityError(f"No encoder available for format {format_}")

    def plan(self, request: ImageRequest, width: int, height: int) -> TransformPlan:
        """
        Resolve a request against the source dimensions.

        Region, size and rotation are resolved in that order, each one
        against the dimensions produced by the previous step.

        Args:
            request (ImageRequest): Parsed request.
            width (int): Source image width.
            height (int): Source image height.

        Returns:
            TransformPlan: The resolved plan.

        Raises:
            InvalidRegion: If the region does not intersect the source.
            InvalidSize: If the size cannot be satisfied.
        """
        crop = request.region.resolve(width, height)
        size = request.size.resolve(crop.width, crop.height, self.limits)
        rotation = request.rotation.resolve(size.width, size.height)

        plan = TransformPlan(
            source=Dimensions(width=width, height=height),
            crop=crop,
            size=size,
            rotation=rotation,
            quality=request.quality,
            format=request.format,
        )
        logger.debug(f"Resolved {request} against {width}x{height}: {plan.model_dump()}")
        return plan

    def apply(self, image: MatLike, plan: TransformPlan) -> MatLike:
        """
        Apply a plan to a decoded image.

        Args:
            image (MatLike): Decoded source image.
            plan (TransformPlan): Plan resolved for this image.

        Returns:
            MatLike: The transformed image, ready for encoding.
        """
        full = CropBox(x=0, y=0, width=plan.source.width, height=plan.source.height)
        if plan.crop != full:
            image = codec.crop(image, plan.crop)
        image = codec.resize(image, plan.size)
        if not plan.rotation.is_identity:
            image = codec.rotate(
                image,
                plan.rotation,
                transparent=plan.transparent_fill,
                background=self.settings.image.background_rgb,
            )
        # Formats without alpha get opaque pixels before the quality step
        if codec.channels(image) == 4 and not plan.format.has_alpha:
            image = codec.flatten(image, self.settings.image.background_rgb)
        return codec.apply_quality(image, plan.quality)

    def process(self, request: ImageRequest, storage: Storage) -> EncodedImage:
        """
        Fetch, transform and encode the image described by a request.

        Args:
            request (ImageRequest): Parsed request.
            storage (Storage): Source of the raw image bytes.

        Returns:
            EncodedImage: The encoded output and its dimensions.

        Raises:
            PipelineError: Any request, source or processing error.
        """
        logger.info(f"Processing image request {request}")

        try:
            self.check_format(request.format)
            data = storage.fetch(request.identifier)
            image = codec.decode_image(data)
            source = codec.dimensions(image)
            plan = self.plan(request, source.width, source.height)
            output = self.apply(image, plan)
            encoded = codec.encode_image(output, plan.format, self.settings.image)
        except PipelineError as e:
            logger.error(f"Request {request} failed: {e}")
            raise
        except OSError as e:
            logger.error(f"Storage error while fetching {request.identifier}: {e}")
            raise SourceUnreadable(f"Image could not be read: {request.identifier}") from e
        except cv2.error as e:
            logger.error(f"OpenCV error while processing {request}: {e}")
            raise EncodeError("Image processing error") from e
        except Exception as e:
            logger.exception(f"Unexpected error while processing {request}: {e}")
            raise EncodeError("Internal processing error") from e

        result = codec.dimensions(output)
        logger.info(
            f"Produced {result.width}x{result.height} {plan.format} "
            f"({len(encoded)} bytes) for {request.identifier}"
        )
        return EncodedImage(
            data=encoded,
            format=plan.format,
            width=result.width,
            height=result.height,
        )

    def describe(self, identifier: str, storage: Storage, base_uri: str = "") -> ImageInfo:
        """
        Build the information document of a source image.

        Args:
            identifier (str): Source image identifier.
            storage (Storage): Source of the raw image bytes.
            base_uri (str): Service base URI prepended to the identifier.

        Returns:
            ImageInfo: Dimensions and limits of the image.

        Raises:
            SourceNotFound: If the image does not exist.
            SourceUnreadable: If the image cannot be read.
            DecodeError: If the image cannot be decoded.
        """
        try:
            image = codec.decode_image(storage.fetch(identifier))
        except PipelineError as e:
            logger.error(f"Describing {identifier} failed: {e}")
            raise
        except OSError as e:
            logger.error(f"Storage error while fetching {identifier}: {e}")
            raise SourceUnreadable(f"Image could not be read: {identifier}") from e
        except cv2.error as e:
            logger.error(f"OpenCV error while decoding {identifier}: {e}")
            raise DecodeError("Source image could not be decoded") from e

        source = codec.dimensions(image)
        encoded_id = quote(identifier, safe="")
        image_id = f"{base_uri.rstrip('/')}/{encoded_id}" if base_uri else encoded_id
        return ImageInfo(
            id=image_id,
            width=source.width,
            height=source.height,
            max_width=self.limits.max_width,
            max_height=self.limits.max_height,
            max_area=self.limits.max_area,
        )


@lru_cache
def get_image_service() -> ImageService:
    """
    Get cached image service singleton.

    Returns:
        ImageService: The image service instance.
    """
    return ImageService(get_settings())


def process(request: ImageRequest, storage: Storage) -> EncodedImage:
    """
    Process a request with the default image service.

    Args:
        request (ImageRequest): Parsed request.
        storage (Storage): Source of the raw image bytes.

    Returns:
        EncodedImage: The encoded output and its dimensions.
    """
    return get_image_service().process(request, storage)

