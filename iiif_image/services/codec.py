"""Pixel codec - OpenCV decode/encode/transform primitives, Pillow for GIF and PDF."""

import io
import logging
import time

import cv2
import numpy as np
from cv2.typing import MatLike
from PIL import Image

from iiif_image.core.exceptions import DecodeError, EncodeError
from iiif_image.core.settings.app_settings import ImageSettings
from iiif_image.enums import Format, Quality
from iiif_image.enums.format import PILLOW_FORMATS
from iiif_image.models import CropBox, Dimensions, RotationPlan

logger = logging.getLogger(__name__)

# Luminance midpoint for bitonal conversion, values above it become white
BITONAL_THRESHOLD = 127

# Fixed PDF metadata dates so identical requests produce identical bytes
PDF_TIMESTAMP = time.gmtime(0)

AXIS_ROTATE_CODES = {
    90.0: cv2.ROTATE_90_CLOCKWISE,
    180.0: cv2.ROTATE_180,
    270.0: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def channels(image: MatLike) -> int:
    """
    Get the number of channels of an image.

    Args:
        image (MatLike): Image to inspect.

    Returns:
        int: 1 for grayscale, 3 for BGR, 4 for BGRA.
    """
    return 1 if image.ndim == 2 else image.shape[2]


def dimensions(image: MatLike) -> Dimensions:
    """
    Get the pixel dimensions of an image.

    Args:
        image (MatLike): Image to inspect.

    Returns:
        Dimensions: Width and height.
    """
    height, width = image.shape[:2]
    return Dimensions(width=width, height=height)


def decode_image(data: bytes) -> MatLike:
    """
    Decode image bytes into an 8-bit BGR, BGRA or grayscale array.

    Args:
        data (bytes): Encoded image.

    Returns:
        MatLike: Decoded image.

    Raises:
        DecodeError: If the bytes are not a decodable image.
    """
    nparr = np.frombuffer(buffer=data, dtype=np.uint8)
    try:
        image = cv2.imdecode(buf=nparr, flags=cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise DecodeError("Source image could not be decoded") from e
    if image is None:
        raise DecodeError("Source image could not be decoded")

    if image.dtype != np.uint8:
        if np.issubdtype(image.dtype, np.integer):
            scale = 255.0 / np.iinfo(image.dtype).max
            image = cv2.convertScaleAbs(src=image, alpha=scale)
        else:
            image = np.clip(image * 255.0, 0, 255).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    return image


def crop(image: MatLike, box: CropBox) -> MatLike:
    """
    Extract a rectangle from an image.

    Args:
        image (MatLike): Source image.
        box (CropBox): Rectangle inside the image.

    Returns:
        MatLike: The extracted region.
    """
    return image[box.y : box.y + box.height, box.x : box.x + box.width]


def resize(image: MatLike, size: Dimensions) -> MatLike:
    """
    Scale an image to exact dimensions.

    Args:
        image (MatLike): Image to scale.
        size (Dimensions): Target dimensions.

    Returns:
        MatLike: The scaled image, or the input if it already has that size.
    """
    current = dimensions(image)
    if current == size:
        return image
    shrinking = size.width <= current.width and size.height <= current.height
    return cv2.resize(
        src=image,
        dsize=(size.width, size.height),
        interpolation=cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC,
    )


def mirror(image: MatLike) -> MatLike:
    """Flip an image horizontally."""
    return cv2.flip(src=image, flipCode=1)


def add_alpha(image: MatLike) -> MatLike:
    """
    Convert an image to BGRA.

    Args:
        image (MatLike): Grayscale, BGR or BGRA image.

    Returns:
        MatLike: Four channel image, fully opaque where alpha was missing.
    """
    count = channels(image)
    if count == 1:
        return cv2.cvtColor(src=image, code=cv2.COLOR_GRAY2BGRA)
    if count == 3:
        return cv2.cvtColor(src=image, code=cv2.COLOR_BGR2BGRA)
    return image


def _fill_value(image: MatLike, background: tuple[int, int, int]) -> tuple[int, ...]:
    """
    Get the border value matching an image's channel layout.

    Args:
        image (MatLike): Image being rotated.
        background (tuple[int, int, int]): RGB background color.

    Returns:
        tuple[int, ...]: Border value for cv2.warpAffine.
    """
    red, green, blue = background
    count = channels(image)
    if count == 1:
        return (round(0.299 * red + 0.587 * green + 0.114 * blue),)
    if count == 3:
        return blue, green, red
    return blue, green, red, 255


def rotate(
    image: MatLike,
    plan: RotationPlan,
    transparent: bool,
    background: tuple[int, int, int],
) -> MatLike:
    """
    Mirror and rotate an image clockwise.

    Multiples of 90 degrees are lossless transposes. Other angles are
    resampled onto the enlarged canvas described by the plan.

    Args:
        image (MatLike): Image to rotate.
        plan (RotationPlan): Resolved rotation.
        transparent (bool): Fill uncovered canvas with transparent pixels.
        background (tuple[int, int, int]): RGB fill when not transparent.

    Returns:
        MatLike: The rotated image.
    """
    if plan.mirror:
        image = mirror(image)

    if plan.axis_aligned:
        code = AXIS_ROTATE_CODES.get(plan.degrees)
        return image if code is None else cv2.rotate(src=image, rotateCode=code)

    if transparent:
        image = add_alpha(image)
        border: tuple[int, ...] = (0, 0, 0, 0)
    else:
        border = _fill_value(image, background)

    height, width = image.shape[:2]
    # OpenCV angles are counter-clockwise
    matrix = cv2.getRotationMatrix2D(
        center=(width / 2, height / 2), angle=-plan.degrees, scale=1.0
    )
    matrix[0, 2] += (plan.width - width) / 2
    matrix[1, 2] += (plan.height - height) / 2

    return cv2.warpAffine(
        src=image,
        M=matrix,
        dsize=(plan.width, plan.height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=border,
    )


def apply_quality(image: MatLike, quality: Quality) -> MatLike:
    """
    Apply the requested color quality.

    Args:
        image (MatLike): Image to convert.
        quality (Quality): Requested quality.

    Returns:
        MatLike: Converted image. Gray and bitonal are single channel unless
            the input carries alpha, which is preserved.
    """
    if quality == Quality.DEFAULT:
        return image

    count = channels(image)
    if quality == Quality.COLOR:
        if count == 1:
            return cv2.cvtColor(src=image, code=cv2.COLOR_GRAY2BGR)
        return image

    alpha = None
    if count == 1:
        gray = image
    elif count == 4:
        gray = cv2.cvtColor(src=image, code=cv2.COLOR_BGRA2GRAY)
        alpha = image[:, :, 3]
    else:
        gray = cv2.cvtColor(src=image, code=cv2.COLOR_BGR2GRAY)

    if quality == Quality.BITONAL:
        _, gray = cv2.threshold(
            src=gray,
            thresh=BITONAL_THRESHOLD,
            maxval=255,
            type=cv2.THRESH_BINARY,
        )

    if alpha is not None:
        return cv2.merge([gray, gray, gray, alpha])
    return gray


def flatten(image: MatLike, background: tuple[int, int, int]) -> MatLike:
    """
    Composite a BGRA image onto a solid background.

    Args:
        image (MatLike): Image with alpha channel.
        background (tuple[int, int, int]): RGB background color.

    Returns:
        MatLike: Opaque BGR image.
    """
    red, green, blue = background
    alpha = image[:, :, 3:4].astype(np.float32) / 255.0
    color = image[:, :, :3].astype(np.float32)
    fill = np.array([blue, green, red], dtype=np.float32)
    blended = color * alpha + fill * (1.0 - alpha)
    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def is_format_available(format_: Format) -> bool:
    """
    Check whether the installed libraries can write a format.

    Args:
        format_ (Format): Output format.

    Returns:
        bool: True if an encoder exists.
    """
    if format_.uses_pillow:
        Image.init()
        return PILLOW_FORMATS[format_] in Image.SAVE
    return bool(cv2.haveImageWriter(f"output{format_.extension}"))


def _encode_params(format_: Format, settings: ImageSettings) -> list[int]:
    """
    Get OpenCV encoder parameters for a format.

    Args:
        format_ (Format): Output format.
        settings (ImageSettings): Image settings with encoder options.

    Returns:
        list[int]: Flat list of cv2.IMWRITE_* flag/value pairs.
    """
    if format_ == Format.JPG:
        return [cv2.IMWRITE_JPEG_QUALITY, settings.jpeg_quality]
    if format_ == Format.PNG:
        return [cv2.IMWRITE_PNG_COMPRESSION, settings.png_compression]
    if format_ == Format.WEBP:
        return [cv2.IMWRITE_WEBP_QUALITY, settings.webp_quality]
    return []


def _encode_with_pillow(image: MatLike, format_: Format) -> bytes:
    """
    Encode an opaque image with Pillow.

    Args:
        image (MatLike): Grayscale or BGR image.
        format_ (Format): GIF or PDF.

    Returns:
        bytes: Encoded image.

    Raises:
        EncodeError: If Pillow fails to write the image.
    """
    if channels(image) == 1:
        pil_image = Image.fromarray(image)
    else:
        pil_image = Image.fromarray(cv2.cvtColor(src=image, code=cv2.COLOR_BGR2RGB))

    options: dict[str, object] = {}
    if format_ == Format.PDF:
        options = {"resolution": 72.0, "creationDate": PDF_TIMESTAMP, "modDate": PDF_TIMESTAMP}

    buffer = io.BytesIO()
    try:
        pil_image.save(buffer, format=PILLOW_FORMATS[format_], **options)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode {format_} image") from e
    return buffer.getvalue()


def encode_image(image: MatLike, format_: Format, settings: ImageSettings) -> bytes:
    """
    Encode an image.

    Alpha is flattened onto the configured background for formats that
    cannot carry it.

    Args:
        image (MatLike): Image to encode.
        format_ (Format): Output format.
        settings (ImageSettings): Encoder options and background color.

    Returns:
        bytes: Encoded image.

    Raises:
        EncodeError: If the encoder fails.
    """
    if channels(image) == 4 and not format_.has_alpha:
        image = flatten(image, settings.background_rgb)

    if format_.uses_pillow:
        return _encode_with_pillow(image, format_)

    try:
        success, buffer = cv2.imencode(
            ext=format_.extension,
            img=image,
            params=_encode_params(format_, settings),
        )
    except cv2.error as e:
        raise EncodeError(f"Failed to encode {format_} image") from e
    if not success:
        raise EncodeError(f"Failed to encode {format_} image")
    return buffer.tobytes()
