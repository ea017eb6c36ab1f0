"""Raster image probing backed by Pillow."""

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from core.models.errors import InvalidImageError

INVALID_IMAGE_MESSAGE = "Invalid image file"


@dataclass(frozen=True, slots=True)
class ImageDimensions:
    width: int
    height: int


def probe_image(file_data: bytes, *, include_detail: bool = False) -> ImageDimensions:
    """Read width and height from the image header without decoding pixels.

    Args:
        file_data: Raw uploaded bytes
        include_detail: Append the decoder message to the error (non-production)

    Raises:
        InvalidImageError: If the payload is not a decodable raster image
    """
    try:
        with Image.open(BytesIO(file_data)) as image:
            width, height = image.size
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
        SyntaxError,
    ) as exc:
        message = f"{INVALID_IMAGE_MESSAGE}: {exc}" if include_detail else INVALID_IMAGE_MESSAGE
        raise InvalidImageError(message=message) from exc

    return ImageDimensions(width=width, height=height)
