import io
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from photolab.errors import DecodeError, InvalidImageError
from photolab.models import RawPixelBuffer

_SIXTEEN_BIT_MODES = {"I;16", "I;16B", "I;16L", "I;16N", "I"}


def _canonical_rgb(image: Image.Image) -> Image.Image:
    """Reduce any decoded mode to 8-bit RGB with alpha dropped."""
    if image.mode == "RGB":
        return image
    if image.mode in _SIXTEEN_BIT_MODES:
        # keep the high byte
        arr = np.clip(np.asarray(image), 0, 65535).astype(np.uint16) >> 8
        image = Image.fromarray(arr.astype(np.uint8))
    elif image.mode == "F":
        image = Image.fromarray(np.clip(np.asarray(image), 0, 255).astype(np.uint8))
    elif image.mode == "PA":
        image = image.convert("RGBA")
    return image.convert("RGB")


def _open(data: bytes, max_pixels: Optional[int] = None) -> Image.Image:
    if not data:
        raise DecodeError("empty image payload")
    try:
        image = Image.open(io.BytesIO(data))
        if image.width == 0 or image.height == 0:
            raise InvalidImageError("zero pixel count")
        # header only so far; refuse before any pixel memory is allocated
        if max_pixels is not None and image.width * image.height > max_pixels:
            raise InvalidImageError(
                f"image is {image.width}x{image.height}, more than {max_pixels} pixels"
            )
        image.load()
    except UnidentifiedImageError as exc:
        raise DecodeError("bytes are not a recognized image") from exc
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"corrupt image data: {exc}") from exc
    return _canonical_rgb(image)


def decode(data: bytes, max_pixels: Optional[int] = None) -> RawPixelBuffer:
    return RawPixelBuffer.from_image(_open(data, max_pixels))


def decode_resized(data: bytes, max_width: int, max_pixels: Optional[int] = None) -> RawPixelBuffer:
    """Decode and shrink to at most ``max_width`` pixels wide, keeping aspect ratio.

    Images already narrow enough are returned at full size; nothing is upscaled.
    """
    if max_width <= 0:
        raise ValueError("max_width must be positive")
    image = _open(data, max_pixels)
    if image.width > max_width:
        height = max(1, round(image.height * max_width / image.width))
        image = image.resize((max_width, height), Image.Resampling.LANCZOS)
    return RawPixelBuffer.from_image(image)
