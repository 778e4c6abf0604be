from typing import Optional

from photolab.models import EncodedImage
from photolab.services.decoder import decode_resized
from photolab.services.encoder import DEFAULT_QUALITY, encode

PREVIEW_MAX_WIDTH = 300


def generate_preview(data: bytes, fmt: Optional[str], max_width: int = PREVIEW_MAX_WIDTH,
                     quality: int = DEFAULT_QUALITY, default: str = "jpeg",
                     max_pixels: Optional[int] = None) -> EncodedImage:
    """Low-resolution rendition of ``data`` for quick feedback."""
    return encode(decode_resized(data, max_width, max_pixels), fmt, quality=quality, default=default)
