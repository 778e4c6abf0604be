import io
from typing import Optional

from photolab.errors import EncodeError, UnsupportedFormatError
from photolab.models import EncodedImage, RawPixelBuffer

# output format -> Pillow codec name
FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "tiff": "TIFF",
    "gif": "GIF",
}
ALIASES = {"jpg": "jpeg", "tif": "tiff"}
DEFAULT_QUALITY = 80


def resolve_format(name: Optional[str], default: str = "jpeg") -> str:
    """Canonical format name for ``name``.

    Missing or blank names fall back to ``default``; anything else outside
    the supported set raises UnsupportedFormatError.
    """
    key = (name or "").strip().lower()
    if not key:
        key = default.strip().lower()
    key = ALIASES.get(key, key)
    if key not in FORMATS:
        raise UnsupportedFormatError(f"unsupported output format: {name!r}")
    return key


def encode(buffer: RawPixelBuffer, fmt: Optional[str], quality: int = DEFAULT_QUALITY,
           default: str = "jpeg") -> EncodedImage:
    fmt = resolve_format(fmt, default)
    options = {"quality": quality} if fmt in ("jpeg", "webp") else {}
    out = io.BytesIO()
    try:
        buffer.to_image().save(out, format=FORMATS[fmt], **options)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"failed to encode {fmt}: {exc}") from exc
    return EncodedImage(format=fmt, data=out.getvalue())


def to_data_uri(encoded: EncodedImage) -> str:
    return encoded.to_data_uri()
