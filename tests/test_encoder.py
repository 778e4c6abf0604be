import base64
import io

import pytest
from PIL import Image

from photolab.errors import EncodeError, UnsupportedFormatError
from photolab.models import EncodedImage
from photolab.services import encoder
from photolab.services.encoder import encode, resolve_format, to_data_uri
from photolab.services.preview import generate_preview

from conftest import make_buffer, make_image_bytes


# ── resolve_format ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("name,expected", [
    (None, "jpeg"),
    ("", "jpeg"),
    ("   ", "jpeg"),
    ("png", "png"),
    ("PNG", "png"),
    ("jpg", "jpeg"),
    (" WebP ", "webp"),
    ("tif", "tiff"),
    ("gif", "gif"),
])
def test_resolve_format(name, expected):
    assert resolve_format(name) == expected


def test_resolve_format_custom_default():
    assert resolve_format(None, default="png") == "png"


@pytest.mark.parametrize("name", ["bmp", "svg", "jpeg2000", "../png"])
def test_resolve_format_rejects_unknown(name):
    with pytest.raises(UnsupportedFormatError):
        resolve_format(name)


# ── encode ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("fmt,pil_name", [
    ("jpeg", "JPEG"),
    ("png", "PNG"),
    ("webp", "WEBP"),
    ("tiff", "TIFF"),
    ("gif", "GIF"),
])
def test_encode_formats(fmt, pil_name):
    buf = make_buffer([[(10, 200, 30)] * 6] * 4)
    out = encode(buf, fmt)
    assert out.format == fmt
    img = Image.open(io.BytesIO(out.data))
    assert img.format == pil_name
    assert img.size == (6, 4)


def test_encode_png_is_lossless():
    buf = make_buffer([[(1, 2, 3), (250, 128, 0)]])
    out = encode(buf, "png")
    assert Image.open(io.BytesIO(out.data)).convert("RGB").tobytes() == buf.data


def test_encode_missing_format_uses_default():
    assert encode(make_buffer([[(0, 0, 0)]]), None).format == "jpeg"
    assert encode(make_buffer([[(0, 0, 0)]]), None, default="png").format == "png"


def test_encode_unknown_format():
    with pytest.raises(UnsupportedFormatError):
        encode(make_buffer([[(0, 0, 0)]]), "bmp")


def test_encode_codec_failure(monkeypatch):
    monkeypatch.setitem(encoder.FORMATS, "png", "NOT-A-CODEC")
    with pytest.raises(EncodeError):
        encode(make_buffer([[(0, 0, 0)]]), "png")


def test_jpeg_quality_changes_size():
    noisy = make_buffer([[((x * 37) % 256, (y * 91) % 256, (x * y) % 256) for x in range(64)] for y in range(64)])
    assert len(encode(noisy, "jpeg", quality=95).data) > len(encode(noisy, "jpeg", quality=10).data)


# ── data URI ─────────────────────────────────────────────────────────────────

def test_data_uri():
    encoded = EncodedImage(format="png", data=b"\x00\x01binary")
    uri = to_data_uri(encoded)
    assert uri.startswith("data:image/png;base64,")
    assert base64.b64decode(uri.split(",", 1)[1]) == b"\x00\x01binary"


# ── preview ──────────────────────────────────────────────────────────────────

def test_preview_is_downscaled():
    preview = generate_preview(make_image_bytes(width=900, height=600), "png")
    img = Image.open(io.BytesIO(preview.data))
    assert img.size == (300, 200)
    assert preview.format == "png"


def test_preview_custom_width():
    preview = generate_preview(make_image_bytes(width=900, height=600), None, max_width=90)
    img = Image.open(io.BytesIO(preview.data))
    assert img.size == (90, 60)
    assert img.format == "JPEG"
