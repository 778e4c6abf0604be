import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from photolab.config import Settings
from photolab.main import create_app
from photolab.models import RawPixelBuffer


def make_image_bytes(width=100, height=100, color=(128, 64, 32), fmt="PNG", mode="RGB"):
    """Return encoded bytes of a uniform image."""
    img = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_buffer(pixels):
    """RawPixelBuffer from a nested [row][col] list of RGB tuples."""
    return RawPixelBuffer.from_array(np.array(pixels, dtype=np.uint8))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        UPLOAD_DIR=str(tmp_path / "uploads"),
        STATIC_DIR=str(tmp_path / "public"),
        PROCESS_MAX_CONCURRENCY=2,
        MAX_UPLOAD_BYTES=1024 * 1024,
        MAX_PIXELS=1_000_000,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
