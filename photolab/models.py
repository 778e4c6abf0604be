import base64
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
from PIL import Image

# Leading numeric prefix, so "1.5x" reads as 1.5 and "abc" reads as nothing.
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any, default: float) -> float:
    """Lenient float parse; anything unusable yields ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return default
        number = float(match.group(0))
    if not math.isfinite(number):
        return default
    return number


@dataclass(frozen=True)
class RawPixelBuffer:
    """Decoded 8-bit interleaved RGB pixels, row-major."""
    width: int
    height: int
    data: bytes
    channels: int = 3

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative dimensions {self.width}x{self.height}")
        if self.channels != 3:
            raise ValueError(f"expected 3 channels, got {self.channels}")
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(f"payload is {len(self.data)} bytes, expected {expected}")

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def to_array(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, self.channels)

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGB", (self.width, self.height), self.data)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "RawPixelBuffer":
        arr = np.ascontiguousarray(arr, dtype=np.uint8)
        height, width, channels = arr.shape
        return cls(width=width, height=height, data=arr.tobytes(), channels=channels)

    @classmethod
    def from_image(cls, image: Image.Image) -> "RawPixelBuffer":
        if image.mode != "RGB":
            raise ValueError(f"expected an RGB image, got {image.mode}")
        return cls(width=image.width, height=image.height, data=image.tobytes())


@dataclass(frozen=True)
class ImageMetrics:
    brightness: float
    contrast: float
    saturation: float

    def as_dict(self) -> dict:
        return {"brightness": self.brightness, "contrast": self.contrast, "saturation": self.saturation}


@dataclass(frozen=True)
class AdjustmentParameters:
    brightness: float = 1.0
    saturation: float = 1.0
    contrast: float = 1.0
    rotation: float = 0.0
    format: Optional[str] = None

    @classmethod
    def parse(cls, brightness: Any = None, saturation: Any = None, contrast: Any = None,
              rotation: Any = None, format: Any = None) -> "AdjustmentParameters":
        """Build parameters from loosely-typed request fields.

        Zero factors count as "not supplied". Negative brightness or
        saturation factors are meaningless for modulation and fall back to
        neutral; a negative contrast factor inverts around mid-grey and is kept.
        """
        b = parse_number(brightness, 1.0)
        s = parse_number(saturation, 1.0)
        c = parse_number(contrast, 1.0)
        # only strings name a format; JSON false/0/null mean "not supplied"
        fmt = format.strip() if isinstance(format, str) else ""
        return cls(
            brightness=b if b > 0 else 1.0,
            saturation=s if s > 0 else 1.0,
            contrast=c if c != 0 else 1.0,
            rotation=parse_number(rotation, 0.0),
            format=fmt or None,
        )

    @property
    def is_neutral(self) -> bool:
        return (self.brightness == 1.0 and self.saturation == 1.0
                and self.contrast == 1.0 and self.rotation == 0.0)


@dataclass(frozen=True)
class EncodedImage:
    format: str
    data: bytes

    @property
    def mime_type(self) -> str:
        return f"image/{self.format}"

    def to_data_uri(self) -> str:
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"
