"""
Perceptual summary statistics over a decoded RGB buffer.

Per pixel:
    brightness = (R + G + B) / 3
    contrast   = max(R, G, B) - min(R, G, B)
    saturation = contrast / brightness, capped at 1 (0 for black pixels)

Averages are scaled to 0-100 and rounded to two decimals.
"""
import numpy as np

from photolab.errors import InvalidImageError
from photolab.models import ImageMetrics, RawPixelBuffer

# pixels reduced per step; bounds the temporary arrays to a few MB
CHUNK_PIXELS = 1 << 18


def compute_metrics(buffer: RawPixelBuffer) -> ImageMetrics:
    n = buffer.pixel_count
    if n <= 0:
        raise InvalidImageError("zero pixel count")

    pixels = buffer.to_array().reshape(-1, 3)
    total_sum = 0
    spread_sum = 0
    saturation_sum = 0.0
    for start in range(0, n, CHUNK_PIXELS):
        chunk = pixels[start:start + CHUNK_PIXELS]
        total = chunk.sum(axis=1, dtype=np.int32)
        spread = chunk.max(axis=1).astype(np.int32) - chunk.min(axis=1)

        # spread / (total / 3), zero where the pixel is black
        saturation = np.zeros(len(chunk), dtype=np.float64)
        np.divide(spread * 3, total, out=saturation, where=total > 0)
        np.minimum(saturation, 1.0, out=saturation)

        total_sum += int(total.sum(dtype=np.int64))
        spread_sum += int(spread.sum(dtype=np.int64))
        saturation_sum += float(saturation.sum())

    avg_brightness = total_sum / 3.0 / n / 255.0 * 100.0
    avg_contrast = spread_sum / n / 255.0 * 100.0
    avg_saturation = saturation_sum / n * 100.0

    return ImageMetrics(
        brightness=round(avg_brightness, 2),
        contrast=round(avg_contrast, 2),
        saturation=round(avg_saturation, 2),
    )
