import cv2
import numpy as np
from PIL import Image

from photolab.config import logger
from photolab.models import AdjustmentParameters, RawPixelBuffer

ROTATION_FILL = (0, 0, 0)


def modulate(buffer: RawPixelBuffer, brightness: float, saturation: float) -> RawPixelBuffer:
    """Scale lightness and saturation in HLS space."""
    rgb = buffer.to_array().astype(np.float32) / 255.0
    hls = cv2.cvtColor(rgb, cv2.COLOR_RGB2HLS)
    hls[..., 1] = np.clip(hls[..., 1] * brightness, 0.0, 1.0)
    hls[..., 2] = np.clip(hls[..., 2] * saturation, 0.0, 1.0)
    out = cv2.cvtColor(hls, cv2.COLOR_HLS2RGB)
    return RawPixelBuffer.from_array(np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8))


def linear_contrast(buffer: RawPixelBuffer, factor: float) -> RawPixelBuffer:
    """Affine remap around mid-grey: ``v * factor + 255 * (0.5 - 0.5 * factor)``.

    Results are clipped to 0-255 and truncated toward zero when narrowed
    to 8 bits.
    """
    offset = -0.5 * factor + 0.5
    out = buffer.to_array().astype(np.float64) * factor + offset * 255.0
    return RawPixelBuffer.from_array(np.clip(out, 0, 255).astype(np.uint8))


def rotate(buffer: RawPixelBuffer, degrees: float) -> RawPixelBuffer:
    """Rotate clockwise, growing the canvas to fit; exposed corners are black."""
    rotated = buffer.to_image().rotate(
        -degrees,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=ROTATION_FILL,
    )
    return RawPixelBuffer.from_image(rotated)


def apply(buffer: RawPixelBuffer, params: AdjustmentParameters) -> RawPixelBuffer:
    """Run modulation, contrast, then rotation."""
    if params.is_neutral:
        return buffer
    out = buffer
    if params.brightness != 1.0 or params.saturation != 1.0:
        out = modulate(out, params.brightness, params.saturation)
    # exact comparison: only the bit-for-bit neutral factor skips the stretch
    if params.contrast != 1.0:
        out = linear_contrast(out, params.contrast)
    if params.rotation != 0.0:
        out = rotate(out, params.rotation)
    logger.debug(
        "[adjust] %dx%d -> %dx%d (b=%s s=%s c=%s r=%s)",
        buffer.width, buffer.height, out.width, out.height,
        params.brightness, params.saturation, params.contrast, params.rotation,
    )
    return out
