from typing import Optional, Tuple

from photolab.models import AdjustmentParameters, EncodedImage, ImageMetrics
from photolab.services import adjustments
from photolab.services.decoder import decode
from photolab.services.encoder import DEFAULT_QUALITY, encode
from photolab.services.metrics import compute_metrics
from photolab.services.preview import PREVIEW_MAX_WIDTH, generate_preview


class ImageProcessor:
    """Upload analysis and adjusted rendering over raw image bytes.

    Holds only configuration, so one instance can serve every worker thread.
    """
    def __init__(self, default_format: str = "jpeg", preview_max_width: int = PREVIEW_MAX_WIDTH,
                 quality: int = DEFAULT_QUALITY, max_pixels: Optional[int] = None):
        self.default_format = default_format
        self.preview_max_width = preview_max_width
        self.quality = quality
        self.max_pixels = max_pixels

    def analyze(self, data: bytes, fmt: Optional[str] = None) -> Tuple[ImageMetrics, EncodedImage]:
        metrics = compute_metrics(decode(data, self.max_pixels))
        preview = generate_preview(data, fmt, max_width=self.preview_max_width, quality=self.quality,
                                   default=self.default_format, max_pixels=self.max_pixels)
        return metrics, preview

    def render(self, data: bytes, params: AdjustmentParameters) -> EncodedImage:
        buffer = adjustments.apply(decode(data, self.max_pixels), params)
        return encode(buffer, params.format, quality=self.quality, default=self.default_format)
