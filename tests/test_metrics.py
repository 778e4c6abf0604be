import pytest

from photolab.errors import InvalidImageError
from photolab.models import RawPixelBuffer
from photolab.services import metrics
from photolab.services.metrics import compute_metrics

from conftest import make_buffer


@pytest.mark.parametrize("width,height", [(1, 1), (3, 2), (17, 9)])
def test_black_image(width, height):
    m = compute_metrics(make_buffer([[(0, 0, 0)] * width] * height))
    assert (m.brightness, m.contrast, m.saturation) == (0, 0, 0)


@pytest.mark.parametrize("width,height", [(1, 1), (4, 5)])
def test_white_image(width, height):
    m = compute_metrics(make_buffer([[(255, 255, 255)] * width] * height))
    assert (m.brightness, m.contrast, m.saturation) == (100, 0, 0)


def test_single_red_pixel():
    m = compute_metrics(make_buffer([[(255, 0, 0)]]))
    assert m.brightness == pytest.approx(33.33, abs=0.01)
    assert m.contrast == 100
    assert m.saturation == 100


def test_red_green_blue_black():
    m = compute_metrics(make_buffer([
        [(255, 0, 0), (0, 255, 0)],
        [(0, 0, 255), (0, 0, 0)],
    ]))
    # three pixels at brightness 85 plus one black: 255 / 4 / 255
    assert m.brightness == pytest.approx(25.0, abs=0.01)
    assert m.contrast == pytest.approx(75.0, abs=0.01)
    assert m.saturation == pytest.approx(75.0, abs=0.01)


def test_grey_has_no_saturation():
    m = compute_metrics(make_buffer([[(128, 128, 128)] * 3]))
    assert m.brightness == pytest.approx(50.2, abs=0.01)
    assert m.saturation == 0


def test_mild_colour_saturation_uncapped():
    # spread 60 over mean 120 -> 0.5
    m = compute_metrics(make_buffer([[(150, 120, 90)]]))
    assert m.brightness == pytest.approx(47.06, abs=0.01)
    assert m.contrast == pytest.approx(23.53, abs=0.01)
    assert m.saturation == pytest.approx(50.0, abs=0.01)


def test_values_are_rounded():
    m = compute_metrics(make_buffer([[(1, 2, 3)]]))
    for value in m.as_dict().values():
        assert round(value, 2) == value


def test_zero_pixels_rejected():
    with pytest.raises(InvalidImageError, match="zero pixel count"):
        compute_metrics(RawPixelBuffer(width=0, height=5, data=b""))


def test_chunked_reduction_matches_single_pass(monkeypatch):
    rows = [[((x * 31 + y) % 256, (x * 7) % 256, (y * 53) % 256) for x in range(13)] for y in range(11)]
    whole = compute_metrics(make_buffer(rows))
    monkeypatch.setattr(metrics, "CHUNK_PIXELS", 5)
    assert compute_metrics(make_buffer(rows)) == whole
