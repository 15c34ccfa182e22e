import pytest

from fractals.base import Resolution, Viewport, PixelIndex
from fractals.validation import PreconditionError
from rendering.bands import partition, rows_per_band
from utils.coords import pixel_to_point

VP = Viewport(complex(-2.0, 1.0), complex(1.0, -1.0))


@pytest.mark.parametrize("height, parts, expected", [
    (10, 3, 4), (10, 5, 2), (10, 10, 1), (10, 20, 1), (1, 8, 1), (7, 1, 7),
])
def test_rows_per_band_rounds_up(height, parts, expected):
    assert rows_per_band(height, parts) == expected


def test_rows_per_band_rejects_zero_bands():
    with pytest.raises(PreconditionError):
        rows_per_band(10, 0)


def test_last_band_takes_the_remainder():
    bands = partition(Resolution(6, 10), VP, 3)
    assert [(b.top, b.height) for b in bands] == [(0, 4), (4, 4), (8, 2)]
    assert [b.index for b in bands] == [0, 1, 2]
    assert all(b.width == 6 for b in bands)


@pytest.mark.parametrize("height", [1, 2, 7, 48, 97])
@pytest.mark.parametrize("parts", [1, 2, 3, 8, 64])
def test_bands_cover_every_row_exactly_once(height, parts):
    bands = partition(Resolution(5, height), VP, parts)
    rows = [r for b in bands for r in b.rows]
    assert rows == list(range(height))
    assert len(bands) <= parts


def test_fewer_rows_than_workers_gives_one_row_bands():
    bands = partition(Resolution(4, 3), VP, 8)
    assert [(b.top, b.height) for b in bands] == [(0, 1), (1, 1), (2, 1)]


def test_band_viewport_matches_its_corner_pixels():
    res = Resolution(30, 20)
    for band in partition(res, VP, 4):
        assert band.viewport.upper_left == pixel_to_point(res, PixelIndex(0, band.top), VP)
        assert band.viewport.lower_right == pixel_to_point(res, PixelIndex(30, band.bottom), VP)


@pytest.mark.parametrize("res", [Resolution(0, 5), Resolution(5, 0), Resolution(0, 0)])
def test_empty_resolution_has_no_bands(res):
    assert partition(res, VP, 4) == []
