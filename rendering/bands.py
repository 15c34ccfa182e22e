from __future__ import annotations

from dataclasses import dataclass
from typing import List

from fractals.base import Resolution, Viewport
from fractals.validation import PreconditionError
from utils.coords import band_viewport


@dataclass(frozen=True)
class Band:
    """
    Rows [top, top + height) of the image and the complex sub-rectangle
    they cover. Width is always the full image width.
    """
    index: int
    top: int
    height: int
    width: int
    viewport: Viewport

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def rows(self) -> range:
        return range(self.top, self.bottom)


def rows_per_band(height: int, parts: int) -> int:
    if parts <= 0:
        raise PreconditionError(f"Band count must be positive, got {parts}.")
    return -(-height // parts)


def partition(resolution: Resolution, viewport: Viewport, parts: int) -> List[Band]:
    """
    Stripe splitting along y: ceil(height / parts) rows per band, the last
    band takes the remainder. Fewer than `parts` bands come back when the
    image has fewer rows than that.
    """
    step = rows_per_band(resolution.height, parts)
    if resolution.is_empty:
        return []
    bands: List[Band] = []
    for i, top in enumerate(range(0, resolution.height, step)):
        h = min(step, resolution.height - top)
        bands.append(Band(i, top, h, resolution.width,
                          band_viewport(resolution, viewport, top, h)))
    return bands
