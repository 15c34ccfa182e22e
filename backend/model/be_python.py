import numpy as np

from fractals.base import Fractal, Resolution, Viewport, RenderSettings, PixelIndex
from backend.model.be_base import Backend
from coloring.intensity import to_intensity
from rendering.bands import Band
from utils.coords import pixel_to_point


class PythonBackend(Backend):
    """
    Reference backend: one pixel_to_point -> escape_time -> to_intensity
    chain per pixel, in plain Python. Holds the GIL, so bands rendered on
    separate threads do not overlap in time.
    """
    name = "PYTHON"

    def __init__(self):
        self._fractal = None

    def compile(self, fractal: Fractal, settings: RenderSettings) -> None:
        self._fractal = fractal

    def render_band(
            self,
            fractal: Fractal,
            resolution: Resolution,
            viewport: Viewport,
            band: Band,
            settings: RenderSettings,
            out: np.ndarray
    ) -> None:
        limit = settings.escape_limit
        pixel_type = settings.pixel_type
        for y, row in enumerate(band.rows):
            line = out[y]
            for column in range(band.width):
                point = pixel_to_point(resolution, PixelIndex(column, row), viewport)
                line[column] = to_intensity(fractal.escape_time(point, limit), limit, pixel_type)

    def close(self) -> None:
        self._fractal = None
