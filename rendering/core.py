from __future__ import annotations

import logging
import time
from typing import List, Optional

from backend.pool import BackendPool
from fractals.base import Fractal, Resolution, Viewport, RenderSettings
from fractals.mandelbrot import MandelbrotFractal
from fractals.validation import validate_render_request
from rendering.bands import Band, partition
from rendering.buffer import ImageBuffer
from rendering.executor import BandExecutor
from utils.enums import RenderState

logger = logging.getLogger(__name__)


class ParallelRenderer:

    """
    Facade that binds together:
      - the fractal + render settings,
      - the band partitioning,
      - the backend pool and the fork/join executor.

    Each render() walks UNRENDERED -> PARTITIONED -> RENDERING -> COMPLETE
    and only returns once every band has been joined; the returned buffer
    is frozen.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        *,
        fractal: Optional[Fractal] = None,
        pool: Optional[BackendPool] = None,
        executor: Optional[BandExecutor] = None,
    ):
        # Core state
        self.fractal = fractal or MandelbrotFractal()
        self.settings = settings or RenderSettings()

        # Execution & resource ownership
        self.pool = pool or BackendPool()
        self.executor = executor or BandExecutor()

        self.state = RenderState.UNRENDERED
        self.bands: List[Band] = []

    # ----------------------------
    # Mutators / helpers
    # ----------------------------

    def configure(self, settings: RenderSettings) -> None:
        """Swap settings for future renders."""
        self.settings = settings

    def close(self) -> None:
        self.pool.close_all()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ----------------------------
    # Render entry point
    # ----------------------------

    def render(self, resolution: Resolution, viewport: Viewport) -> ImageBuffer:
        settings = self.settings
        validate_render_request(resolution, viewport, settings)

        self.state = RenderState.UNRENDERED
        self.bands = []
        buffer = ImageBuffer.new(resolution.width, resolution.height, settings.pixel_type)
        if resolution.is_empty:
            logger.debug("Empty resolution %dx%d, nothing to render",
                         resolution.width, resolution.height)
            self.state = RenderState.COMPLETE
            return buffer.freeze()

        t0 = time.perf_counter()
        workers = settings.resolved_workers()
        self.bands = partition(resolution, viewport, workers)
        views = buffer.split_rows([(b.top, b.height) for b in self.bands])
        self.state = RenderState.PARTITIONED
        logger.debug("Partitioned %d rows into %d bands for %d workers",
                     resolution.height, len(self.bands), workers)

        backend = self.pool.get(settings.backend, self.fractal, settings)
        self.state = RenderState.RENDERING
        self.executor.run(backend, self.fractal, resolution, viewport,
                          settings, self.bands, views)
        del views

        buffer.freeze()
        self.state = RenderState.COMPLETE
        logger.info("Rendered %dx%d (limit %d) with %d bands on %s in %.3f s",
                    resolution.width, resolution.height, settings.escape_limit,
                    len(self.bands), backend.name, time.perf_counter() - t0)
        return buffer


def render(
    resolution: Resolution,
    viewport: Viewport,
    settings: Optional[RenderSettings] = None,
) -> ImageBuffer:
    """Render one image with a throwaway ParallelRenderer."""
    with ParallelRenderer(settings) as renderer:
        return renderer.render(resolution, viewport)
