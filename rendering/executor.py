from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence

import numpy as np

from backend.model.be_base import Backend
from fractals.base import Fractal, Resolution, Viewport, RenderSettings
from rendering.bands import Band

logger = logging.getLogger(__name__)


class BandExecutor:
    """
    Fork/join execution of one worker per band.

    A fresh thread pool sized to the band count is created for every call
    and shut down before returning, so there is exactly one fork and one
    join per render. Each worker receives its band and the writable view of
    that band's rows only.
    """

    def __init__(self, telemetry: Optional[Callable[[str], None]] = None) -> None:
        self.log = telemetry or (lambda *_: None)

    def run(
        self,
        backend: Backend,
        fractal: Fractal,
        resolution: Resolution,
        viewport: Viewport,
        settings: RenderSettings,
        bands: Sequence[Band],
        views: Sequence[np.ndarray],
    ) -> None:
        if len(bands) != len(views):
            raise ValueError(f"Got {len(bands)} bands but {len(views)} buffer views.")
        if not bands:
            return

        t0 = time.perf_counter()

        def work(band: Band, out: np.ndarray) -> Band:
            t = time.perf_counter()
            backend.render_band(fractal, resolution, viewport, band, settings, out)
            logger.debug("Band %d (rows %d-%d) done in %.2f ms",
                         band.index, band.top, band.bottom - 1, (time.perf_counter() - t) * 1000.0)
            return band

        with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="band") as ex:
            futs = [ex.submit(work, band, out) for band, out in zip(bands, views)]
            done: List[Band] = []
            # Any worker exception is re-raised here; the pool still joins the rest on exit.
            for fut in as_completed(futs):
                done.append(fut.result())

        elapsed = (time.perf_counter() - t0) * 1000.0
        self.log(f"[BandExecutor] {len(done)} bands on {backend.name} in {elapsed:.2f} ms")
        logger.debug("Joined %d bands on %s in %.2f ms", len(done), backend.name, elapsed)
