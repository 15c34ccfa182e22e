import logging
import time
import numpy as np
from typing import Any, Dict, Optional, Tuple

from coloring.base import PixelType
from coloring.intensity import to_intensity
from fractals.base import Divergent, Fractal, Resolution, Viewport, RenderSettings
from fractals.mandelbrot import BAILOUT
from backend.model.be_base import Backend
from kernel_sources.registry import load_kernel
from rendering.bands import Band

# Registers the CPU kernels.
import kernel_sources.cpu.mandelbrot  # noqa: F401

logger = logging.getLogger(__name__)


def intensity_table(pixel_type: PixelType, limit: int) -> np.ndarray:
    """
    Pixel value for every escape count in [0, limit), taken from the pixel
    type's own mapping so the kernel never re-derives it.
    """
    return np.array([to_intensity(Divergent(n), limit, pixel_type) for n in range(limit)],
                    dtype=pixel_type.dtype)


class CpuBackend(Backend):
    """
    Backend for numba-compiled CPU band rendering.
    Kernels are compiled with nogil=True so bands run in parallel threads.
    """
    name = "CPU"

    def __init__(self):
        self._kernel: Optional[Dict[str, Any]] = None
        self._fractal: Optional[Fractal] = None
        self._lut: Optional[np.ndarray] = None
        self._lut_key: Optional[Tuple[PixelType, int]] = None
        self._warmed_up = False

        # Warmup configuration
        self._wu_w, self._wu_h = 8, 8
        self._wu_bounds = (complex(-2.0, 1.5), complex(1.0, -1.5))
        self._wu_max_iter = 16

    def compile(self, fractal: Fractal, settings: RenderSettings) -> None:
        """
        Look up the band kernel for the fractal, build the intensity table for
        the settings and trigger numba compilation for the pixel type.
        """
        self._kernel = load_kernel(self.name, fractal.name, "band", "f64")
        self._fractal = fractal
        self._prepare_table(settings)
        self._warmup(settings)

    def _prepare_table(self, settings: RenderSettings) -> np.ndarray:
        key = (settings.pixel_type, settings.escape_limit)
        if self._lut is None or self._lut_key != key:
            self._lut = intensity_table(settings.pixel_type, settings.escape_limit)
            self._lut_key = key
        return self._lut

    def _launch(self, arg_map: Dict[str, Any]) -> None:
        self._kernel["func"](*(arg_map[name] for name in self._kernel["arg_order"]))

    def _warmup(self, settings: RenderSettings) -> None:
        if self._kernel is None:
            return
        t0 = time.perf_counter()
        pt = settings.pixel_type
        ul, lr = self._wu_bounds
        self._launch({
            "ul_re": ul.real, "ul_im": ul.imag, "lr_re": lr.real, "lr_im": lr.imag,
            "width": self._wu_w, "height": self._wu_h, "top": 0,
            "max_iter": self._wu_max_iter, "bailout": BAILOUT,
            "default": pt.default, "lut": intensity_table(pt, self._wu_max_iter),
            "out": np.zeros((self._wu_h, self._wu_w), dtype=pt.dtype),
        })
        if not self._warmed_up:
            logger.debug("CPU kernel warm-up for %s took %.2f ms",
                         pt.name, (time.perf_counter() - t0) * 1000.0)
        self._warmed_up = True

    def render_band(
            self,
            fractal: Fractal,
            resolution: Resolution,
            viewport: Viewport,
            band: Band,
            settings: RenderSettings,
            out: np.ndarray
    ) -> None:
        if self._kernel is None or self._fractal != fractal:
            raise RuntimeError("Backend has not been compiled for this fractal yet")
        ul, lr = viewport.upper_left, viewport.lower_right
        self._launch({
            "ul_re": ul.real, "ul_im": ul.imag, "lr_re": lr.real, "lr_im": lr.imag,
            "width": resolution.width, "height": resolution.height, "top": band.top,
            "max_iter": settings.escape_limit, "bailout": BAILOUT,
            "default": settings.pixel_type.default, "lut": self._prepare_table(settings),
            "out": out,
        })

    def close(self) -> None:
        self._kernel = None
        self._fractal = None
        self._lut = None
        self._lut_key = None
        self._warmed_up = False
