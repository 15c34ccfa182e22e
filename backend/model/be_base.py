from abc import ABC, abstractmethod
import numpy as np

from fractals.base import Fractal, Resolution, Viewport, RenderSettings
from rendering.bands import Band


class Backend(ABC):
    """
    A base class for band rendering backends.

    render_band() fills `out`, the writable view of the band's rows, and
    must not touch any other memory. Every pixel's value depends only on the
    full resolution, the full viewport and its global pixel index.
    """
    name: str

    @abstractmethod
    def compile(self,
                fractal: Fractal,
                settings: RenderSettings
                ) -> None:
        ...

    @abstractmethod
    def render_band(self,
                    fractal: Fractal,
                    resolution: Resolution,
                    viewport: Viewport,
                    band: Band,
                    settings: RenderSettings,
                    out: np.ndarray
                    ) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
