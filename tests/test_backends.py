from dataclasses import dataclass

import numpy as np
import pytest

from backend.model.be_cpu import CpuBackend, intensity_table
from backend.model.be_python import PythonBackend
from backend.pool import BackendPool
from coloring.base import PixelType, U8, U16
from fractals.base import Resolution, Viewport, RenderSettings, PixelIndex
from fractals.mandelbrot import MandelbrotFractal
from coloring.intensity import to_intensity
from kernel_sources.registry import load_kernel, list_kernels
from rendering.bands import partition
from rendering.core import render
from utils.coords import pixel_to_point
from utils.enums import BackendType


@pytest.mark.parametrize("pixel_type", [U8, U16], ids=lambda p: p.name)
@pytest.mark.parametrize("vp", [
    Viewport(complex(-2.0, 1.2), complex(0.8, -1.2)),
    Viewport(complex(-1.20, 0.35), complex(-1.0, 0.20)),
    Viewport(complex(-0.75, 0.11), complex(-0.74, 0.10)),
], ids=["overview", "seahorse", "deep"])
def test_numba_matches_the_reference_backend(vp, pixel_type):
    res = Resolution(40, 30)
    images = [
        render(res, vp, RenderSettings(escape_limit=255, worker_count=3,
                                       pixel_type=pixel_type, backend=b))
        for b in (BackendType.PYTHON, BackendType.CPU)
    ]
    assert np.array_equal(images[0].as_array(), images[1].as_array())


@pytest.mark.parametrize("be_cls", [PythonBackend, CpuBackend])
def test_backend_writes_only_its_band(be_cls):
    fractal = MandelbrotFractal()
    settings = RenderSettings(escape_limit=64)
    res = Resolution(12, 9)
    vp = Viewport(complex(-2.0, 1.0), complex(1.0, -1.0))
    band = partition(res, vp, 3)[1]
    canvas = np.full((res.height, res.width), 77, dtype=np.uint8)
    with be_cls() as be:
        be.compile(fractal, settings)
        be.render_band(fractal, res, vp, band, settings, canvas[band.top:band.bottom])
    untouched = np.concatenate([canvas[:band.top], canvas[band.bottom:]])
    assert (untouched == 77).all()
    for column in range(res.width):
        point = pixel_to_point(res, PixelIndex(column, band.top), vp)
        expected = to_intensity(fractal.escape_time(point, 64), 64)
        assert canvas[band.top, column] == expected


def test_cpu_backend_requires_compile():
    be = CpuBackend()
    res = Resolution(2, 2)
    vp = Viewport(-1 + 1j, 1 - 1j)
    band = partition(res, vp, 1)[0]
    with pytest.raises(RuntimeError):
        be.render_band(MandelbrotFractal(), res, vp, band, RenderSettings(),
                       np.zeros((2, 2), dtype=np.uint8))


def test_band_kernel_is_registered():
    import kernel_sources.cpu.mandelbrot  # noqa: F401
    meta = load_kernel("cpu", "mandelbrot", "band", "f64")
    assert callable(meta["func"])
    assert meta["arg_order"][-1] == "out"
    assert {"default", "lut"} <= set(meta["arg_order"])
    assert list_kernels("mandelbrot", "CPU", "f64") == ["band"]
    with pytest.raises(KeyError):
        load_kernel("CPU", "julia", "band", "f64")


def test_pool_resolves_auto_to_numba_and_caches():
    pool = BackendPool()
    fractal = MandelbrotFractal()
    settings = RenderSettings()
    assert pool.resolve(BackendType.AUTO) == "CPU"
    assert pool.resolve(BackendType.PYTHON) == "PYTHON"
    be = pool.get(BackendType.PYTHON, fractal, settings)
    assert isinstance(be, PythonBackend)
    assert pool.get(BackendType.PYTHON, fractal, settings) is be
    pool.close_all()
    assert pool.get(BackendType.PYTHON, fractal, settings) is not be


@dataclass(frozen=True)
class Stepped8(PixelType):
    """Brightness falls in steps of four per iteration, then saturates."""

    @property
    def default(self) -> int:
        return 7

    def from_count(self, count: int, limit: int) -> int:
        return min(self.max_value, count * 4)


STEPPED8 = Stepped8("stepped8", np.dtype(np.uint8))


@pytest.mark.parametrize("limit", [50, 255, 1000])
def test_backends_agree_on_a_custom_pixel_type(limit):
    res = Resolution(24, 16)
    vp = Viewport(complex(-2.0, 1.2), complex(0.8, -1.2))
    images = [
        render(res, vp, RenderSettings(escape_limit=limit, worker_count=3,
                                       pixel_type=STEPPED8, backend=b))
        for b in (BackendType.PYTHON, BackendType.AUTO)
    ]
    assert np.array_equal(images[0].as_array(), images[1].as_array())
    # The origin never escapes, so it takes the custom default.
    assert 7 in images[1].as_array()


def test_intensity_table_follows_the_pixel_type():
    table = intensity_table(STEPPED8, 100)
    assert table.dtype == np.uint8
    assert table.shape == (100,)
    assert table[0] == 255
    assert table[10] == 215
    assert table[99] == 0
    assert np.array_equal(intensity_table(U8, 255), np.arange(255, 0, -1, dtype=np.uint8))


def test_cpu_backend_rebuilds_its_table_when_the_settings_change():
    fractal = MandelbrotFractal()
    res = Resolution(8, 6)
    vp = Viewport(complex(-2.0, 1.0), complex(1.0, -1.0))
    band = partition(res, vp, 1)[0]
    first = RenderSettings(escape_limit=20)
    second = RenderSettings(escape_limit=20, pixel_type=STEPPED8)
    with CpuBackend() as be:
        be.compile(fractal, first)
        out = np.zeros((res.height, res.width), dtype=np.uint8)
        be.render_band(fractal, res, vp, band, second, out)
    with PythonBackend() as ref:
        ref.compile(fractal, second)
        expected = np.zeros_like(out)
        ref.render_band(fractal, res, vp, band, second, expected)
    assert np.array_equal(out, expected)
