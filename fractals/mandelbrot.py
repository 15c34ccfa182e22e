from dataclasses import dataclass

from fractals.base import Fractal, IterationResult, Divergent, Bounded
from fractals.validation import check_escape_limit

# Squared escape radius; comparing |z|^2 avoids a square root.
BAILOUT = 4.0


def escape_time(point: complex, limit: int) -> IterationResult:
    """
    Iterate z <- z*z + point from z = 0 at most `limit` times.
    Returns Divergent(n) as soon as |z|^2 > 4 after the n-th update,
    Bounded() if the orbit never leaves the disc.
    """
    check_escape_limit(limit)
    z = 0j
    for n in range(limit):
        z = z * z + point
        if z.real * z.real + z.imag * z.imag > BAILOUT:
            return Divergent(n)
    return Bounded()


@dataclass
class MandelbrotFractal(Fractal):
    name: str = "mandelbrot"

    def escape_time(self, point: complex, limit: int) -> IterationResult:
        return escape_time(point, limit)
