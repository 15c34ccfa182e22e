import os
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Union
from abc import ABC, abstractmethod

from coloring.base import PixelType, U8
from utils.enums import BackendType


@dataclass(frozen=True)
class Viewport:
    """
    Rectangle of the complex plane mapped onto the pixel grid.
    Upper_left is the top-left corner of the image and lower_right the
    bottom-right one, so the imaginary part shrinks as rows grow.
    """
    upper_left: complex
    lower_right: complex

    @property
    def real_span(self) -> float:
        return self.lower_right.real - self.upper_left.real

    @property
    def imag_span(self) -> float:
        return self.upper_left.imag - self.lower_right.imag


@dataclass(frozen=True)
class Resolution:
    """
    Size of the resulting image in pixels.
    """
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


class PixelIndex(NamedTuple):
    column: int
    row: int


@dataclass(frozen=True)
class Divergent:
    """The orbit left the radius-2 disc after `count` + 1 updates."""
    count: int


@dataclass(frozen=True)
class Bounded:
    """The orbit stayed inside the radius-2 disc for the whole budget."""


IterationResult = Union[Divergent, Bounded]


@dataclass
class RenderSettings:
    """
    Holds the rendering settings for a fractal.
    Escape_limit is the iteration budget before a point counts as bounded.
    Worker_count is the number of bands rendered in parallel; None means
    one per available CPU.
    Pixel_type selects the intensity storage of the output buffer.
    """
    escape_limit: int = 255
    worker_count: Optional[int] = None
    pixel_type: PixelType = field(default=U8)
    backend: BackendType = BackendType.AUTO

    def resolved_workers(self) -> int:
        if self.worker_count is not None:
            return self.worker_count
        return max(1, os.cpu_count() or 1)


class Fractal(ABC):
    """
    An abstract base class for escape-time fractals.
    """
    name: str

    @abstractmethod
    def escape_time(self, point: complex, limit: int) -> IterationResult:
        ...
