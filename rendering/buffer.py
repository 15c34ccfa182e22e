from __future__ import annotations

from typing import List, Sequence, Tuple
import numpy as np

from coloring.base import PixelType, U8
from fractals.validation import check_pixel_count


class ImageBuffer:
    """
    Row-major single-channel pixel buffer.

    Writable band views are only handed out through split_rows(), which
    refuses any set of row ranges that is not an exact, ordered partition of
    the image, so no two views can alias a row. After freeze() the backing
    array is read-only and may be handed to an encoder.
    """

    def __init__(self, data: np.ndarray, pixel_type: PixelType) -> None:
        if data.ndim != 2 or data.dtype != pixel_type.dtype:
            raise ValueError(f"Expected a 2D {pixel_type.dtype} array, got {data.ndim}D {data.dtype}.")
        self._data = data
        self.pixel_type = pixel_type

    @classmethod
    def new(cls, width: int, height: int, pixel_type: PixelType = U8) -> "ImageBuffer":
        check_pixel_count(width, height)
        return cls(np.zeros((height, width), dtype=pixel_type.dtype), pixel_type)

    # ---- Shape ----------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def __len__(self) -> int:
        return int(self._data.size)

    @property
    def frozen(self) -> bool:
        return not self._data.flags.writeable

    # ---- Access ---------------------------------------------------------

    def row(self, i: int) -> np.ndarray:
        """View of the `width` pixels of row i. Negative indices are not wrapped."""
        if not 0 <= i < self.height:
            raise IndexError(f"Row {i} out of range for height {self.height}.")
        return self._data[i]

    def __getitem__(self, index: Tuple[int, int]) -> int:
        column, row = index
        if not 0 <= column < self.width:
            raise IndexError(f"Column {column} out of range for width {self.width}.")
        return int(self.row(row)[column])

    @property
    def pixels(self) -> np.ndarray:
        """Flat row-major view, as expected by image encoders."""
        return self._data.reshape(-1)

    def as_array(self) -> np.ndarray:
        return self._data

    def tobytes(self) -> bytes:
        return self._data.tobytes()

    # ---- Partitioning ---------------------------------------------------

    def split_rows(self, bounds: Sequence[Tuple[int, int]]) -> List[np.ndarray]:
        """
        Split the buffer into one writable view per (top, height) row range.
        Ranges must be non-empty, in order, gapless and cover every row.
        """
        if self.frozen:
            raise RuntimeError("Cannot split a frozen ImageBuffer.")
        views: List[np.ndarray] = []
        expected_top = 0
        for top, height in bounds:
            if top != expected_top or height <= 0:
                raise ValueError(
                    f"Row range ({top}, {height}) does not continue the partition at row {expected_top}.")
            views.append(self._data[top:top + height])
            expected_top = top + height
        if expected_top != self.height:
            raise ValueError(f"Row ranges cover {expected_top} rows, buffer has {self.height}.")
        return views

    def freeze(self) -> "ImageBuffer":
        self._data.flags.writeable = False
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageBuffer):
            return NotImplemented
        return self.pixel_type == other.pixel_type and np.array_equal(self._data, other._data)

    def __repr__(self) -> str:
        return f"ImageBuffer({self.width}x{self.height}, {self.pixel_type.name}, frozen={self.frozen})"
