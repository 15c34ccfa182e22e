from dataclasses import dataclass
from typing import Dict
import numpy as np


@dataclass(frozen=True)
class PixelType:
    """
    Capability set of an unsigned integer pixel: its default (black) value,
    its maximum (white) value and the conversion from an escape count.
    """
    name: str
    dtype: np.dtype

    @property
    def default(self) -> int:
        return 0

    @property
    def max_value(self) -> int:
        return int(np.iinfo(self.dtype).max)

    @property
    def bits(self) -> int:
        return int(np.iinfo(self.dtype).bits)

    def from_count(self, count: int, limit: int) -> int:
        """
        Linearly remap an escape count in [0, limit) onto [0, max_value).
        Identity when max_value == limit.
        """
        return count * self.max_value // limit


U8 = PixelType("u8", np.dtype(np.uint8))
U16 = PixelType("u16", np.dtype(np.uint16))
U32 = PixelType("u32", np.dtype(np.uint32))

PIXEL_TYPES: Dict[str, PixelType] = {pt.name: pt for pt in (U8, U16, U32)}


def pixel_type_for_depth(bits: int) -> PixelType:
    for pt in PIXEL_TYPES.values():
        if pt.bits == bits:
            return pt
    raise ValueError(f"Unsupported pixel depth: {bits} bits")
