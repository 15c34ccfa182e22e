from fractals.base import IterationResult, Divergent
from coloring.base import PixelType, U8


def to_intensity(result: IterationResult, limit: int, pixel_type: PixelType = U8) -> int:
    """
    Bounded points are black (the pixel default). Divergent points get
    max_value - scale(n): the faster a point escapes, the brighter it is.
    """
    if isinstance(result, Divergent):
        return pixel_type.max_value - pixel_type.from_count(result.count, limit)
    return pixel_type.default
