from __future__ import annotations
import math
import numbers
import sys
from typing import List, Optional

from fractals.base import Resolution, Viewport, RenderSettings


class PreconditionError(ValueError):
    """Aggregated render request validation error(s)."""


def _is_int(value) -> bool:
    # numpy integer scalars register as Integral; bools do not count.
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_escape_limit(limit: int) -> None:
    if not _is_int(limit) or limit <= 0:
        raise PreconditionError(f"escape_limit must be a positive integer, got {limit!r}.")


def check_pixel_count(width: int, height: int) -> None:
    """
    Raises PreconditionError if a width x height buffer cannot be addressed.
    """
    if width < 0 or height < 0:
        raise PreconditionError(f"Buffer size {width}x{height} has a negative dimension.")
    if width and height and width > sys.maxsize // height:
        raise PreconditionError(f"Buffer size {width}x{height} overflows the index range.")


def validate_render_request(
    resolution: Resolution,
    viewport: Viewport,
    settings: Optional[RenderSettings] = None,
) -> None:
    """
    Validates a render request before any partitioning happens.
    Raises PreconditionError listing every problem found.
    """
    errors: List[str] = []

    # --- resolution ---
    for name in ("width", "height"):
        value = getattr(resolution, name)
        if not _is_int(value):
            errors.append(f"Resolution {name} must be an int, got {type(value).__name__}.")
        elif value < 0:
            errors.append(f"Resolution {name} must be >= 0, got {value}.")
    if not errors:
        try:
            check_pixel_count(resolution.width, resolution.height)
        except PreconditionError as e:
            errors.append(str(e))

    # --- viewport ---
    ul, lr = complex(viewport.upper_left), complex(viewport.lower_right)
    if not all(math.isfinite(v) for v in (ul.real, ul.imag, lr.real, lr.imag)):
        errors.append(f"Viewport corners must be finite, got {ul} and {lr}.")
    else:
        if not ul.real < lr.real:
            errors.append(
                f"Viewport upper-left real part {ul.real} must be less than "
                f"lower-right real part {lr.real}.")
        if not ul.imag > lr.imag:
            errors.append(
                f"Viewport upper-left imaginary part {ul.imag} must be greater than "
                f"lower-right imaginary part {lr.imag}.")

    # --- settings ---
    if settings is not None:
        limit = settings.escape_limit
        if not _is_int(limit) or limit <= 0:
            errors.append(f"escape_limit must be a positive integer, got {limit!r}.")
        workers = settings.worker_count
        if workers is not None and (not _is_int(workers) or workers <= 0):
            errors.append(f"worker_count must be a positive integer, got {workers!r}.")

    if errors:
        raise PreconditionError("Render request validation failed:\n- " + "\n- ".join(errors))
