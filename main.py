"""
Render a grayscale Mandelbrot image.

Usage example:
  python main.py --workers 8 -v mandel.png 1000x750 -1.20,0.35 -1,0.20
"""

import argparse
import logging
import sys
from typing import List, Optional

from coloring.base import pixel_type_for_depth
from fractals.base import Resolution, Viewport, RenderSettings
from fractals.validation import PreconditionError
from rendering.core import ParallelRenderer
from utils.enums import BackendType
from utils.image_io import write_image
from utils.parsing import parse_pair, parse_complex

logger = logging.getLogger("mandelbrot")

EXIT_OK = 0
EXIT_FAILURE = 1


def _resolution(text: str) -> Resolution:
    try:
        width, height = parse_pair(text, "x", int)
    except ValueError:
        raise argparse.ArgumentTypeError(f"error parsing image dimensions {text!r}, expected WIDTHxHEIGHT")
    return Resolution(width, height)


def _point(text: str) -> complex:
    try:
        return parse_complex(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"error parsing complex point {text!r}, expected RE,IM")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandelbrot",
        description="Render a grayscale Mandelbrot image in parallel horizontal bands.")

    parser.add_argument("file", metavar="FILE",
                        help="output image path; the extension selects the format (e.g. .png)")
    parser.add_argument("pixels", metavar="PIXELS", type=_resolution,
                        help="image size as WIDTHxHEIGHT, e.g. 1000x750")
    parser.add_argument("upper_left", metavar="UPPERLEFT", type=_point,
                        help="upper-left corner as RE,IM, e.g. -1.20,0.35")
    parser.add_argument("lower_right", metavar="LOWERRIGHT", type=_point,
                        help="lower-right corner as RE,IM, e.g. -1,0.20")

    parser.add_argument("--workers", type=_positive_int, default=None, metavar="N",
                        help="number of bands rendered in parallel (default: CPU count)")
    parser.add_argument("--limit", type=_positive_int, default=255, metavar="N",
                        help="escape iteration limit (default: 255)")
    parser.add_argument("--depth", type=int, choices=(8, 16), default=8,
                        help="bits per pixel of the output image (default: 8)")
    parser.add_argument("--backend", choices=[b.name.lower() for b in BackendType], default="auto",
                        help="band renderer: numba 'cpu', reference 'python' or 'auto'")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log progress (-v) or per-band details (-vv)")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # numba's compiler logs are noisy at DEBUG.
    logging.getLogger("numba").setLevel(max(level, logging.WARNING))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(_protect_negative_points(argv if argv is not None else sys.argv[1:]))
    _configure_logging(args.verbose)

    settings = RenderSettings(
        escape_limit=args.limit,
        worker_count=args.workers,
        pixel_type=pixel_type_for_depth(args.depth),
        backend=BackendType[args.backend.upper()],
    )
    resolution = args.pixels
    viewport = Viewport(args.upper_left, args.lower_right)

    try:
        with ParallelRenderer(settings) as renderer:
            buffer = renderer.render(resolution, viewport)
    except PreconditionError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    if resolution.is_empty:
        logger.warning("Resolution %dx%d is empty, no image written", resolution.width, resolution.height)
        return EXIT_OK
    try:
        write_image(args.file, buffer)
    except (ValueError, OSError) as e:
        logger.error("Could not write %s: %s", args.file, e)
        return EXIT_FAILURE
    return EXIT_OK


_VALUE_OPTIONS = ("--workers", "--limit", "--depth", "--backend")


def _protect_negative_points(argv: List[str]) -> List[str]:
    """
    Move every option ahead of a "--" so that a point such as "-1.2,0.35"
    is read as a positional. Options may appear anywhere on the line.
    """
    options: List[str] = []
    positionals: List[str] = []
    rest: List[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            rest = list(argv[i + 1:])
            break
        if arg in _VALUE_OPTIONS:
            options.extend(argv[i:i + 2])
            i += 2
            continue
        if arg.startswith("-") and not _looks_numeric(arg):
            options.append(arg)
        else:
            positionals.append(arg)
        i += 1
    return options + ["--"] + positionals + rest


def _looks_numeric(arg: str) -> bool:
    return len(arg) > 1 and (arg[1].isdigit() or arg[1] == ".")


if __name__ == "__main__":
    sys.exit(main())
