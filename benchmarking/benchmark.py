"""
Benchmark the banded renderer across backends and worker counts.
Every configuration must produce the same pixels; the run aborts otherwise.

Usage examples:
  python -m benchmarking.benchmark --backends cpu,python --res 400x300,800x600 \
      --workers 1,2,4,8 --limit 255 --runs 3 --csv results.csv
"""

import argparse
import csv
import logging
import os
import platform
import time
from typing import List, Tuple, Optional

import numpy as np

from fractals.base import Resolution, Viewport, RenderSettings
from rendering.core import ParallelRenderer
from utils.enums import BackendType
from utils.parsing import parse_pair

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = Viewport(complex(-2.0, 1.2), complex(0.8, -1.2))

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "800x600,1280x720".
    """
    if not res_str:
        return [(400, 300), (800, 600)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        out.append(parse_pair(token, "x", int))
    return out

def parse_int_list(text: str) -> List[int]:
    return [int(t) for t in text.split(',') if t.strip()]

def parse_backend_list(text: str) -> List[BackendType]:
    return [BackendType[t.strip().upper()] for t in text.split(',') if t.strip()]

# --- Benchmark core ----------------------------------------------------------

def time_render(renderer: ParallelRenderer, resolution: Resolution, viewport: Viewport,
                runs: int) -> Tuple[float, float, np.ndarray]:
    """
    Render `runs` times after one untimed warm-up render.
    Returns (mean ms, min ms, pixels of the last run).
    """
    buffer = renderer.render(resolution, viewport)
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        buffer = renderer.render(resolution, viewport)
        times.append((time.perf_counter() - t0) * 1000.0)
    return float(np.mean(times)), float(np.min(times)), buffer.as_array()

def run_benchmark(
    backends: List[BackendType],
    resolutions: List[Tuple[int, int]],
    workers: List[int],
    limit: int,
    runs: int,
    viewport: Viewport = DEFAULT_VIEWPORT,
) -> List[dict]:
    rows: List[dict] = []
    for w, h in resolutions:
        resolution = Resolution(w, h)
        reference: Optional[np.ndarray] = None
        for backend in backends:
            for n in workers:
                settings = RenderSettings(escape_limit=limit, worker_count=n, backend=backend)
                with ParallelRenderer(settings) as renderer:
                    mean_ms, min_ms, pixels = time_render(renderer, resolution, viewport, runs)
                if reference is None:
                    reference = pixels
                elif not np.array_equal(reference, pixels):
                    raise RuntimeError(
                        f"{backend.name} with {n} workers at {w}x{h} differs from the first configuration")
                rows.append({
                    "backend": backend.name,
                    "width": w,
                    "height": h,
                    "workers": n,
                    "limit": limit,
                    "mean_ms": round(mean_ms, 3),
                    "min_ms": round(min_ms, 3),
                    "mpix_per_s": round((w * h) / (min_ms * 1000.0), 3) if min_ms > 0 else float("inf"),
                })
                logger.info("%-6s %4dx%-4d workers=%-3d mean=%9.2f ms min=%9.2f ms",
                            backend.name, w, h, n, mean_ms, min_ms)
    return rows

def write_csv(path: str, rows: List[dict]) -> None:
    if not rows:
        return
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)

# --- CLI ---------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Benchmark banded Mandelbrot rendering")
    ap.add_argument("--backends", type=str, default="cpu",
                    help="comma list of backends: cpu,python")
    ap.add_argument("--res", type=str, default="",
                    help="comma list of WIDTHxHEIGHT resolutions")
    ap.add_argument("--workers", type=str, default=f"1,2,{os.cpu_count() or 1}",
                    help="comma list of worker counts")
    ap.add_argument("--limit", type=int, default=255)
    ap.add_argument("--runs", type=int, default=3)
    ap.add_argument("--csv", type=str, default=None, help="write results to this CSV file")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logging.getLogger("numba").setLevel(logging.WARNING)
    logger.info("CPU: %s (%s logical cores)", platform.processor() or platform.machine(), os.cpu_count())

    rows = run_benchmark(
        parse_backend_list(args.backends),
        parse_resolution_list(args.res),
        parse_int_list(args.workers),
        args.limit,
        max(1, args.runs),
    )
    if args.csv:
        write_csv(args.csv, rows)
        logger.info("Wrote %d rows to %s", len(rows), args.csv)


if __name__ == "__main__":
    main()
