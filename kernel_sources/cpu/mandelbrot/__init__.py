# Importing the kernel modules registers them.
from kernel_sources.cpu.mandelbrot import band

__all__ = ["band"]
