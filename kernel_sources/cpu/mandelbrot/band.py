from numba import njit

from kernel_sources.registry import register_kernel


ARG_ORDER = [
    "ul_re", "ul_im", "lr_re", "lr_im",
    "width", "height", "top",
    "max_iter", "bailout",
    "default", "lut",
    "out",
]


# No fastmath: results must match the pure-Python path bit for bit.
# lut[n] is the pixel value for a point that escapes at iteration n.
@njit(cache=True, nogil=True)
def _mandelbrot_band(ul_re, ul_im, lr_re, lr_im,
                     width, height, top,
                     max_iter, bailout,
                     default, lut,
                     out):
    H, W = out.shape
    for y in range(H):
        row = top + y
        ci = ul_im - row * (ul_im - lr_im) / height
        for x in range(W):
            cr = ul_re + x * (lr_re - ul_re) / width

            zr = 0.0
            zi = 0.0
            value = default
            for n in range(max_iter):
                zr2 = zr * zr - zi * zi + cr
                zi2 = (zr * zi + zi * zr) + ci
                zr, zi = zr2, zi2
                if zr * zr + zi * zi > bailout:
                    value = lut[n]
                    break

            out[y, x] = value


register_kernel(
    fractal="mandelbrot",
    op_name="band",
    backend="CPU",
    precision="f64",
    func=_mandelbrot_band,
    arg_order=ARG_ORDER,
)
