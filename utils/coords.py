from fractals.base import Resolution, PixelIndex, Viewport


def pixel_to_point(resolution: Resolution, pixel: PixelIndex, viewport: Viewport) -> complex:
    """
    Map a pixel index to the complex point it samples. Column may equal the
    width and row may equal the height so that band corners can be mapped.
    Row 0 is the top of the image, i.e. the largest imaginary part.
    """
    column, row = pixel
    ul, lr = viewport.upper_left, viewport.lower_right
    re = ul.real + column * (lr.real - ul.real) / resolution.width
    im = ul.imag - row * (ul.imag - lr.imag) / resolution.height
    return complex(re, im)


def band_viewport(resolution: Resolution, viewport: Viewport, top: int, height: int) -> Viewport:
    """
    Maps the pixel rows (top..top+height) to their complex-plane sub-viewport.
    """
    ul = pixel_to_point(resolution, PixelIndex(0, top), viewport)
    lr = pixel_to_point(resolution, PixelIndex(resolution.width, top + height), viewport)
    return Viewport(ul, lr)
