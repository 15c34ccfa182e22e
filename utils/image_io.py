import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from rendering.buffer import ImageBuffer

logger = logging.getLogger(__name__)

# Pillow only encodes 8- and 16-bit single-channel images losslessly.
_SUPPORTED_BITS = (8, 16)


def to_image(buffer: ImageBuffer) -> Image.Image:
    bits = buffer.pixel_type.bits
    if bits not in _SUPPORTED_BITS:
        raise ValueError(f"Cannot encode {bits}-bit grayscale; use 8 or 16 bits.")
    return Image.fromarray(buffer.as_array().copy())


def write_image(path: Union[str, Path], buffer: ImageBuffer, image_format: Optional[str] = None) -> Path:
    """
    Encode a completed buffer as a grayscale image. The format follows the
    file extension unless image_format is given.
    """
    if not buffer.frozen:
        raise RuntimeError("Refusing to encode a buffer that is still being rendered.")
    if buffer.width == 0 or buffer.height == 0:
        raise ValueError(f"Cannot encode an empty {buffer.width}x{buffer.height} image.")
    path = Path(path)
    to_image(buffer).save(path, format=image_format)
    logger.info("Wrote %dx%d %s image to %s", buffer.width, buffer.height,
                buffer.pixel_type.name, path)
    return path
