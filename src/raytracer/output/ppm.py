"""ASCII PPM (P3) image output.

The renderer emits plain-text PPM:

    P3
    <width> <height>
    255
    r g b
    r g b
    ...

followed by one "r g b" line per pixel in row-major order, top row first.

Example:
    >>> from src.raytracer.output.ppm import ppm_header, format_pixel
    >>> ppm_header(2, 1) + format_pixel(255, 0, 0) + format_pixel(0, 0, 255)
    'P3\\n2 1\\n255\\n255 0 0\\n0 0 255\\n'
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt

PPM_MAGIC = "P3"
MAX_COLOR_VALUE = 255


def ppm_header(width: int, height: int) -> str:
    """Return the P3 header for an image of the given size."""
    return f"{PPM_MAGIC}\n{width} {height}\n{MAX_COLOR_VALUE}\n"


def format_pixel(r: int, g: int, b: int) -> str:
    """Format one pixel as an "r g b" line."""
    return f"{int(r)} {int(g)} {int(b)}\n"


def write_pixels(out: TextIO, pixels: npt.NDArray[np.integer]) -> None:
    """Write a run of pixels (shape (N, 3)) to out, one line per pixel."""
    out.write("".join(format_pixel(r, g, b) for r, g, b in pixels.tolist()))


def write_ppm(out: TextIO, image: npt.NDArray[np.integer]) -> None:
    """Write a complete P3 image to out.

    Args:
        out: Text stream to write to.
        image: 8-bit RGB image of shape (height, width, 3).

    Raises:
        ValueError: If the array does not have shape (height, width, 3) or
            holds values outside [0, 255].
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {image.shape}")
    if image.size and (image.min() < 0 or image.max() > MAX_COLOR_VALUE):
        raise ValueError(f"Pixel values must be in [0, {MAX_COLOR_VALUE}]")

    height, width = image.shape[:2]
    out.write(ppm_header(width, height))
    for row in image:
        write_pixels(out, row)


def save_ppm(path: str | Path, text: str) -> None:
    """Write rendered PPM text to a file."""
    Path(path).write_text(text, encoding="ascii")


def parse_ppm(text: str) -> npt.NDArray[np.uint8]:
    """Parse P3 text back into an image array.

    Args:
        text: The PPM text, as produced by the renderer.

    Returns:
        Array of shape (height, width, 3), dtype uint8.

    Raises:
        ValueError: If the text is not a well-formed 8-bit P3 image.
    """
    tokens = text.split()
    if len(tokens) < 4 or tokens[0] != PPM_MAGIC:
        raise ValueError("Not a P3 PPM image")

    try:
        width, height, max_value = int(tokens[1]), int(tokens[2]), int(tokens[3])
        values = np.array([int(token) for token in tokens[4:]], dtype=np.int64)
    except ValueError as e:
        raise ValueError(f"Malformed PPM data: {e}") from e

    if width < 1 or height < 1:
        raise ValueError(f"Invalid image size {width}x{height}")
    if max_value != MAX_COLOR_VALUE:
        raise ValueError(f"Unsupported max color value {max_value}")
    if values.size != width * height * 3:
        raise ValueError(
            f"Expected {width * height * 3} color values, found {values.size}"
        )
    if values.size and (values.min() < 0 or values.max() > MAX_COLOR_VALUE):
        raise ValueError(f"Color values must be in [0, {MAX_COLOR_VALUE}]")

    return values.reshape(height, width, 3).astype(np.uint8)
