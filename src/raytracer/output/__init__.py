"""Output module for rendered images.

Components:
    ppm: ASCII PPM (P3) header, pixel formatting, file writing and parsing
"""

from .ppm import (
    MAX_COLOR_VALUE,
    format_pixel,
    parse_ppm,
    ppm_header,
    save_ppm,
    write_pixels,
    write_ppm,
)

__all__ = [
    "MAX_COLOR_VALUE",
    "ppm_header",
    "format_pixel",
    "write_pixels",
    "write_ppm",
    "save_ppm",
    "parse_ppm",
]
