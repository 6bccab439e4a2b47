"""Color conversion from linear radiance to 8-bit output.

Averaged pixel colors are linear. Before output each channel is
gamma-corrected with gamma 2 (a square root), clamped to [0, 0.999] so it
never reaches 256 after scaling, and truncated from 255.999 * value.
"""

import taichi as ti

from src.raytracer.core.interval import Interval, interval_clamp
from src.raytracer.core.ray import ivec3, vec3

# Upper bound of the output intensity range, kept below 1 so that
# int(255.999 * value) never exceeds 255
INTENSITY_MAX = 0.999
BYTE_SCALE = 255.999


@ti.func
def linear_to_gamma(linear_component: ti.f64) -> ti.f64:
    """Apply the gamma-2 transform; non-positive input maps to 0."""
    result = 0.0
    if linear_component > 0.0:
        result = ti.sqrt(linear_component)
    return result


@ti.func
def color_to_bytes(pixel_color: vec3) -> ivec3:
    """Convert a linear color to an 8-bit RGB triple.

    Args:
        pixel_color: The averaged linear color of a pixel.

    Returns:
        Integer (R, G, B), each in [0, 255].
    """
    intensity = Interval(min=0.0, max=INTENSITY_MAX)

    r = interval_clamp(intensity, linear_to_gamma(pixel_color.x))
    g = interval_clamp(intensity, linear_to_gamma(pixel_color.y))
    b = interval_clamp(intensity, linear_to_gamma(pixel_color.z))

    return ivec3(
        ti.cast(BYTE_SCALE * r, ti.i32),
        ti.cast(BYTE_SCALE * g, ti.i32),
        ti.cast(BYTE_SCALE * b, ti.i32),
    )
