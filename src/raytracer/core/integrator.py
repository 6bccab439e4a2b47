"""Ray color integration and scanline rendering.

Each sample follows a single path through the scene. At every surface hit the
material decides whether the path continues (and in which direction) and how
much of each color channel survives the bounce. A path ends in one of three
ways:
    - it escapes the scene and picks up the sky gradient, scaled by the
      attenuation accumulated so far;
    - the material absorbs it (black);
    - it runs out of bounces (black).

The bounce chain is an explicit loop carrying the current ray, the
accumulated attenuation and the remaining depth, so depth is bounded by
max_depth and not by a call stack. Hits are only accepted for
t in (T_MIN, +inf); the small lower bound avoids shadow acne from a scattered
ray re-hitting its own origin surface.

Rendering is sequential: each scanline is one serialized kernel launch, so
random draws happen in the same order on every run with the same seed.

Example:
    >>> from src.raytracer.core.integrator import render_scanline
    >>> from src.raytracer.core.sampling import seed_random
    >>> seed_random(0)
    >>> row = render_scanline(j=0, width=400, samples_per_pixel=10,
    ...                       pixel_samples_scale=0.1, max_depth=10)
    >>> row.shape
    (400, 3)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.raytracer.camera.camera import get_ray
from src.raytracer.core.color import color_to_bytes
from src.raytracer.core.interval import Interval
from src.raytracer.core.ray import Ray, make_ray, normalize, vec3
from src.raytracer.geometry.sphere import HitRecord
from src.raytracer.materials.dielectric import get_dielectric_material, scatter_dielectric
from src.raytracer.materials.lambertian import get_lambertian_material, scatter_lambertian
from src.raytracer.materials.metal import get_metal_material, scatter_metal
from src.raytracer.scene.intersection import intersect_scene
from src.raytracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# =============================================================================
# Rendering Constants
# =============================================================================

# Minimum accepted hit distance (shadow acne cutoff)
T_MIN = 0.001

# Sky gradient endpoints: white at the horizon, light blue overhead
SKY_HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_ZENITH_COLOR = vec3(0.5, 0.7, 1.0)

# Maximum supported image width (scanline buffer is preallocated)
MAX_IMAGE_WIDTH = 4096

# One rendered scanline of 8-bit RGB values
_scanline_bytes = ti.Vector.field(3, dtype=ti.i32, shape=MAX_IMAGE_WIDTH)


def check_image_width(width: int) -> None:
    """Raise ValueError if width does not fit the scanline buffer."""
    if width < 1 or width > MAX_IMAGE_WIDTH:
        raise ValueError(
            f"Image width {width} is outside the supported range [1, {MAX_IMAGE_WIDTH}]"
        )


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(material_id: ti.i32, ray_in: Ray, rec: HitRecord):
    """Dispatch to the scatter function of the material's variant.

    Args:
        material_id: The unified material ID.
        ray_in: The incoming ray.
        rec: The hit record of the surface point.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). Unknown
        material IDs absorb the ray.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian(
            get_lambertian_material(type_index), rec
        )

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            get_metal_material(type_index), ray_in, rec
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            get_dielectric_material(type_index), ray_in, rec
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Ray Color
# =============================================================================


@ti.func
def sky_color(ray: Ray) -> vec3:
    """Background color for a ray that escapes the scene.

    Linear blend from white to light blue on the y component of the
    normalized direction.
    """
    unit_direction = normalize(ray.direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_HORIZON_COLOR + a * SKY_ZENITH_COLOR


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> vec3:
    """Compute the color carried back along one sampled path.

    Args:
        ray: The primary ray.
        max_depth: Maximum number of surface hits. 0 gives black.

    Returns:
        The linear color of the path.
    """
    color = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(1.0, 1.0, 1.0)
    current = ray
    depth = max_depth

    # Active flag instead of early return
    active = 1
    while active == 1:
        if depth <= 0:
            active = 0
        else:
            rec = intersect_scene(current, Interval(min=T_MIN, max=tm.inf))

            if rec.hit == 0:
                color = attenuation * sky_color(current)
                active = 0
            else:
                scattered_direction, albedo, did_scatter = _scatter_material(
                    rec.material_id, current, rec
                )
                if did_scatter == 0:
                    active = 0
                else:
                    attenuation *= albedo
                    current = make_ray(rec.point, scattered_direction)
                    depth -= 1

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_scanline(
    j: ti.i32,
    width: ti.i32,
    samples_per_pixel: ti.i32,
    pixel_samples_scale: ti.f64,
    max_depth: ti.i32,
):
    """Render row j into the scanline buffer, one pixel after another."""
    ti.loop_config(serialize=True)
    for i in range(width):
        pixel_color = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            pixel_color += ray_color(get_ray(i, j), max_depth)
        _scanline_bytes[i] = color_to_bytes(pixel_samples_scale * pixel_color)


@ti.kernel
def _trace_ray(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), max_depth)


@ti.kernel
def _render_pixel_sample(i: ti.i32, j: ti.i32, max_depth: ti.i32) -> vec3:
    return ray_color(get_ray(i, j), max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_scanline(
    j: int,
    width: int,
    samples_per_pixel: int,
    pixel_samples_scale: float,
    max_depth: int,
) -> np.ndarray:
    """Render one scanline of the current camera and scene.

    The camera geometry must have been uploaded by ``Camera.initialize`` and
    the scene by ``SceneManager.sync`` (``Camera.render`` does both).

    Args:
        j: Row index (0 = top).
        width: Image width in pixels.
        samples_per_pixel: Samples averaged per pixel.
        pixel_samples_scale: 1 / samples_per_pixel.
        max_depth: Maximum bounces per sample.

    Returns:
        Array of shape (width, 3), dtype int32, values in [0, 255].

    Raises:
        ValueError: If width does not fit the scanline buffer.
    """
    check_image_width(width)
    _render_scanline(j, width, samples_per_pixel, pixel_samples_scale, max_depth)
    return _scanline_bytes.to_numpy()[:width]


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
) -> tuple[float, float, float]:
    """Trace a single ray through the current scene.

    Returns:
        The linear (R, G, B) color of the path.
    """
    color = _trace_ray(vec3(*origin), vec3(*direction), max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_sample(pixel_i: int, pixel_j: int, max_depth: int) -> tuple[float, float, float]:
    """Render one jittered sample of pixel (pixel_i, pixel_j).

    Returns:
        The linear (R, G, B) color of the sample.
    """
    color = _render_pixel_sample(pixel_i, pixel_j, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
