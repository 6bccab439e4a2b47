"""Look-at camera: image geometry, primary rays, and the render loop.

The camera turns its configuration into viewport geometry, generates jittered
primary rays, and drives rendering one scanline at a time into a PPM text
stream.

Geometry (right-handed, w points from lookat back toward lookfrom):
    w = normalize(lookfrom - lookat)
    u = normalize(vup x w)          # right in the image plane
    v = w x u                       # up in the image plane

The viewport sits at the focal distance |lookfrom - lookat| in front of the
camera and spans 2 * tan(vfov / 2) * focal_length vertically. Pixel (0, 0) is
the upper-left corner of the image; j grows downward.

Example:
    >>> from src.raytracer.camera.camera import Camera
    >>> from src.raytracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ground = scene.add_lambertian_material((0.8, 0.8, 0.0))
    >>> scene.add_sphere((0, -100.5, -1), 100, ground)
    >>> camera = Camera(image_width=200, samples_per_pixel=10)
    >>> text = camera.render_to_string(scene)
    >>> text.splitlines()[:3]
    ['P3', '200 112', '255']
"""

import io
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

import numpy as np
import taichi as ti

from src.raytracer.core.ray import Ray, make_ray, vec3
from src.raytracer.core.sampling import sample_square
from src.raytracer.output.ppm import ppm_header, write_pixels

if TYPE_CHECKING:
    from src.raytracer.scene.manager import SceneManager

# Type alias for progress callbacks: (scanlines_remaining, image_height) -> None
ProgressCallback = Callable[[int, int], None]

# Open range of accepted vertical field of view, in degrees
VFOV_MIN = 1e-3
VFOV_MAX = 180.0 - 1e-3

# =============================================================================
# Camera Configuration
# =============================================================================


@dataclass
class Camera:
    """Rendering configuration for a look-at camera.

    Attributes:
        aspect_ratio: Image width divided by height.
        image_width: Output image width in pixels.
        samples_per_pixel: Random samples averaged per pixel (antialiasing).
        max_depth: Maximum number of bounces per sample.
        vfov: Vertical field of view in degrees, clamped to (0, 180).
        lookfrom: Camera position.
        lookat: Point the camera aims at.
        vup: World up reference for camera roll.
        seed: Seed for the random source. Equal seeds and equal
            configurations give identical images.
    """

    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 400
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    seed: int = 0

    def initialize(self) -> "CameraGeometry":
        """Compute the image and viewport geometry and upload it to the device.

        Called at the start of every render, so changes to the configuration
        between renders take effect.

        Returns:
            The derived CameraGeometry.

        Raises:
            ValueError: If the image width, sample count, or aspect ratio is
                not positive, if lookfrom equals lookat, or if vup is parallel
                to the view direction.
        """
        if self.image_width < 1:
            raise ValueError(f"image_width must be >= 1, got {self.image_width}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be >= 1, got {self.samples_per_pixel}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")

        image_height = max(1, int(self.image_width / self.aspect_ratio))
        pixel_samples_scale = 1.0 / self.samples_per_pixel

        lookfrom = np.array(self.lookfrom, dtype=np.float64)
        lookat = np.array(self.lookat, dtype=np.float64)
        vup = np.array(self.vup, dtype=np.float64)

        focal_length = float(np.linalg.norm(lookfrom - lookat))
        if focal_length == 0.0:
            raise ValueError("lookfrom and lookat must be different points")

        theta = math.radians(clamp_vfov(self.vfov))
        h = math.tan(theta / 2.0)
        viewport_height = 2.0 * h * focal_length
        viewport_width = viewport_height * (self.image_width / image_height)

        # Orthonormal basis
        w = (lookfrom - lookat) / focal_length
        u = np.cross(vup, w)
        u_norm = float(np.linalg.norm(u))
        if u_norm < 1e-12:
            raise ValueError("vup must not be parallel to the view direction")
        u = u / u_norm
        v = np.cross(w, u)

        # Vectors across the horizontal and down the vertical viewport edges
        viewport_u = viewport_width * u
        viewport_v = viewport_height * -v

        pixel_delta_u = viewport_u / self.image_width
        pixel_delta_v = viewport_v / image_height

        viewport_upper_left = lookfrom - focal_length * w - viewport_u / 2.0 - viewport_v / 2.0
        pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

        geometry = CameraGeometry(
            image_width=self.image_width,
            image_height=image_height,
            pixel_samples_scale=pixel_samples_scale,
            center=_as_tuple(lookfrom),
            pixel00_loc=_as_tuple(pixel00_loc),
            pixel_delta_u=_as_tuple(pixel_delta_u),
            pixel_delta_v=_as_tuple(pixel_delta_v),
            u=_as_tuple(u),
            v=_as_tuple(v),
            w=_as_tuple(w),
        )
        _upload_geometry(geometry)
        return geometry

    def render(
        self,
        scene: "SceneManager",
        out: TextIO,
        progress: ProgressCallback | None = None,
    ) -> "CameraGeometry":
        """Render the scene as an ASCII PPM (P3) image into out.

        The random source is reseeded from ``seed`` and the scene is
        re-uploaded to the device before rendering starts. Scanlines are
        rendered top to bottom; progress, if given, is called before each
        one with the number of scanlines remaining (including the current
        one) and the image height.

        Args:
            scene: The scene to render.
            out: Text stream receiving the header and one "r g b" line per
                pixel in row-major order.
            progress: Optional callback (scanlines_remaining, image_height).

        Returns:
            The CameraGeometry used for the render.

        Raises:
            ValueError: If the configuration is invalid or the image is wider
                than the scanline buffer.
        """
        from src.raytracer.core.integrator import check_image_width, render_scanline
        from src.raytracer.core.sampling import seed_random

        geometry = self.initialize()
        check_image_width(geometry.image_width)

        scene.sync()
        seed_random(self.seed)

        out.write(ppm_header(geometry.image_width, geometry.image_height))
        for j in range(geometry.image_height):
            if progress is not None:
                progress(geometry.image_height - j, geometry.image_height)
            row = render_scanline(
                j,
                geometry.image_width,
                self.samples_per_pixel,
                geometry.pixel_samples_scale,
                self.max_depth,
            )
            write_pixels(out, row)

        return geometry

    def render_to_string(
        self,
        scene: "SceneManager",
        progress: ProgressCallback | None = None,
    ) -> str:
        """Render the scene and return the PPM text."""
        buffer = io.StringIO()
        self.render(scene, buffer, progress)
        return buffer.getvalue()


@dataclass
class CameraGeometry:
    """Derived image and viewport geometry of a camera.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels (at least 1).
        pixel_samples_scale: 1 / samples_per_pixel.
        center: Camera center (lookfrom).
        pixel00_loc: World position of the center of pixel (0, 0).
        pixel_delta_u: Offset to the pixel on the right.
        pixel_delta_v: Offset to the pixel below.
        u: Camera right vector.
        v: Camera up vector.
        w: Camera back vector (opposite the view direction).
    """

    image_width: int
    image_height: int
    pixel_samples_scale: float
    center: tuple[float, float, float]
    pixel00_loc: tuple[float, float, float]
    pixel_delta_u: tuple[float, float, float]
    pixel_delta_v: tuple[float, float, float]
    u: tuple[float, float, float]
    v: tuple[float, float, float]
    w: tuple[float, float, float]


def clamp_vfov(vfov: float) -> float:
    """Clamp a vertical field of view into the open range (0, 180) degrees."""
    return min(max(vfov, VFOV_MIN), VFOV_MAX)


def _as_tuple(vector: np.ndarray) -> tuple[float, float, float]:
    return (float(vector[0]), float(vector[1]), float(vector[2]))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f64, shape=())

# Basis vectors, kept for inspection only
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())


def _upload_geometry(geometry: CameraGeometry) -> None:
    """Write the geometry to the device fields read by get_ray."""
    _camera_center[None] = list(geometry.center)
    _pixel00_loc[None] = list(geometry.pixel00_loc)
    _pixel_delta_u[None] = list(geometry.pixel_delta_u)
    _pixel_delta_v[None] = list(geometry.pixel_delta_v)
    _camera_u[None] = list(geometry.u)
    _camera_v[None] = list(geometry.v)
    _camera_w[None] = list(geometry.w)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate a camera ray through a random point in pixel (i, j).

    The ray starts at the camera center and points at a location jittered
    uniformly within the pixel square. The direction is not normalized.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).

    Returns:
        The primary Ray for one sample of the pixel.
    """
    offset = sample_square()
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f64) + offset.x) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f64) + offset.y) * _pixel_delta_v[None]
    )

    origin = _camera_center[None]
    return make_ray(origin, pixel_sample - origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the current device-side camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v,
        u, v, w.
    """
    fields = {
        "center": _camera_center,
        "pixel00_loc": _pixel00_loc,
        "pixel_delta_u": _pixel_delta_u,
        "pixel_delta_v": _pixel_delta_v,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
    }
    info = {}
    for name, field in fields.items():
        value = field[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info
