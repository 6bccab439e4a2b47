"""Camera module for view setup, ray generation, and rendering.

Components:
    camera: Look-at camera with jittered primary rays and the scanline
        render loop writing PPM output

Ray generation uses pixel coordinates:
    i in [0, image_width): left to right
    j in [0, image_height): top to bottom

The camera declares Taichi fields, so import it after ``init_taichi``.
"""

from .camera import (
    Camera,
    CameraGeometry,
    ProgressCallback,
    clamp_vfov,
    get_camera_info,
    get_ray,
)

__all__ = [
    "Camera",
    "CameraGeometry",
    "ProgressCallback",
    "clamp_vfov",
    "get_ray",
    "get_camera_info",
]
