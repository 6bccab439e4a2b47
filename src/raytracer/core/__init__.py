"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    backend: Taichi initialization (double precision, CPU/GPU selection)
    ray: Ray data structure and vector utilities
    interval: Closed intervals for hit distances and color clamping
    sampling: Explicit seeded random source for Monte Carlo sampling
    color: Gamma correction and 8-bit color conversion
    integrator: Iterative ray color integration and scanline rendering

Only the modules without Taichi fields are imported here. sampling and
integrator declare fields, so they must be imported directly after
``init_taichi`` has run:

    from src.raytracer.core.integrator import render_scanline
"""

from .backend import init_taichi
from .color import color_to_bytes, linear_to_gamma
from .interval import (
    Interval,
    interval_clamp,
    interval_contains,
    interval_size,
    interval_surrounds,
)
from .ray import (
    Ray,
    cross,
    dot,
    ivec3,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    refract,
    vec3,
)

__all__ = [
    "init_taichi",
    "linear_to_gamma",
    "color_to_bytes",
    "Interval",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "ivec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "near_zero",
    "reflect",
    "refract",
]
