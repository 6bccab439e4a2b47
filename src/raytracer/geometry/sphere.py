"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the
intersection routine used by the scene's nearest-hit search.

The ray-sphere intersection solves
    |origin + t * direction - center|^2 = radius^2
in the reduced ("half-b") form, which avoids carrying a factor of 2 through
the discriminant:

    oc = center - origin
    a = direction . direction
    h = direction . oc
    c = oc . oc - radius^2
    discriminant = h^2 - a*c

Example:
    >>> from src.raytracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5, material_id=0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.raytracer.core.interval import Interval, interval_surrounds
from src.raytracer.core.ray import Ray, ray_at, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (non-negative).
        material_id: Unified id of the material shared with the scene.
    """

    center: vec3
    radius: ti.f64
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
            Every other field is only meaningful if hit == 1.
        t: The ray parameter of the intersection.
        point: The intersection point.
        normal: Unit surface normal, always facing against the incoming ray.
        front_face: 1 if the ray hit the outside of the surface, 0 if it hit
            from within.
        material_id: Unified material id of the surface that was hit.
            -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray: Ray, outward_normal: vec3):
    """Orient a unit outward normal against the incoming ray.

    Args:
        ray: The incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple of (front_face, normal) where front_face is 1 when the ray
        arrives from outside, and normal is outward_normal flipped if needed
        so that dot(normal, ray.direction) <= 0.
    """
    front_face = 1
    normal = outward_normal
    if tm.dot(ray.direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal
    return front_face, normal


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval) -> HitRecord:
    """Test for ray-sphere intersection inside a parameter interval.

    Of the two roots (h - sqrt(d)) / a and (h + sqrt(d)) / a the smaller one
    is tried first; the first root strictly inside ray_t is accepted. A
    negative discriminant is a miss.

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test against.
        ray_t: Accepted range of the ray parameter (open at both ends).

    Returns:
        A HitRecord for the nearest valid root. Check the hit field to
        determine whether an intersection occurred.
    """
    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Nearest root first, then the far one
        root = (h - sqrt_d) / a
        valid = interval_surrounds(ray_t, root)
        if not valid:
            root = (h + sqrt_d) / a
            valid = interval_surrounds(ray_t, root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            front_face, normal = set_face_normal(ray, outward_normal)

            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result
