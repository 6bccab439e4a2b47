"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, hit records, and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) and follow the
pattern:
    record = hit_shape(ray, shape, ray_t)
where record.hit tells whether a root was found strictly inside ray_t.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record, set_face_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
    "set_face_normal",
]
