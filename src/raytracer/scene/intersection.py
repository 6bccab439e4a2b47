"""Scene-level sphere storage and nearest-hit queries.

The scene stores spheres in Taichi fields (structure of arrays) in insertion
order. Storage is append-only while a scene is built and read-only while it
is rendered. Each sphere carries a unified material id; several spheres may
share one material.

``intersect_scene`` exposes the same contract as a single shape: given a ray
and an interval of accepted parameters it returns the nearest hit. Each
sphere is tested against [t_min, closest_so_far], so the upper bound shrinks
as hits are found and only strictly closer hits replace the current one.

Example:
    >>> from src.raytracer.scene.intersection import (
    ...     add_sphere, clear_scene, intersect_scene
    ... )
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -1), 0.5, material_id=0)
    >>> add_sphere(vec3(0, -100.5, -1), 100.0, material_id=1)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from src.raytracer.core.interval import Interval
from src.raytracer.core.ray import Ray, vec3
from src.raytracer.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. Field data is overwritten as new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere. Negative values are clamped to 0.
        material_id: The unified material id for this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = max(0.0, radius)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Load the sphere stored at index."""
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        material_id=sphere_material_ids[index],
    )


@ti.func
def intersect_scene(ray: Ray, ray_t: Interval) -> HitRecord:
    """Find the nearest intersection of a ray with the scene.

    Spheres are tested in stored order. The order does not change the
    result, only how many candidates get pruned. On equal t the earlier
    sphere is kept.

    Args:
        ray: The ray to trace.
        ray_t: Accepted range of the ray parameter.

    Returns:
        The HitRecord of the nearest hit, or a miss record (hit == 0).
    """
    closest_so_far = ray_t.max
    result = make_miss_record()

    n = num_spheres[None]
    for i in range(n):
        rec = hit_sphere(ray, get_sphere(i), Interval(min=ray_t.min, max=closest_so_far))
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result
