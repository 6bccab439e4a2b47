"""Lambertian (ideal diffuse) material implementation.

A diffuse bounce leaves the surface in the direction
    normal + random_unit_vector()
i.e. toward a random point on the unit sphere sitting on the tip of the
normal. Directions near the normal are more likely than grazing ones, which
approximates cosine-weighted reflection without building a local frame.

The attenuation is the material's albedo, and a Lambertian surface never
absorbs a ray outright.

Example:
    >>> from src.raytracer.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(material, rec)
"""

import taichi as ti

from src.raytracer.core.ray import near_zero, vec3
from src.raytracer.core.sampling import random_unit_vector
from src.raytracer.geometry.sphere import HitRecord


@ti.dataclass
class LambertianMaterial:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: vec3


@ti.func
def _fallback_if_degenerate(direction: vec3, normal: vec3) -> vec3:
    """Return normal in place of a near-zero scatter direction."""
    result = direction
    if near_zero(direction):
        result = normal
    return result


@ti.func
def scatter_lambertian(material: LambertianMaterial, rec: HitRecord):
    """Scatter a ray off a Lambertian surface.

    If the normal and the random unit vector nearly cancel, the scatter
    direction would be degenerate; the normal is used instead.

    Args:
        material: The Lambertian material parameters.
        rec: The hit record of the surface point.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The new ray direction (not normalized).
        - attenuation: The albedo.
        - did_scatter: Always 1.
    """
    scattered_direction = _fallback_if_degenerate(rec.normal + random_unit_vector(), rec.normal)
    return scattered_direction, material.albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

# Storage for Lambertian material properties
lambertian_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B) tuple.
            Each component should be in [0, 1] for energy conservation.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_material(material_idx: ti.i32) -> LambertianMaterial:
    """Load a Lambertian material from the registry by index."""
    return LambertianMaterial(albedo=lambertian_albedos[material_idx])
