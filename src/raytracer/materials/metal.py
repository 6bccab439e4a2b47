"""Metal (specular reflective) material implementation.

This module implements specular reflection with optional fuzz. A perfect
metal (fuzz=0) mirrors the incoming direction about the normal:
    R = I - 2(I . N)N
A rough metal adds fuzz * random_unit_vector() to the normalized mirror
direction, spreading reflections over a cone whose size grows with fuzz.

A ray whose fuzzed direction points into the surface is absorbed.

Example:
    >>> from src.raytracer.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(material, ray_in, rec)
"""

import taichi as ti
import taichi.math as tm

from src.raytracer.core.ray import Ray, normalize, reflect, vec3
from src.raytracer.core.sampling import random_unit_vector
from src.raytracer.geometry.sphere import HitRecord


@ti.dataclass
class MetalMaterial:
    """Metal (specular reflective) material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Reflection roughness in [0, 1]. 0 = perfect mirror.
    """

    albedo: vec3
    fuzz: ti.f64


@ti.func
def scatter_metal(material: MetalMaterial, ray_in: Ray, rec: HitRecord):
    """Scatter a ray off a metal surface.

    Args:
        material: The metal material parameters.
        ray_in: The incoming ray.
        rec: The hit record of the surface point.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The fuzzed mirror direction.
        - attenuation: The albedo.
        - did_scatter: 1 if the direction leaves the surface
          (dot with the normal > 0), 0 if the ray is absorbed.
    """
    reflected = normalize(reflect(ray_in.direction, rec.normal))
    scattered_direction = reflected + material.fuzz * random_unit_vector()

    did_scatter = 1
    if tm.dot(scattered_direction, rec.normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, material.albedo, did_scatter


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f64, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_metal_materials[None] = 0


def clamp_fuzz(fuzz: float) -> float:
    """Clamp a fuzz value to [0, 1]."""
    return min(max(fuzz, 0.0), 1.0)


def add_metal_material(
    albedo: tuple[float, float, float],
    fuzz: float = 0.0,
) -> int:
    """Add a metal material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B) tuple.
            Each component should be in [0, 1].
        fuzz: The reflection roughness. Default is 0 (perfect mirror).
            Values outside [0, 1] are clamped, not rejected.

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

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzzes[idx] = clamp_fuzz(fuzz)
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


def get_metal_fuzz(material_idx: int) -> float:
    """Get the stored (clamped) fuzz of a metal material by index."""
    return float(metal_fuzzes[material_idx])


@ti.func
def get_metal_material(material_idx: ti.i32) -> MetalMaterial:
    """Load a metal material from the registry by index."""
    return MetalMaterial(
        albedo=metal_albedos[material_idx],
        fuzz=metal_fuzzes[material_idx],
    )
