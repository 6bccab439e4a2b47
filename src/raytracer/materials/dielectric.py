"""Dielectric (glass/water) material implementation.

This module implements clear dielectrics, which reflect and refract but never
absorb.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when (n1 / n2) * sin(theta1) > 1
    - Schlick's approximation for the angle-dependent reflectance

Rather than splitting each ray into a reflected and a refracted child, the
material picks one of the two at random with the Schlick reflectance as the
probability of reflecting. Each sample stays a single path and converges
over many samples per pixel.

Example:
    >>> from src.raytracer.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(material, ray_in, rec)
"""

import taichi as ti
import taichi.math as tm

from src.raytracer.core.ray import Ray, normalize, reflect, refract, vec3
from src.raytracer.core.sampling import random_double
from src.raytracer.geometry.sphere import HitRecord


@ti.dataclass
class DielectricMaterial:
    """Dielectric (glass/water) material properties.

    Attributes:
        refraction_index: Refractive index relative to the enclosing medium.
            Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
            Values below 1 model a less dense pocket, such as an air bubble
            inside glass (1.0 / 1.5).
    """

    refraction_index: ti.f64


@ti.func
def reflectance(cosine: ti.f64, refraction_index: ti.f64) -> ti.f64:
    """Compute reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        refraction_index: Ratio of refractive indices.

    Returns:
        The approximate reflectance in [0, 1].
    """
    r0 = (1.0 - refraction_index) / (1.0 + refraction_index)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def scatter_dielectric(material: DielectricMaterial, ray_in: Ray, rec: HitRecord):
    """Scatter a ray through a dielectric surface.

    Args:
        material: The dielectric material parameters.
        ray_in: The incoming ray.
        rec: The hit record of the surface point. front_face selects the
            refraction ratio: 1/ri when entering, ri when leaving.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted direction.
        - attenuation: Always white (1, 1, 1).
        - did_scatter: Always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    ri = material.refraction_index
    if rec.front_face == 1:
        ri = 1.0 / material.refraction_index

    unit_direction = normalize(ray_in.direction)
    cos_theta = tm.min(-tm.dot(unit_direction, rec.normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)

    cannot_refract = ri * sin_theta > 1.0

    # Draw unconditionally so the random stream does not depend on the branch
    draw = random_double()

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or reflectance(cos_theta, ri) > draw:
        scattered_direction = reflect(unit_direction, rec.normal)
    else:
        scattered_direction = refract(unit_direction, rec.normal, ri)

    return scattered_direction, attenuation, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

# Storage for dielectric material properties
dielectric_refraction_indices = ti.field(dtype=ti.f64, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(refraction_index: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refraction_index: Refractive index. Default is 1.5 (typical glass).
            Must be positive.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If refraction_index is not positive.
    """
    if refraction_index <= 0.0:
        raise ValueError(
            f"Refraction index = {refraction_index} is not positive. "
            "The index must be > 0 for a meaningful refraction ratio."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_refraction_indices[idx] = refraction_index
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_material(material_idx: ti.i32) -> DielectricMaterial:
    """Load a dielectric material from the registry by index."""
    return DielectricMaterial(refraction_index=dielectric_refraction_indices[material_idx])
