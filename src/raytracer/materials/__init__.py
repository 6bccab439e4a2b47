"""Materials module for light scattering models.

Components:
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like materials with refraction (Schlick reflectance)

Each material provides a scatter function with the shared contract
    scattered_direction, attenuation, did_scatter = scatter_x(material, ...)
where did_scatter == 0 means the ray was absorbed. The scattered ray always
starts at the hit point.

Material parameters are stored in per-type registries (Taichi fields) and
loaded as small dataclass records by index, so one registered material can
be shared by any number of spheres.
"""

from .dielectric import (
    DielectricMaterial,
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_material,
    get_dielectric_material_count,
    reflectance,
    scatter_dielectric,
)
from .lambertian import (
    LambertianMaterial,
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_material,
    get_lambertian_material_count,
    scatter_lambertian,
)
from .metal import (
    MetalMaterial,
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
    get_metal_fuzz,
    get_metal_material,
    get_metal_material_count,
    scatter_metal,
)

__all__ = [
    # Lambertian
    "LambertianMaterial",
    "scatter_lambertian",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_material",
    # Metal
    "MetalMaterial",
    "scatter_metal",
    "clamp_fuzz",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_fuzz",
    "get_metal_material",
    # Dielectric
    "DielectricMaterial",
    "scatter_dielectric",
    "reflectance",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_material",
]
