"""Scene module for scene management and nearest-hit queries.

Components:
    intersection: Sphere storage in Taichi fields and the nearest-hit search
    manager: Scene manager coordinating spheres and the material arena
    demo: Ready-made demo scenes with matching cameras

The scene module manages:
    - Sphere storage in Structure-of-Arrays Taichi fields
    - Unified material ID assignment and variant lookup
    - Scene serialization to plain dictionaries
"""

from .demo import create_material_showcase_scene, create_two_sphere_scene
from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    get_material_type,
    get_material_type_index,
    material_type_indices,
    material_types,
    num_materials,
)

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "material_types",
    "material_type_indices",
    "num_materials",
    # Demo scenes
    "create_two_sphere_scene",
    "create_material_showcase_scene",
]
