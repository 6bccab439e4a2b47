"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest

TEST_SEED = 42


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would drop
    every field declared by already imported modules.
    """
    from src.raytracer.core.backend import init_taichi

    init_taichi("cpu", seed=TEST_SEED)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data and reseed the random source around each test."""
    # Import here so that Taichi is initialized before any field is declared
    from src.raytracer.core.sampling import seed_random
    from src.raytracer.materials.dielectric import clear_dielectric_materials
    from src.raytracer.materials.lambertian import clear_lambertian_materials
    from src.raytracer.materials.metal import clear_metal_materials
    from src.raytracer.scene.intersection import clear_scene
    from src.raytracer.scene.manager import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()

    _clear_all()
    seed_random(TEST_SEED)

    yield

    _clear_all()
