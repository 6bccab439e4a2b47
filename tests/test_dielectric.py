"""Unit tests for the dielectric material module.

Tests cover:
- Schlick reflectance
- Total internal reflection
- Refraction ratio on front and back faces
- Dielectrics never absorb, attenuation is white
- Registry operations and validation
"""

import math

import numpy as np
import pytest
import taichi as ti

NUM_SAMPLES = 1000


def _scatter_many(incoming, normal, front_face, refraction_index, n=NUM_SAMPLES):
    """Scatter n rays through a dielectric surface."""
    from src.raytracer.core.ray import make_ray, vec3
    from src.raytracer.geometry.sphere import HitRecord
    from src.raytracer.materials.dielectric import DielectricMaterial, scatter_dielectric

    directions = ti.Vector.field(3, dtype=ti.f64, shape=n)
    scattered = ti.field(dtype=ti.i32, shape=n)
    attenuations = ti.Vector.field(3, dtype=ti.f64, shape=n)

    @ti.kernel
    def test_kernel(incoming: vec3, normal: vec3, front_face: ti.i32, ri: ti.f64):
        ti.loop_config(serialize=True)
        for i in range(n):
            material = DielectricMaterial(refraction_index=ri)
            ray_in = make_ray(vec3(0.0, 0.0, 0.0), incoming)
            rec = HitRecord(
                hit=1,
                t=1.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=normal,
                front_face=front_face,
                material_id=0,
            )
            direction, attenuation, did_scatter = scatter_dielectric(material, ray_in, rec)
            directions[i] = direction
            scattered[i] = did_scatter
            attenuations[i] = attenuation

    test_kernel(vec3(*incoming), vec3(*normal), front_face, refraction_index)
    return directions.to_numpy(), scattered.to_numpy(), attenuations.to_numpy()


class TestReflectance:
    """Tests for Schlick's approximation."""

    @pytest.mark.parametrize(
        ("cosine", "ri"),
        [(1.0, 1.5), (0.5, 1.5), (0.0, 1.5), (0.8, 1.0 / 1.5), (0.3, 2.4)],
    )
    def test_schlick(self, cosine, ri):
        from src.raytracer.materials.dielectric import reflectance

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(cosine: ti.f64, ri: ti.f64):
            result[None] = reflectance(cosine, ri)

        test_kernel(cosine, ri)
        r0 = ((1.0 - ri) / (1.0 + ri)) ** 2
        assert result[None] == pytest.approx(r0 + (1.0 - r0) * (1.0 - cosine) ** 5)

    def test_grazing_reflectance_is_one(self):
        from src.raytracer.materials.dielectric import reflectance

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflectance(0.0, 1.5)

        test_kernel()
        assert result[None] == pytest.approx(1.0)


class TestScatterDielectric:
    """Tests for scatter_dielectric."""

    def test_never_absorbs_and_attenuation_white(self):
        _, scattered, attenuations = _scatter_many((0.3, -1.0, 0.2), (0.0, 1.0, 0.0), 1, 1.5)
        assert np.all(scattered == 1)
        np.testing.assert_array_equal(attenuations, np.ones((NUM_SAMPLES, 3)))

    def test_total_internal_reflection(self):
        """Test a steep exit from glass always reflects."""
        # 60 degrees from the normal inside glass: 1.5 * sin(60) > 1
        theta = math.radians(60.0)
        incoming = (math.sin(theta), math.cos(theta), 0.0)
        # Back-face hit: normal flipped toward the incoming ray
        normal = (0.0, -1.0, 0.0)

        directions, _, _ = _scatter_many(incoming, normal, 0, 1.5)
        np.testing.assert_allclose(
            directions, [[math.sin(theta), -math.cos(theta), 0.0]] * NUM_SAMPLES, atol=1e-9
        )

    def test_entering_glass_mostly_refracts_with_snell_angle(self):
        """Test front-face hits refract with ratio 1/ri and reflect with Schlick probability."""
        theta = math.radians(30.0)
        incoming = (math.sin(theta), -math.cos(theta), 0.0)
        directions, _, _ = _scatter_many(incoming, (0.0, 1.0, 0.0), 1, 1.5)

        refracted = directions[:, 1] < 0.0
        reflected_fraction = 1.0 - refracted.mean()

        r0 = ((1.0 - 1.0 / 1.5) / (1.0 + 1.0 / 1.5)) ** 2
        expected = r0 + (1.0 - r0) * (1.0 - math.cos(theta)) ** 5
        assert abs(reflected_fraction - expected) < 0.03

        # Snell: sin(theta_t) = sin(theta_i) / 1.5
        sin_t = directions[refracted, 0] / np.linalg.norm(directions[refracted], axis=1)
        np.testing.assert_allclose(sin_t, math.sin(theta) / 1.5, atol=1e-9)

    def test_unit_refraction_index_passes_straight_through(self):
        """Test ri = 1 refracts without bending (Schlick reflectance 0 at normal incidence)."""
        directions, _, _ = _scatter_many((0.0, -1.0, 0.0), (0.0, 1.0, 0.0), 1, 1.0)
        np.testing.assert_allclose(directions, [[0.0, -1.0, 0.0]] * NUM_SAMPLES, atol=1e-12)


class TestMaterialRegistry:
    """Tests for the dielectric material registry."""

    def test_add_and_get_material(self):
        from src.raytracer.materials.dielectric import (
            add_dielectric_material,
            get_dielectric_material,
            get_dielectric_material_count,
        )

        result = ti.field(dtype=ti.f64, shape=())
        add_dielectric_material(1.5)
        idx = add_dielectric_material(1.0 / 1.5)

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            result[None] = get_dielectric_material(mat_idx).refraction_index

        test_kernel(idx)
        assert idx == 1
        assert result[None] == pytest.approx(1.0 / 1.5)
        assert get_dielectric_material_count() == 2

    @pytest.mark.parametrize("refraction_index", [0.0, -1.5])
    def test_non_positive_index_rejected(self, refraction_index):
        from src.raytracer.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError):
            add_dielectric_material(refraction_index)
