"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length, reflect, refract)
- near_zero degenerate-direction check
"""

import math

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from src.raytracer.core.ray import Ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(1.0)
        assert r[1] == pytest.approx(2.0)
        assert r[2] == pytest.approx(3.0)

    def test_ray_at_positive_t(self):
        """Test ray_at computes origin + t * direction."""
        from src.raytracer.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 0.0, 0.0), vec3(0.0, 2.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(1.0)
        assert r[1] == pytest.approx(5.0)
        assert r[2] == pytest.approx(0.0)

    def test_ray_at_negative_t(self):
        """Test ray_at handles negative t (behind origin)."""
        from src.raytracer.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))
            result[None] = ray_at(ray, -3.0)

        test_kernel()
        assert result[None][1] == pytest.approx(-3.0)

    @pytest.mark.parametrize("t", [-4.0, -0.5, 0.0, 0.25, 3.0, 100.0])
    def test_ray_at_distance_scales_with_t(self, t):
        """Test |ray_at(t) - origin| == |t| * |direction|."""
        from src.raytracer.core.ray import length, make_ray, ray_at, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(t: ti.f64):
            origin = vec3(0.5, -1.0, 2.0)
            ray = make_ray(origin, vec3(1.0, 2.0, -2.0))
            result[None] = length(ray_at(ray, t) - origin)

        test_kernel(t)
        assert result[None] == pytest.approx(abs(t) * 3.0)


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_length_and_length_squared(self):
        from src.raytracer.core.ray import length, length_squared, vec3

        lengths = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 12.0)
            lengths[0] = length(v)
            lengths[1] = length_squared(v)

        test_kernel()
        assert lengths[0] == pytest.approx(13.0)
        assert lengths[1] == pytest.approx(169.0)

    def test_normalize(self):
        """Test normalize returns a unit vector in the same direction."""
        from src.raytracer.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 3.0, 4.0))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(0.0)
        assert r[1] == pytest.approx(0.6)
        assert r[2] == pytest.approx(0.8)

    def test_dot_and_cross(self):
        from src.raytracer.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f64, shape=())
        cross_result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            dot_result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert dot_result[None] == pytest.approx(12.0)
        c = cross_result[None]
        assert (c[0], c[1], c[2]) == pytest.approx((0.0, 0.0, 1.0))

    def test_near_zero(self):
        """Test near_zero is true only when every component is tiny."""
        from src.raytracer.core.ray import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            results[1] = near_zero(vec3(1e-9, 1e-3, 0.0))
            results[2] = near_zero(vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 0
        assert results[2] == 1


class TestReflectRefract:
    """Tests for reflect and refract."""

    def test_reflect_mirrors_about_normal(self):
        """Test R = I - 2(I . N)N for a 45 degree incidence."""
        from src.raytracer.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == pytest.approx((1.0, 1.0, 0.0))

    def test_refract_straight_through_at_normal_incidence(self):
        """Test a ray along the normal is not bent."""
        from src.raytracer.core.ray import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == pytest.approx((0.0, -1.0, 0.0))

    def test_refract_obeys_snells_law(self):
        """Test sin(theta_t) = eta * sin(theta_i) for the refracted direction."""
        from src.raytracer.core.ray import normalize, refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        eta = 1.0 / 1.5
        theta_i = math.radians(30.0)

        @ti.kernel
        def test_kernel(sin_i: ti.f64, cos_i: ti.f64, eta: ti.f64):
            uv = normalize(vec3(sin_i, -cos_i, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), eta)

        test_kernel(math.sin(theta_i), math.cos(theta_i), eta)
        r = result[None]
        length = math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert length == pytest.approx(1.0, abs=1e-9)
        assert r[0] == pytest.approx(eta * math.sin(theta_i))
        assert r[1] < 0.0
