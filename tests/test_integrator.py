"""Unit tests for the ray color integrator.

Tests cover:
- Sky gradient for escaped rays
- Depth limit (max_depth 0 is black)
- Attenuation through diffuse and absorbing materials
- Material dispatch by variant
- Scanline rendering output range and width validation
"""

import numpy as np
import pytest


def _sky(direction):
    d = np.array(direction, dtype=np.float64)
    d = d / np.linalg.norm(d)
    a = 0.5 * (d[1] + 1.0)
    return (1.0 - a) * np.ones(3) + a * np.array([0.5, 0.7, 1.0])


class TestSky:
    """Tests for rays that escape the scene."""

    @pytest.mark.parametrize("direction", [(0.0, 1.0, 0.0), (0.0, -1.0, 0.0), (1.0, 0.2, -1.0)])
    def test_escaped_ray_returns_sky(self, direction):
        from src.raytracer.core.integrator import trace_ray
        from src.raytracer.scene.manager import SceneManager

        SceneManager()
        color = trace_ray((0.0, 0.0, 0.0), direction, max_depth=10)
        np.testing.assert_allclose(color, _sky(direction), atol=1e-12)

    def test_sky_gradient_endpoints(self):
        from src.raytracer.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 5) == pytest.approx((0.5, 0.7, 1.0))
        assert trace_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0), 5) == pytest.approx((1.0, 1.0, 1.0))


class TestDepthLimit:
    """Tests for the bounce limit."""

    def test_zero_depth_is_black(self):
        from src.raytracer.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 0) == (0.0, 0.0, 0.0)

    def test_depth_exhausted_inside_closed_sphere_is_black(self):
        """Test a ray trapped inside a diffuse sphere runs out of bounces."""
        from src.raytracer.core.integrator import trace_ray
        from src.raytracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, 0.0, 0.0), 5.0, (0.9, 0.9, 0.9))
        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 20) == (0.0, 0.0, 0.0)


class TestMaterialDispatch:
    """Tests for attenuation per material variant."""

    def test_mirror_reflects_sky_times_albedo(self):
        """Test a perfect mirror floor returns albedo * sky of the mirrored ray."""
        from src.raytracer.core.integrator import trace_ray
        from src.raytracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_metal_sphere((0.0, -100001.0, 0.0), 100000.0, (0.5, 0.25, 1.0), fuzz=0.0)

        color = trace_ray((0.0, 0.0, 0.0), (1.0, -1.0, 0.0), max_depth=10)
        expected = np.array([0.5, 0.25, 1.0]) * _sky((1.0, 1.0, 0.0))
        np.testing.assert_allclose(color, expected, atol=1e-4)

    def test_absorbed_ray_is_black(self):
        """Test a metal ray scattered into the surface returns black."""
        from src.raytracer.core.integrator import trace_ray
        from src.raytracer.core.sampling import seed_random
        from src.raytracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_metal_sphere((0.0, -100001.0, 0.0), 100000.0, (0.9, 0.9, 0.9), fuzz=1.0)

        seed_random(11)
        colors = [trace_ray((0.0, 0.0, 0.0), (1.0, -0.02, 0.0), 10) for _ in range(200)]
        assert any(c == (0.0, 0.0, 0.0) for c in colors)

    def test_glass_never_darkens_sky(self):
        """Test a ray through a dielectric returns a sky color (attenuation 1)."""
        from src.raytracer.core.integrator import trace_ray
        from src.raytracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_dielectric_sphere((0.0, 0.0, -3.0), 1.0, 1.5)

        color = np.array(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 50))
        # Every sky color has blue == 1
        assert color[2] == pytest.approx(1.0)

    def test_diffuse_attenuates_below_sky(self):
        from src.raytracer.core.integrator import trace_ray
        from src.raytracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, 0.0, -2.0), 0.5, (0.5, 0.5, 0.5))

        color = np.array(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 50))
        assert np.all(color <= 0.5 + 1e-12)
        assert np.all(color > 0.0)


class TestRenderScanline:
    """Tests for scanline rendering."""

    def test_scanline_values_in_byte_range(self):
        from src.raytracer.core.integrator import render_scanline
        from src.raytracer.scene.demo import create_two_sphere_scene

        scene, camera = create_two_sphere_scene(samples_per_pixel=2, max_depth=5, image_width=32)
        geometry = camera.initialize()
        scene.sync()

        row = render_scanline(geometry.image_height // 2, 32, 2, 0.5, 5)
        assert row.shape == (32, 3)
        assert row.min() >= 0
        assert row.max() <= 255

    def test_sky_scanline_is_gradient(self):
        """Test the top row of an empty scene matches the gamma-encoded sky."""
        from src.raytracer.camera.camera import Camera
        from src.raytracer.core.integrator import render_scanline
        from src.raytracer.scene.manager import SceneManager

        SceneManager().sync()
        Camera(image_width=16).initialize()
        row = render_scanline(0, 16, 1, 1.0, 10)
        # Blue channel of every sky color is 1.0 -> 255
        assert np.all(row[:, 2] == 255)
        assert np.all(row[:, 0] >= 180)

    @pytest.mark.parametrize("width", [0, 100000])
    def test_width_out_of_range(self, width):
        from src.raytracer.core.integrator import render_scanline

        with pytest.raises(ValueError):
            render_scanline(0, width, 1, 1.0, 1)

    def test_render_sample_returns_linear_color(self):
        from src.raytracer.camera.camera import Camera
        from src.raytracer.core.integrator import render_sample
        from src.raytracer.scene.manager import SceneManager

        SceneManager()
        Camera(image_width=16).initialize()
        r, g, b = render_sample(8, 0, 10)
        assert b == pytest.approx(1.0)
        assert 0.5 <= r <= 1.0
