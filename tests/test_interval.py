"""Unit tests for the interval module.

Tests cover:
- size, contains (closed) and surrounds (strict)
- clamp saturation and idempotence
"""

import pytest
import taichi as ti


def _run_interval_query(query_name: str, lo: float, hi: float, x: float):
    """Evaluate an interval query with one argument inside a kernel."""
    from src.raytracer.core import interval as interval_module

    query = getattr(interval_module, query_name)
    result = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(lo: ti.f64, hi: ti.f64, x: ti.f64):
        result[None] = query(interval_module.Interval(min=lo, max=hi), x)

    test_kernel(lo, hi, x)
    return result[None]


class TestIntervalQueries:
    """Tests for size, contains and surrounds."""

    def test_size(self):
        from src.raytracer.core.interval import Interval, interval_size

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = interval_size(Interval(min=-1.5, max=2.0))

        test_kernel()
        assert result[None] == pytest.approx(3.5)

    @pytest.mark.parametrize(
        ("x", "expected"),
        [(0.0, 1), (1.0, 1), (0.5, 1), (-1e-9, 0), (1.0 + 1e-9, 0)],
    )
    def test_contains_is_closed(self, x, expected):
        assert _run_interval_query("interval_contains", 0.0, 1.0, x) == expected

    @pytest.mark.parametrize(
        ("x", "expected"),
        [(0.0, 0), (1.0, 0), (0.5, 1), (1e-9, 1)],
    )
    def test_surrounds_is_strict(self, x, expected):
        assert _run_interval_query("interval_surrounds", 0.0, 1.0, x) == expected

    def test_surrounds_with_infinite_upper_bound(self):
        assert _run_interval_query("interval_surrounds", 0.001, float("inf"), 1e12) == 1

    def test_empty_interval_contains_nothing(self):
        """Test an inverted interval (min > max) contains no value."""
        inf = float("inf")
        assert _run_interval_query("interval_contains", inf, -inf, 0.0) == 0
        assert _run_interval_query("interval_surrounds", inf, -inf, 0.0) == 0


class TestIntervalClamp:
    """Tests for interval_clamp."""

    @pytest.mark.parametrize(
        ("x", "expected"),
        [(-2.0, 0.0), (0.0, 0.0), (0.3, 0.3), (0.999, 0.999), (5.0, 0.999)],
    )
    def test_clamp(self, x, expected):
        assert _run_interval_query("interval_clamp", 0.0, 0.999, x) == pytest.approx(expected)

    @pytest.mark.parametrize("x", [-3.0, 0.1, 0.5, 7.0])
    def test_clamp_is_idempotent(self, x):
        once = _run_interval_query("interval_clamp", 0.0, 0.999, x)
        twice = _run_interval_query("interval_clamp", 0.0, 0.999, once)
        assert twice == once
