"""Closed numeric intervals for hit distances and color clamping.

An Interval bounds the ray parameters accepted by intersection tests and
saturates color channels before byte conversion. ``min <= max`` is the
caller's responsibility and is not checked.

Example:
    >>> @ti.kernel
    ... def k() -> ti.f64:
    ...     intensity = Interval(min=0.0, max=0.999)
    ...     return interval_clamp(intensity, 1.5)  # 0.999
"""

import taichi as ti


@ti.dataclass
class Interval:
    """A closed range [min, max] of scalar values.

    Attributes:
        min: Lower bound.
        max: Upper bound.
    """

    min: ti.f64
    max: ti.f64


@ti.func
def interval_size(interval: Interval) -> ti.f64:
    """Return max - min."""
    return interval.max - interval.min


@ti.func
def interval_contains(interval: Interval, x: ti.f64) -> ti.i32:
    """Closed membership test: min <= x <= max."""
    return interval.min <= x and x <= interval.max


@ti.func
def interval_surrounds(interval: Interval, x: ti.f64) -> ti.i32:
    """Open membership test: min < x < max.

    Intersection validity uses the strict form so a root sitting exactly on
    a bound, such as the origin of a bounced ray, is rejected.
    """
    return interval.min < x and x < interval.max


@ti.func
def interval_clamp(interval: Interval, x: ti.f64) -> ti.f64:
    """Saturate x to [min, max]."""
    result = x
    if x < interval.min:
        result = interval.min
    elif x > interval.max:
        result = interval.max
    return result
