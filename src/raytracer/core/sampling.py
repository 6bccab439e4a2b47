"""Explicit random source for Monte Carlo sampling.

Rendering does not use ``ti.random``. It draws from a 32-bit xorshift
generator whose state lives in a Taichi field, so a render is a pure function
of the scene, the camera configuration, and the seed. The camera reseeds the
generator from ``Camera.seed`` at the start of every render, and the render
loop is serialized, so draws always happen in the same order.

Seeding policy:
    ``seed_random(seed)`` accepts any Python integer. The seed is mixed with a
    multiplicative hash and reduced to 32 bits; a zero state (the one fixed
    point of xorshift) is replaced by a constant.

Example:
    >>> from src.raytracer.core.sampling import seed_random, random_unit_vector
    >>> seed_random(1234)
    >>> # Use random_unit_vector() within a Taichi kernel
"""

import taichi as ti

from src.raytracer.core.ray import length_squared, vec3

# Knuth multiplicative hash constant and the fallback for a zero state
_SEED_MULTIPLIER = 2654435761
_ZERO_STATE_REPLACEMENT = 0x6D2B79F5

# Scale mapping the top 24 bits of a draw onto [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0

# Generator state (single stream, advanced serially)
_rng_state = ti.field(dtype=ti.u32, shape=())


def seed_random(seed: int) -> None:
    """Reset the generator to a state derived from seed.

    Args:
        seed: Any integer. Equal seeds give equal sequences.
    """
    state = ((seed & 0xFFFFFFFF) * _SEED_MULTIPLIER + 1) & 0xFFFFFFFF
    if state == 0:
        state = _ZERO_STATE_REPLACEMENT
    _rng_state[None] = state


def get_random_state() -> int:
    """Get the current generator state (for checkpointing and tests)."""
    return int(_rng_state[None])


@ti.func
def _next_u32() -> ti.u32:
    """Advance the xorshift32 generator and return the new state."""
    x = _rng_state[None]
    x ^= x << ti.u32(13)
    x ^= ti.bit_shr(x, ti.u32(17))
    x ^= x << ti.u32(5)
    _rng_state[None] = x
    return x


@ti.func
def random_double() -> ti.f64:
    """Return a uniform random number in [0, 1)."""
    bits = ti.bit_shr(_next_u32(), ti.u32(8))
    return ti.cast(bits, ti.f64) * _INV_2_POW_24


@ti.func
def random_range(lo: ti.f64, hi: ti.f64) -> ti.f64:
    """Return a uniform random number in [lo, hi)."""
    return lo + (hi - lo) * random_double()


@ti.func
def random_vec3() -> vec3:
    """Return a vector with each component uniform in [0, 1)."""
    x = random_double()
    y = random_double()
    z = random_double()
    return vec3(x, y, z)


@ti.func
def random_vec3_range(lo: ti.f64, hi: ti.f64) -> vec3:
    """Return a vector with each component uniform in [lo, hi)."""
    x = random_range(lo, hi)
    y = random_range(lo, hi)
    z = random_range(lo, hi)
    return vec3(x, y, z)


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere.

    Uses rejection sampling inside the unit ball, then normalizes. Points too
    close to the center are rejected as well, since normalizing them would
    overflow.

    Returns:
        A random unit vector.
    """
    result = vec3(0.0, 0.0, 1.0)
    while True:
        p = random_vec3_range(-1.0, 1.0)
        lensq = length_squared(p)
        if 1e-160 < lensq and lensq <= 1.0:
            result = p / ti.sqrt(lensq)
            break
    return result


@ti.func
def sample_square() -> vec3:
    """Return an offset to a random point in the [-0.5, 0.5] unit square.

    The z component is always zero.
    """
    x = random_double() - 0.5
    y = random_double() - 0.5
    return vec3(x, y, 0.0)
