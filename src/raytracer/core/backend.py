"""Taichi backend initialization.

Every module that declares Taichi fields must be imported after
``init_taichi`` has run, because ``ti.init`` resets the runtime and drops any
field declared before it. The renderer works in double precision throughout,
so the backend is always initialized with ``default_fp=ti.f64``.

Example:
    >>> from src.raytracer.core.backend import init_taichi
    >>> init_taichi("cpu")
    'cpu'
    >>> from src.raytracer.scene.manager import SceneManager  # safe now
"""

import taichi as ti
from taichi.lang.impl import current_cfg

SUPPORTED_ARCHS = ("cpu", "gpu")

# Host architectures Taichi resolves ti.cpu to
_CPU_ARCHS = (ti.x64, ti.arm64)


def init_taichi(arch: str = "cpu", seed: int = 0, debug: bool = False) -> str:
    """Initialize the Taichi runtime for rendering.

    Args:
        arch: Requested backend, "cpu" or "gpu". Taichi falls back to the CPU
            backend on its own when no usable GPU is found.
        seed: Seed for Taichi's own generator. Rendering draws from the
            explicit generator in ``core.sampling`` instead, so this only
            affects code that calls ``ti.random`` directly.
        debug: Enable Taichi debug mode (bounds checks, slower kernels).

    Returns:
        The name of the backend that was actually initialized.

    Raises:
        ValueError: If arch is not one of SUPPORTED_ARCHS.
    """
    if arch not in SUPPORTED_ARCHS:
        raise ValueError(f"Unknown backend '{arch}', expected one of {SUPPORTED_ARCHS}")

    ti_arch = ti.gpu if arch == "gpu" else ti.cpu
    ti.init(arch=ti_arch, default_fp=ti.f64, random_seed=seed, debug=debug)

    return "cpu" if current_cfg().arch in _CPU_ARCHS else "gpu"
