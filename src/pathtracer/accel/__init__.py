"""Data-parallel render backend built on Taichi kernels.

This package renders the same scenes and cameras as the reference renderer,
one sample per pixel per kernel launch, on CPU or GPU:

Components:
    vecmath: Vector and random sampling utilities (ti.func)
    scene: Sphere and material table fields plus scene intersection
    materials: Scatter functions and material dispatch (ti.func)
    integrator: Camera fields, render target and the path tracing kernel
    renderer: ParallelRenderer, the Python-facing progressive renderer

Materials live in a per-scene table of tagged variants (MaterialType)
referenced by index from each sphere, and the integrator is an iterative
loop carrying a throughput accumulator.

Taichi must be initialized before importing the submodules that declare
fields (scene, integrator, renderer). Use init_backend() or call ti.init()
yourself, then import:

    >>> from pathtracer.accel import init_backend
    >>> init_backend(arch="cpu", seed=42)
    >>> from pathtracer.accel.renderer import ParallelRenderer

Note: scene, integrator and renderer are NOT imported here for that reason.
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

ARCHES = ("cpu", "gpu")

# (requested arch, seed) of the first init_backend() call, None until then
_initialized_with: tuple[str, int | None] | None = None


def init_backend(arch: str = "cpu", seed: int | None = None) -> None:
    """Initialize the Taichi runtime once per process.

    A second ti.init() would invalidate every field the backend modules have
    already declared, so later calls keep the running runtime. A later call
    asking for a different arch or seed logs a warning and is otherwise
    ignored; seed=None accepts whatever seed is in use.

    Args:
        arch: "cpu" or "gpu". A GPU request falls back to CPU when no GPU
            backend can be initialized.
        seed: Optional seed for ti.random, for reproducible renders.

    Raises:
        ValueError: If arch is not one of ARCHES.
    """
    global _initialized_with

    if arch not in ARCHES:
        raise ValueError(f"Unknown arch {arch!r}, expected one of {ARCHES}")

    if _initialized_with is not None:
        first_arch, first_seed = _initialized_with
        if arch != first_arch or (seed is not None and seed != first_seed):
            logger.warning(
                "Taichi already initialized with arch=%s seed=%s, ignoring arch=%s seed=%s",
                first_arch,
                first_seed,
                arch,
                seed,
            )
        else:
            logger.debug("Taichi already initialized, reusing runtime")
        return

    kwargs = {}
    if seed is not None:
        kwargs["random_seed"] = seed

    _initialized_with = (arch, seed)
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu, **kwargs)
            logger.info("Using GPU backend")
            return
        except Exception as e:
            logger.warning("GPU backend unavailable (%s), falling back to CPU", e)

    ti.init(arch=ti.cpu, **kwargs)
    logger.info("Using CPU backend")


def is_initialized() -> bool:
    """Return True once init_backend() has set up the runtime."""
    return _initialized_with is not None


__all__ = ["ARCHES", "init_backend", "is_initialized"]
