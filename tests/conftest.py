"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import matplotlib
import pytest

from pathtracer.core.sampling import RandomSource

# Preview tests must never open a window
matplotlib.use("Agg")


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Goes through init_backend() so later calls, such as the CLI's, reuse
    this runtime and the fields declared by pathtracer.accel modules.
    """
    from pathtracer.accel import init_backend

    init_backend(arch="cpu", seed=42)
    yield


@pytest.fixture
def rng() -> RandomSource:
    """A seeded random source so sampled results are reproducible."""
    return RandomSource(seed=12345)


@pytest.fixture
def clean_accel():
    """Clear the parallel backend's scene and render target around a test."""
    # Import here so the fields are declared after ti.init()
    from pathtracer.accel.integrator import clear_render_target
    from pathtracer.accel.scene import clear_scene

    clear_scene()
    clear_render_target()
    yield
    clear_scene()
    clear_render_target()
