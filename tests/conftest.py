"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Scene values are
    double precision, so the default float type is f64.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_render_state():
    """Clear uploaded shapes, lights and the cached scene around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so that fields are created after ti.init()
    from src.whitted.core.integrator import reset_render_state

    reset_render_state()
    yield
    reset_render_state()
