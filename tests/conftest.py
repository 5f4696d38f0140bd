"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field allocated so far.
    """
    from src.ray3d.config import initialize_taichi

    initialize_taichi("cpu")
    yield


@pytest.fixture(scope="session")
def renderer(init_taichi_session):
    """A FrameRenderer shared by the session so kernels compile once.

    Every render and probe call uploads its own scene, so tests cannot
    leak state into each other through it.
    """
    from src.ray3d.core.renderer import FrameRenderer

    return FrameRenderer()


@pytest.fixture
def floor_only_scene():
    """The default floor with no spheres."""
    from src.ray3d.scene.model import SceneDescription

    return SceneDescription(spheres=())


@pytest.fixture
def mirror_corridor_scene():
    """Two facing perfect mirrors on the z axis, no floor."""
    from src.ray3d.scene.model import SceneDescription, SphereInfo

    return SceneDescription(
        spheres=(
            SphereInfo(center=(0.0, 0.0, -3.0), radius=1.0, color=(255, 0, 0), reflectivity=1.0),
            SphereInfo(center=(0.0, 0.0, 3.0), radius=1.0, color=(0, 0, 255), reflectivity=1.0),
        ),
        floor=None,
    )
