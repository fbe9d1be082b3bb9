"""Pytest configuration for marchtrace tests.

Shared fixtures: a seeded random generator, a few small scenes and a cheap
render configuration. Taichi is only needed by the interactive preview
tests, so it is initialized lazily through the ``taichi_cpu`` fixture.
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """A seeded generator so stochastic tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def fast_config():
    """A render configuration small enough for whole-frame tests."""
    from marchtrace.core.config import DEFAULT_CONFIG

    return DEFAULT_CONFIG.with_overrides(max_bounces=2, samples=2)


@pytest.fixture
def empty_scene():
    """A scene with no geometry and the default white sky."""
    from marchtrace.scene.scene import Scene

    return Scene()


@pytest.fixture
def diffuse_sphere_scene():
    """A grey diffuse marchable sphere in front of the camera, white sky."""
    from marchtrace.camera.pinhole import PinholeCamera
    from marchtrace.geometry.sdf import SdfSphere
    from marchtrace.materials.material import Material
    from marchtrace.scene.scene import Scene

    grey = Material(color=(0.5, 0.5, 0.5))
    return Scene(
        marchables=(SdfSphere(center=(0.0, 0.0, -3.0), radius=1.0, surface=grey),),
        camera=PinholeCamera(origin=(0.0, 0.0, 0.0), vfov=60.0),
    )


@pytest.fixture
def mixed_scene():
    """One marchable and one traceable sphere side by side."""
    from marchtrace.camera.pinhole import PinholeCamera
    from marchtrace.geometry.sdf import SdfSphere
    from marchtrace.geometry.sphere import Sphere
    from marchtrace.materials.material import Material
    from marchtrace.scene.scene import Scene

    red = Material(color=(0.8, 0.1, 0.1))
    mirror = Material(color=(0.9, 0.9, 0.9), metallic=1.0)
    return Scene(
        marchables=(SdfSphere(center=(-1.0, 0.0, -4.0), radius=1.0, surface=red),),
        traceables=(Sphere(center=(1.0, 0.0, -4.0), radius=1.0, surface=mirror),),
        camera=PinholeCamera(origin=(0.0, 0.0, 0.0), vfov=60.0),
    )


@pytest.fixture(scope="session")
def taichi_cpu():
    """Initialize Taichi on the CPU once for the session.

    Using session scope prevents multiple ti.init() calls which can cause
    Taichi runtime conflicts.
    """
    import taichi as ti

    ti.init(arch=ti.cpu, random_seed=42)
    yield ti
