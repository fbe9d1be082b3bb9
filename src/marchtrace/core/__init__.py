"""Core rendering module.

Components:
    ray: Ray data structure, vector helpers, reflection/refraction, sampling
    config: Rendering constants and the immutable RenderConfig
    integrator: Recursive stochastic shading integrator
    render: Single-pixel render() and multi-process render_frame()
    progressive: Running-average accumulation of rendered frames

Everything runs on the CPU with NumPy vectors. Randomness is always drawn
from an explicit ``numpy.random.Generator``.
"""

from .config import (
    DEFAULT_CONFIG,
    DEFAULT_VFOV,
    EPSILON,
    FAR_PLANE,
    MAX_BOUNCES,
    MAX_STEPS,
    SAMPLES,
    SPAWN_OFFSET,
    RenderConfig,
)
from .ray import (
    Ray,
    Vec3,
    as_vec3,
    dot,
    fresnel,
    length,
    length_squared,
    normalize,
    reflect,
    reflect_or_refract,
    refract,
    sample_unit_ball,
    vec3,
)

# Note: integrator, render and progressive are NOT imported here to avoid
# circular imports (they depend on marchtrace.scene). Import them directly:
#   from marchtrace.core.render import render, render_frame
#   from marchtrace.core.progressive import ProgressiveRenderer

__all__ = [
    # Ray and vectors
    "Ray",
    "Vec3",
    "vec3",
    "as_vec3",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "reflect_or_refract",
    "fresnel",
    "sample_unit_ball",
    # Configuration
    "RenderConfig",
    "DEFAULT_CONFIG",
    "MAX_STEPS",
    "FAR_PLANE",
    "EPSILON",
    "SPAWN_OFFSET",
    "MAX_BOUNCES",
    "SAMPLES",
    "DEFAULT_VFOV",
]
