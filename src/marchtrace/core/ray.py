"""Ray data structure, vector utilities and sampling for CPU ray tracing.

This module provides the Ray dataclass and the vector helpers shared by the
solvers and the shading integrator. Vectors are NumPy float64 arrays of shape
(3,). Random sampling never touches global state: every sampling function
takes an explicit ``numpy.random.Generator`` so seeding stays controllable.

Example:
    >>> import numpy as np
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> ray.point_at(5.0)  # Point 5 units along the ray
    array([ 0.,  0., -5.])
    >>> rng = np.random.default_rng(7)
    >>> length_squared(sample_unit_ball(rng)) < 1.0
    True
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from marchtrace.errors import SamplingError

# Type alias for 3D vectors
Vec3 = npt.NDArray[np.float64]

# Attempts allowed before rejection sampling is declared broken
MAX_REJECTION_ATTEMPTS = 1000


def vec3(x: float, y: float, z: float) -> Vec3:
    """Build a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: Sequence[float] | Vec3) -> Vec3:
    """Convert a length-3 sequence to a float64 vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    result = np.asarray(value, dtype=np.float64)
    if result.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {result.shape}")
    return result


# =============================================================================
# Ray
# =============================================================================


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Must be unit length wherever the
            solvers consume it; sphere marching accumulates distance along it.
    """

    origin: Vec3
    direction: Vec3

    def point_at(self, t: float) -> Vec3:
        """Compute the point ``origin + direction * t``."""
        return self.origin + self.direction * t

    @classmethod
    def towards(cls, origin: Sequence[float] | Vec3, direction: Sequence[float] | Vec3) -> Ray:
        """Create a ray, normalizing the direction.

        Raises:
            ValueError: If the direction is the zero vector.
        """
        return cls(origin=as_vec3(origin), direction=normalize(as_vec3(direction)))


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector."""
    return dot(v, v)


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(length_squared(v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Raises:
        ValueError: If the vector has zero length. Normalizing it is
            undefined, so callers must guard against it.
    """
    magnitude = length(v)
    if magnitude == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return v / magnitude


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal: ``v - 2 (v . n) n``.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def refract(incident: Vec3, normal: Vec3, ni_over_nt: float) -> Vec3 | None:
    """Refract an incident vector through a surface using Snell's law.

    The incident vector is normalized first. With ``dt = uv . n`` the
    discriminant is ``1 - ni_over_nt^2 * (1 - dt^2)``.

    Args:
        incident: The incoming direction.
        normal: The surface normal (unit length, facing the incident side).
        ni_over_nt: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction, or None when the discriminant is not
        positive (total internal reflection). Callers must then fall back
        to pure reflection; see reflect_or_refract().
    """
    uv = normalize(incident)
    dt = dot(uv, normal)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant <= 0.0:
        return None
    return ni_over_nt * (uv - normal * dt) - normal * math.sqrt(discriminant)


def reflect_or_refract(incident: Vec3, normal: Vec3, ni_over_nt: float) -> Vec3:
    """Refract when possible, otherwise reflect (total internal reflection)."""
    refracted = refract(incident, normal, ni_over_nt)
    if refracted is None:
        return reflect(incident, normal)
    return refracted


def fresnel(cosine: float, refractive_index_ratio: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        refractive_index_ratio: Ratio of refractive indices.

    Returns:
        The approximate reflectance ``r0 + (1 - r0) (1 - cosine)^5``.
    """
    r0 = (1.0 - refractive_index_ratio) / (1.0 + refractive_index_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def sample_unit_ball(rng: np.random.Generator) -> Vec3:
    """Generate a uniformly distributed point inside the unit ball.

    Draws three uniform values in [-1, 1] and retries while the squared
    length is >= 1. The accepted point is not projected onto the sphere.

    Args:
        rng: The random source.

    Returns:
        A random point with squared length < 1.

    Raises:
        SamplingError: If no point is accepted within MAX_REJECTION_ATTEMPTS
            draws, which only happens with a broken random source.
    """
    for _ in range(MAX_REJECTION_ATTEMPTS):
        point = rng.uniform(-1.0, 1.0, size=3)
        if length_squared(point) < 1.0:
            return point
    raise SamplingError(
        f"Unit ball rejection sampling failed after {MAX_REJECTION_ATTEMPTS} attempts"
    )
