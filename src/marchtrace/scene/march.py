"""Sphere-marching solver for implicit surfaces.

The combined scene field is the minimum of every marchable's signed
distance, tagged with the material of the minimizing object. Because every
field is 1-Lipschitz, advancing a ray by the current field value can never
step through a surface.

March loop, starting at depth 0 and for at most ``config.max_steps`` steps:
    d <= epsilon            -> HIT at the current depth
    depth >= far_plane      -> MISS
    otherwise               -> depth += d
Running out of steps is also a MISS. Misses are defined outcomes and are
reported as CastResult.worst(ray), never as errors.

Rays leaving a surface must start outside its epsilon shell or they
immediately re-detect it; the shading integrator offsets every secondary
ray origin along the normal by ``config.spawn_offset`` for this reason.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from marchtrace.core.config import DEFAULT_CONFIG, RenderConfig
from marchtrace.core.ray import Ray, Vec3, length
from marchtrace.geometry.base import Marchable
from marchtrace.materials.material import Material
from marchtrace.scene.hit_record import CastResult

_AXES = np.eye(3)


def combined_sdf(marchables: Sequence[Marchable], point: Vec3) -> tuple[float, Material]:
    """Evaluate the combined field at ``point``.

    Args:
        marchables: The implicit surfaces, in tie-break order.
        point: World-space query point.

    Returns:
        ``(distance, material)`` of the nearest object. Ties go to the first
        object reaching the minimum. An empty collection yields
        ``(inf, Material.blank())``.
    """
    best_distance = math.inf
    best: Marchable | None = None
    for obj in marchables:
        distance = obj.sdf(point)
        if distance < best_distance:
            best_distance = distance
            best = obj
    if best is None:
        return math.inf, Material.blank()
    return best_distance, best.material()


def _field(marchables: Sequence[Marchable], point: Vec3) -> float:
    return min(obj.sdf(point) for obj in marchables)


def estimate_normal(
    marchables: Sequence[Marchable],
    point: Vec3,
    epsilon: float,
    fallback: Vec3,
) -> Vec3:
    """Estimate the surface normal by central differences of the field.

    Args:
        marchables: The implicit surfaces.
        point: Point on (or within epsilon of) the surface.
        epsilon: Finite-difference step along each axis.
        fallback: Returned when the gradient vanishes.

    Returns:
        The normalized gradient of the combined field.
    """
    gradient = np.array(
        [
            _field(marchables, point + axis * epsilon) - _field(marchables, point - axis * epsilon)
            for axis in _AXES
        ]
    )
    magnitude = length(gradient)
    if magnitude == 0.0:
        return fallback
    return gradient / magnitude


def hit_march(
    marchables: Sequence[Marchable],
    ray: Ray,
    config: RenderConfig = DEFAULT_CONFIG,
) -> CastResult:
    """Sphere-march ``ray`` against the combined implicit field.

    Args:
        marchables: The implicit surfaces.
        ray: The query ray. Its direction must be unit length because the
            marched depth is accumulated along it.
        config: Step budget, far plane and surface tolerance.

    Returns:
        A hit at the marched depth with the estimated normal and the nearest
        object's material, or CastResult.worst(ray) on a miss.
    """
    if not marchables:
        return CastResult.worst(ray)

    depth = 0.0
    for _ in range(config.max_steps):
        point = ray.point_at(depth)
        distance, material = combined_sdf(marchables, point)

        if distance <= config.epsilon:
            normal = estimate_normal(marchables, point, config.epsilon, -ray.direction)
            return CastResult(hit=True, distance=depth, normal=normal, material=material)

        if depth >= config.far_plane:
            break

        depth += distance

    return CastResult.worst(ray)
