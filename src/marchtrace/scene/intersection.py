"""Scene-level intersection: trace solver, cast results and hit dispatch.

Two independent solvers answer each intersection query:

- hit_trace() evaluates every analytic primitive and keeps the nearest
  valid hit.
- hit_march() (see scene.march) sphere-marches the combined implicit field.

cast_ray() runs both against their disjoint object sets and reconciles the
two answers into one authoritative CastResult. It only compares results and
does not care how either side produced them.

Example:
    >>> from marchtrace.core.ray import Ray
    >>> from marchtrace.geometry.sphere import Sphere
    >>> from marchtrace.scene.scene import Scene
    >>> from marchtrace.scene.intersection import cast_ray
    >>> scene = Scene(traceables=(Sphere(center=(0, 0, 0), radius=1.0),))
    >>> result = cast_ray(scene, Ray.towards((0, 0, 5), (0, 0, -1)))
    >>> result.hit, result.distance
    (True, 4.0)
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from marchtrace.core.config import DEFAULT_CONFIG, RenderConfig
from marchtrace.core.ray import Ray, Vec3
from marchtrace.geometry.base import Traceable
from marchtrace.scene.hit_record import CastResult
from marchtrace.scene.march import hit_march

if TYPE_CHECKING:
    from marchtrace.scene.scene import Scene


def hit_trace(
    traceables: Sequence[Traceable],
    ray: Ray,
    config: RenderConfig = DEFAULT_CONFIG,
) -> CastResult:
    """Find the nearest valid analytic hit.

    A candidate counts only if it reports a hit, lies strictly beyond
    ``config.epsilon`` (self-intersection guard) and is strictly nearer than
    the best so far, so earlier objects win ties.

    Args:
        traceables: The analytic primitives, in tie-break order.
        ray: The query ray (unit direction).
        config: Provides the surface tolerance.

    Returns:
        The nearest hit, or CastResult.worst(ray).
    """
    best_distance = math.inf
    best: tuple[Vec3, Traceable] | None = None

    for obj in traceables:
        hit, distance, normal = obj.trace(ray)
        if hit and distance > config.epsilon and distance < best_distance:
            best_distance = distance
            best = (normal, obj)

    if best is None:
        return CastResult.worst(ray)

    normal, obj = best
    return CastResult(hit=True, distance=best_distance, normal=normal, material=obj.material())


def cast_ray(scene: Scene, ray: Ray, config: RenderConfig = DEFAULT_CONFIG) -> CastResult:
    """Intersect ``ray`` with the whole scene.

    Resolution policy:
        - both solvers miss: the worst sentinel (the integrator resolves
          the sky);
        - exactly one hits: that result;
        - both hit: the trace result if its distance is <= the march
          distance plus epsilon, otherwise the march result. Marching stops
          up to epsilon short of the surface, so distances within epsilon
          are treated as a tie and analytic primitives win ties.

    Args:
        scene: The scene whose marchables and traceables are queried.
        ray: The query ray (unit direction).
        config: Solver tunables.

    Returns:
        The authoritative CastResult. Identical inputs always give identical
        results.
    """
    marched = hit_march(scene.marchables, ray, config)
    traced = hit_trace(scene.traceables, ray, config)

    if not marched.hit and not traced.hit:
        return CastResult.worst(ray)
    if not marched.hit:
        return traced
    if not traced.hit:
        return marched
    return traced if traced.distance <= marched.distance + config.epsilon else marched
