"""The CastResult record shared by both solvers and the dispatcher."""

from __future__ import annotations

import math
from dataclasses import dataclass

from marchtrace.core.ray import Ray, Vec3
from marchtrace.materials.material import Material


@dataclass(frozen=True, eq=False)
class CastResult:
    """Outcome of one intersection query.

    Attributes:
        hit: Whether anything was intersected.
        distance: Distance along the ray to the hit, or +inf on a miss.
        normal: Unit surface normal at the hit. On a miss this holds the
            incident ray direction as a placeholder.
        material: Material of the surface that was hit, or the blank
            placeholder on a miss.
    """

    hit: bool
    distance: float
    normal: Vec3
    material: Material

    @classmethod
    def worst(cls, ray: Ray) -> CastResult:
        """The definite-miss sentinel for ``ray``."""
        return cls(hit=False, distance=math.inf, normal=ray.direction, material=Material.blank())
