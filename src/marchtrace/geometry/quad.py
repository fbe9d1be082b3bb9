"""Traceable quad (parallelogram) with ray-quad intersection.

A quad is defined by:
- corner: A corner point Q of the quad
- u: Edge vector from Q to an adjacent corner
- v: Edge vector from Q to the other adjacent corner

The quad spans the parallelogram from Q to Q+u+v. Its plane normal is
normalize(cross(u, v)) by the right-hand rule.

Ray-quad intersection uses the parametric plane test:
1. Find where the ray intersects the plane containing the quad
2. Check if the intersection point lies within the quad bounds

Example:
    >>> from marchtrace.geometry.quad import Quad
    >>> # Floor quad at y=0, spanning x=[0,1] and z=[0,1]
    >>> floor = Quad(corner=(0, 0, 0), u=(1, 0, 0), v=(0, 0, 1))
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from marchtrace.core.config import EPSILON
from marchtrace.core.ray import Ray, Vec3, as_vec3, dot
from marchtrace.geometry.base import Traceable, TraceHit, trace_miss
from marchtrace.materials.material import Material


@dataclass(frozen=True, eq=False)
class Quad(Traceable):
    """A parallelogram defined by a corner point and two edge vectors.

    Attributes:
        corner: The corner point Q.
        u: Edge vector from Q to an adjacent corner.
        v: Edge vector from Q to the other adjacent corner.
        surface: The material of the quad.
        t_min: Hits at or below this distance are ignored.
    """

    corner: Vec3
    u: Vec3
    v: Vec3
    surface: Material = field(default_factory=Material.blank)
    t_min: float = EPSILON

    def __post_init__(self) -> None:
        corner, u, v = as_vec3(self.corner), as_vec3(self.u), as_vec3(self.v)
        n = np.cross(u, v)
        n_dot_n = dot(n, n)
        if n_dot_n <= 1e-20:
            raise ValueError("Quad edges must not be parallel")

        object.__setattr__(self, "corner", corner)
        object.__setattr__(self, "u", u)
        object.__setattr__(self, "v", v)

        # Plane frame: unit normal, plane offset D, and the dual vectors
        # w_u, w_v satisfying dot(w_u, u) = 1, dot(w_u, v) = 0 and
        # dot(w_v, u) = 0, dot(w_v, v) = 1
        normal = n / np.sqrt(n_dot_n)
        object.__setattr__(self, "_normal", normal)
        object.__setattr__(self, "_offset", dot(normal, corner))
        object.__setattr__(self, "_w_u", np.cross(v, n) / n_dot_n)
        object.__setattr__(self, "_w_v", np.cross(n, u) / n_dot_n)

    @property
    def normal(self) -> Vec3:
        """The right-hand-rule unit normal of the quad's plane."""
        return self._normal  # type: ignore[attr-defined]

    def trace(self, ray: Ray) -> TraceHit:
        """Intersect the quad.

        Solves ``origin + t * direction = Q + alpha * u + beta * v`` by taking
        the dot product with the plane normal, then checks that
        ``0 <= alpha, beta <= 1``. The returned normal faces the incoming ray.
        """
        normal = self.normal
        denom = dot(normal, ray.direction)
        if abs(denom) < 1e-12:
            return trace_miss(ray)

        t = (self._offset - dot(normal, ray.origin)) / denom  # type: ignore[attr-defined]
        if t <= self.t_min:
            return trace_miss(ray)

        p_minus_q = ray.point_at(t) - self.corner
        alpha = dot(self._w_u, p_minus_q)  # type: ignore[attr-defined]
        beta = dot(self._w_v, p_minus_q)  # type: ignore[attr-defined]
        if not (0.0 <= alpha <= 1.0 and 0.0 <= beta <= 1.0):
            return trace_miss(ray)

        # Back face hit when ray and normal point the same way
        return TraceHit(True, t, -normal if denom > 0.0 else normal)

    def material(self) -> Material:
        return self.surface
