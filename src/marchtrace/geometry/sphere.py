"""Traceable sphere with robust ray-sphere intersection.

The intersection uses the robust quadratic formula from Ray Tracing Gems to
avoid catastrophic cancellation when ``h^2`` is nearly equal to ``a*c``.

Example:
    >>> from marchtrace.core.ray import Ray
    >>> from marchtrace.geometry.sphere import Sphere
    >>> sphere = Sphere(center=(0.0, 0.0, 0.0), radius=1.0)
    >>> sphere.trace(Ray.towards((0, 0, 5), (0, 0, -1))).distance
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from marchtrace.core.config import EPSILON
from marchtrace.core.ray import Ray, Vec3, as_vec3, dot
from marchtrace.geometry.base import Traceable, TraceHit, trace_miss
from marchtrace.materials.material import Material


def _solve_quadratic_robust(h: float, a: float, c: float, sqrt_d: float) -> tuple[float, float]:
    """Solve ``a*t^2 + 2*h*t + c = 0`` with a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)

    if abs(q) < 1e-12:
        # Tangent ray through a degenerate q: fall back to the standard formula
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


@dataclass(frozen=True, eq=False)
class Sphere(Traceable):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        surface: The material of the sphere.
        t_min: Roots at or below this distance are ignored.
    """

    center: Vec3
    radius: float
    surface: Material = field(default_factory=Material.blank)
    t_min: float = EPSILON

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center))
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    def trace(self, ray: Ray) -> TraceHit:
        """Intersect the sphere, returning the nearest root beyond t_min.

        The ray-sphere intersection solves
        ``|origin + t * direction - center|^2 = radius^2``, expanded into
        ``a*t^2 + 2*h*t + c = 0`` with ``oc = origin - center``,
        ``a = d . d``, ``h = d . oc`` and ``c = oc . oc - r^2``.

        The returned normal is the analytic normal ``(p - c) / r``, flipped to
        face the incoming ray when the ray starts inside the sphere.
        """
        oc = ray.origin - self.center
        a = dot(ray.direction, ray.direction)
        h = dot(ray.direction, oc)
        c = dot(oc, oc) - self.radius * self.radius

        discriminant = h * h - a * c
        if discriminant < 0.0:
            return trace_miss(ray)

        t0, t1 = _solve_quadratic_robust(h, a, c, math.sqrt(discriminant))
        t = t0 if t0 > self.t_min else t1
        if t <= self.t_min:
            return trace_miss(ray)

        outward = (ray.point_at(t) - self.center) / self.radius
        if dot(ray.direction, outward) > 0.0:
            return TraceHit(True, t, -outward)
        return TraceHit(True, t, outward)

    def material(self) -> Material:
        return self.surface

