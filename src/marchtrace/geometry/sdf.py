"""Marchable primitives described by exact signed-distance functions.

Every field here is an exact Euclidean distance (or a lower bound of one), so
it satisfies the 1-Lipschitz requirement sphere marching depends on. Points
are expressed in world space; each primitive stores its own placement.

Example:
    >>> from marchtrace.geometry.sdf import SdfSphere
    >>> from marchtrace.core.ray import vec3
    >>> SdfSphere(center=(0, 0, 0), radius=1.0).sdf(vec3(3.0, 0.0, 0.0))
    2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from marchtrace.core.ray import Vec3, as_vec3, dot, length, normalize
from marchtrace.geometry.base import Marchable
from marchtrace.materials.material import Material


@dataclass(frozen=True, eq=False)
class SdfSphere(Marchable):
    """Sphere field: ``|p - center| - radius``."""

    center: Vec3
    radius: float
    surface: Material = field(default_factory=Material.blank)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center))
        if self.radius <= 0.0:
            raise ValueError(f"SdfSphere radius must be positive, got {self.radius}")

    def sdf(self, point: Vec3) -> float:
        return length(point - self.center) - self.radius

    def material(self) -> Material:
        return self.surface


@dataclass(frozen=True, eq=False)
class SdfBox(Marchable):
    """Axis-aligned box field with exact interior and exterior distance.

    Attributes:
        center: Center of the box.
        half_extents: Half size along each axis (all positive).
        surface: The material of the box.
    """

    center: Vec3
    half_extents: Vec3
    surface: Material = field(default_factory=Material.blank)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center))
        half_extents = as_vec3(self.half_extents)
        if min(half_extents) <= 0.0:
            raise ValueError(f"SdfBox half extents must be positive, got {half_extents}")
        object.__setattr__(self, "half_extents", half_extents)

    def sdf(self, point: Vec3) -> float:
        local = point - self.center
        qx = abs(local[0]) - self.half_extents[0]
        qy = abs(local[1]) - self.half_extents[1]
        qz = abs(local[2]) - self.half_extents[2]
        outside = math.sqrt(max(qx, 0.0) ** 2 + max(qy, 0.0) ** 2 + max(qz, 0.0) ** 2)
        inside = min(max(qx, qy, qz), 0.0)
        return outside + inside

    def material(self) -> Material:
        return self.surface


@dataclass(frozen=True, eq=False)
class SdfPlane(Marchable):
    """Infinite plane field: ``p . normal - offset``.

    Attributes:
        normal: Plane normal (normalized on construction).
        offset: Signed distance of the plane from the origin along normal.
        surface: The material of the plane.
    """

    normal: Vec3
    offset: float = 0.0
    surface: Material = field(default_factory=Material.blank)

    def __post_init__(self) -> None:
        object.__setattr__(self, "normal", normalize(as_vec3(self.normal)))

    def sdf(self, point: Vec3) -> float:
        return dot(point, self.normal) - self.offset

    def material(self) -> Material:
        return self.surface


@dataclass(frozen=True, eq=False)
class SdfTorus(Marchable):
    """Torus lying in the XZ plane around ``center``.

    Attributes:
        center: Center of the torus.
        major_radius: Distance from the center to the tube center line.
        minor_radius: Radius of the tube.
        surface: The material of the torus.
    """

    center: Vec3
    major_radius: float
    minor_radius: float
    surface: Material = field(default_factory=Material.blank)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_vec3(self.center))
        if self.minor_radius <= 0.0 or self.major_radius <= 0.0:
            raise ValueError("SdfTorus radii must be positive")

    def sdf(self, point: Vec3) -> float:
        local = point - self.center
        ring = math.hypot(local[0], local[2]) - self.major_radius
        return math.hypot(ring, local[1]) - self.minor_radius

    def material(self) -> Material:
        return self.surface
