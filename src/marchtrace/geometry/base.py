"""Capability interfaces for the two geometry representations.

Marchable:
    An implicit surface exposing a signed distance ``sdf(point)``. The field
    must be 1-Lipschitz: no evaluation may report the point as farther from
    the surface than it really is, otherwise sphere marching overshoots.

Traceable:
    An analytic primitive exposing an exact ``trace(ray)`` that returns
    ``(hit, distance, normal)``.

Both expose ``material()``. Scenes hold these objects by reference and the
renderer only reads them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple

from marchtrace.core.ray import Ray, Vec3
from marchtrace.materials.material import Material


class TraceHit(NamedTuple):
    """Result of a single analytic intersection query."""

    hit: bool
    distance: float
    normal: Vec3


def trace_miss(ray: Ray) -> TraceHit:
    """A TraceHit reporting no intersection."""
    return TraceHit(False, float("inf"), ray.direction)


class Marchable(ABC):
    """An implicit surface intersected by sphere marching."""

    @abstractmethod
    def sdf(self, point: Vec3) -> float:
        """Signed distance from ``point`` to the surface (negative inside)."""

    @abstractmethod
    def material(self) -> Material:
        """The material of the surface."""


class Traceable(ABC):
    """An analytic primitive with closed-form ray intersection."""

    @abstractmethod
    def trace(self, ray: Ray) -> TraceHit:
        """Intersect the primitive with ``ray`` (unit direction)."""

    @abstractmethod
    def material(self) -> Material:
        """The material of the surface."""
