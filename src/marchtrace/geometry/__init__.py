"""Geometry module for shape primitives.

Components:
    base: Marchable and Traceable capability interfaces
    sphere: Analytic sphere (traceable)
    quad: Analytic parallelogram (traceable)
    sdf: Signed-distance primitives (marchable)

Traceables answer ``trace(ray) -> (hit, distance, normal)`` in closed form.
Marchables expose a 1-Lipschitz ``sdf(point)`` and are intersected by sphere
marching in marchtrace.scene.march.
"""

from .base import Marchable, Traceable, TraceHit, trace_miss
from .quad import Quad
from .sdf import SdfBox, SdfPlane, SdfSphere, SdfTorus
from .sphere import Sphere

__all__ = [
    # Capabilities
    "Marchable",
    "Traceable",
    "TraceHit",
    "trace_miss",
    # Traceables
    "Sphere",
    "Quad",
    # Marchables
    "SdfSphere",
    "SdfBox",
    "SdfPlane",
    "SdfTorus",
]
