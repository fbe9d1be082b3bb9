"""Scene module for scene description and ray-scene queries.

Components:
    scene: Immutable Scene container and SceneBuilder
    hit_record: CastResult, the authoritative answer to a ray query
    march: Sphere-marching solver over the implicit surfaces
    intersection: Nearest-hit solver over the analytic primitives and the
        dispatcher reconciling both solvers
    demo: Demo scene mixing both kinds of geometry
"""

from .demo import DemoSceneParams, create_demo_scene
from .hit_record import CastResult
from .intersection import cast_ray, hit_trace
from .march import combined_sdf, estimate_normal, hit_march
from .scene import Scene, SceneBuilder

__all__ = [
    # Scene description
    "Scene",
    "SceneBuilder",
    # Queries
    "CastResult",
    "cast_ray",
    "hit_trace",
    "hit_march",
    "combined_sdf",
    "estimate_normal",
    # Demo scene
    "DemoSceneParams",
    "create_demo_scene",
]
