"""Demo scene mixing marched and traced geometry.

The scene exercises both solvers and every material layer:
- Ground plane, torus and box as implicit surfaces (sphere marched)
- A mirror sphere, a rough metal sphere and a ceiling light as analytic
  primitives (traced)
- A dim blue sky that lights everything the ceiling light misses

The camera sits above the ground looking down -z, with the objects laid out
between z = -1 and z = -4.

Example:
    >>> from marchtrace.scene.demo import create_demo_scene
    >>> from marchtrace.core.render import render_frame
    >>>
    >>> scene = create_demo_scene()
    >>> image = render_frame(scene, 160, 120, seed=7)
"""

from __future__ import annotations

from dataclasses import dataclass

from marchtrace.camera.pinhole import PinholeCamera
from marchtrace.geometry.quad import Quad
from marchtrace.geometry.sdf import SdfBox, SdfPlane, SdfTorus
from marchtrace.geometry.sphere import Sphere
from marchtrace.materials.material import Material
from marchtrace.scene.scene import Scene, SceneBuilder

# =============================================================================
# Demo Scene Constants
# =============================================================================

GROUND_COLOR = (0.7, 0.7, 0.7)
BOX_COLOR = (0.65, 0.08, 0.06)
TORUS_COLOR = (0.95, 0.75, 0.3)
MIRROR_COLOR = (0.95, 0.95, 0.95)
ROUGH_METAL_COLOR = (0.35, 0.55, 0.85)

CAMERA_ORIGIN = (0.0, 1.2, 2.5)
CAMERA_VFOV = 70.0


@dataclass
class DemoSceneParams:
    """Tunable parts of the demo scene.

    Attributes:
        light_intensity: Emission of the ceiling light.
        light_color: RGB color of the ceiling light.
        sky_color: RGB color of the sky.
        sky_intensity: Emission of the sky.
        metal_roughness: Roughness of the blue metal sphere.
    """

    light_intensity: float = 4.0
    light_color: tuple[float, float, float] = (1.0, 0.95, 0.85)
    sky_color: tuple[float, float, float] = (0.55, 0.7, 1.0)
    sky_intensity: float = 0.6
    metal_roughness: float = 0.25


def create_demo_scene(params: DemoSceneParams | None = None) -> Scene:
    """Create the demo scene.

    Args:
        params: Optional overrides for lighting and roughness.

    Returns:
        The assembled Scene, camera and sky included.
    """
    if params is None:
        params = DemoSceneParams()

    ground = Material(color=GROUND_COLOR)
    box = Material(color=BOX_COLOR, specular=0.1)
    torus = Material(color=TORUS_COLOR, metallic=0.8, roughness=0.3)
    mirror = Material(color=MIRROR_COLOR, metallic=1.0)
    rough_metal = Material(
        color=ROUGH_METAL_COLOR, metallic=0.6, roughness=params.metal_roughness, specular=0.2
    )
    light = Material(color=params.light_color, emission=params.light_intensity)

    builder = SceneBuilder()

    # Implicit surfaces
    builder.add_marchable(SdfPlane(normal=(0.0, 1.0, 0.0), offset=0.0, surface=ground))
    builder.add_marchable(
        SdfBox(center=(1.6, 0.5, -2.5), half_extents=(0.5, 0.5, 0.5), surface=box)
    )
    builder.add_marchable(
        SdfTorus(center=(-1.6, 0.3, -2.0), major_radius=0.6, minor_radius=0.25, surface=torus)
    )

    # Analytic primitives
    builder.add_traceable(Sphere(center=(0.0, 0.8, -3.0), radius=0.8, surface=mirror))
    builder.add_traceable(Sphere(center=(0.4, 0.35, -1.4), radius=0.35, surface=rough_metal))
    builder.add_traceable(
        Quad(corner=(-1.0, 3.0, -3.5), u=(2.0, 0.0, 0.0), v=(0.0, 0.0, 2.0), surface=light)
    )

    builder.set_camera(PinholeCamera(origin=CAMERA_ORIGIN, vfov=CAMERA_VFOV))
    builder.set_sky(Material.sky(color=params.sky_color, emission=params.sky_intensity))
    return builder.build()
