"""Scene container and builder.

A Scene owns two ordered, disjoint collections (marchables and traceables),
a camera and the sky material used for rays that escape. It is immutable:
build it once with SceneBuilder (or directly) and share it read-only across
render calls and worker processes.

Example:
    >>> from marchtrace.scene.scene import SceneBuilder
    >>> from marchtrace.geometry.sdf import SdfSphere
    >>> from marchtrace.geometry.sphere import Sphere
    >>> scene = (
    ...     SceneBuilder()
    ...     .add_marchable(SdfSphere(center=(0, 0, -3), radius=1.0))
    ...     .add_traceable(Sphere(center=(2, 0, -3), radius=0.5))
    ...     .build()
    ... )
    >>> len(scene.marchables), len(scene.traceables)
    (1, 1)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from marchtrace.camera.pinhole import PinholeCamera
from marchtrace.geometry.base import Marchable, Traceable
from marchtrace.materials.material import Material


@dataclass(frozen=True, eq=False)
class Scene:
    """Read-only scene description.

    Attributes:
        marchables: Implicit surfaces, in tie-break order.
        traceables: Analytic primitives, in tie-break order.
        camera: The camera primary rays are generated from.
        sky: Material resolved for rays that hit nothing.
    """

    marchables: tuple[Marchable, ...] = ()
    traceables: tuple[Traceable, ...] = ()
    camera: PinholeCamera = field(default_factory=PinholeCamera)
    sky: Material = field(default_factory=Material.sky)

    def __post_init__(self) -> None:
        object.__setattr__(self, "marchables", tuple(self.marchables))
        object.__setattr__(self, "traceables", tuple(self.traceables))

    @property
    def is_empty(self) -> bool:
        """True when the scene holds no geometry at all."""
        return not self.marchables and not self.traceables

    def __repr__(self) -> str:
        return (
            f"Scene(marchables={len(self.marchables)}, traceables={len(self.traceables)}, "
            f"camera={self.camera!r}, sky={self.sky!r})"
        )


class SceneBuilder:
    """Incrementally assemble a Scene.

    The builder checks each object against the capability it is added
    under, so a traceable can never end up in the marching set or vice
    versa.
    """

    def __init__(self) -> None:
        self._marchables: list[Marchable] = []
        self._traceables: list[Traceable] = []
        self._camera = PinholeCamera()
        self._sky = Material.sky()

    def add_marchable(self, obj: Marchable) -> SceneBuilder:
        """Add an implicit surface.

        Raises:
            TypeError: If ``obj`` is not a Marchable.
        """
        if not isinstance(obj, Marchable):
            raise TypeError(f"Expected a Marchable, got {type(obj).__name__}")
        self._marchables.append(obj)
        return self

    def add_traceable(self, obj: Traceable) -> SceneBuilder:
        """Add an analytic primitive.

        Raises:
            TypeError: If ``obj`` is not a Traceable.
        """
        if not isinstance(obj, Traceable):
            raise TypeError(f"Expected a Traceable, got {type(obj).__name__}")
        self._traceables.append(obj)
        return self

    def set_camera(self, camera: PinholeCamera) -> SceneBuilder:
        self._camera = camera
        return self

    def set_sky(self, sky: Material) -> SceneBuilder:
        self._sky = sky
        return self

    def build(self) -> Scene:
        """Freeze the collected objects into a Scene."""
        return Scene(
            marchables=tuple(self._marchables),
            traceables=tuple(self._traceables),
            camera=self._camera,
            sky=self._sky,
        )
