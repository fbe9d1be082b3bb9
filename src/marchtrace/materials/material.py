"""Layered material model.

A Material carries the weights the shading integrator blends with. The
weights are interpreted as blend factors and are never clamped during
shading; construction validates them instead, so an out-of-range value is
reported where it was introduced.

Two sentinels exist:
    sky: The material resolved for rays that escape the scene. Its
        ``color * emission`` is the only source of ambient light.
    blank: An all-zero placeholder used when no object owns a hit.

Example:
    >>> from marchtrace.materials.material import Material
    >>> chrome = Material(color=(0.95, 0.93, 0.88), metallic=1.0, roughness=0.1)
    >>> Material.sky(color=(0.6, 0.7, 1.0)).emission
    1.0
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from marchtrace.core.ray import Vec3, as_vec3

# Default refractive index reserved for the transmission extension (glass)
DEFAULT_REFRACTIVE_INDEX = 1.5

_UNIT_WEIGHTS = ("metallic", "roughness", "transmission", "specular")


def _color_field(value: Sequence[float] | Vec3) -> Vec3:
    color = as_vec3(value).copy()
    color.flags.writeable = False
    return color


@dataclass(frozen=True, eq=False)
class Material:
    """Surface appearance as a set of blend weights.

    Attributes:
        color: Non-negative RGB albedo / radiance.
        emission: Weight toward pure emissive output (>= 0). Values above 1
            act as an intensity multiplier on ``color``.
        metallic: Blend between the dielectric layer and tinted specular.
        roughness: Spread of specular reflection; 0 is a perfect mirror.
        transmission: Blend between transmission and diffuse.
        specular: Weight of the additive specular layer.
        refractive_index: Index of refraction for the transmission extension.
    """

    color: Vec3 = (0.0, 0.0, 0.0)  # type: ignore[assignment]
    emission: float = 0.0
    metallic: float = 0.0
    roughness: float = 0.0
    transmission: float = 0.0
    specular: float = 0.0
    refractive_index: float = DEFAULT_REFRACTIVE_INDEX

    def __post_init__(self) -> None:
        color = _color_field(self.color)
        if np.any(color < 0.0):
            raise ValueError(f"Material color components must be non-negative, got {color}")
        object.__setattr__(self, "color", color)

        if self.emission < 0.0:
            raise ValueError(f"Material emission must be non-negative, got {self.emission}")
        for name in _UNIT_WEIGHTS:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Material {name} must be in [0, 1], got {value}")
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Material refractive_index must be positive, got {self.refractive_index}"
            )

    @property
    def emitted(self) -> Vec3:
        """The pure emissive radiance ``color * emission``."""
        return self.color * self.emission

    @classmethod
    def sky(
        cls,
        color: Sequence[float] = (1.0, 1.0, 1.0),
        emission: float = 1.0,
    ) -> Material:
        """Create the background material resolved for escaping rays."""
        return cls(color=color, emission=emission)

    @classmethod
    def blank(cls) -> Material:
        """Return the shared all-zero placeholder material."""
        return _BLANK

    def __repr__(self) -> str:
        r, g, b = (float(c) for c in self.color)
        return (
            f"Material(color=({r:g}, {g:g}, {b:g}), emission={self.emission:g}, "
            f"metallic={self.metallic:g}, roughness={self.roughness:g}, "
            f"transmission={self.transmission:g}, specular={self.specular:g})"
        )


# The one blank instance, so every miss carries the identical material
_BLANK = Material()
