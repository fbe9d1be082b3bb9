"""Pinhole camera model for perspective projection ray generation.

The camera has a position and a vertical field of view only. It always looks
down the -z axis with +y up; no rotation is modelled, so scenes are laid out
in front of the camera along -z.

Pixel coordinates are mapped to primary rays in two steps:
1. centered_uv() divides by the resolution and subtracts 0.5 on both axes,
   giving coordinates in [-0.5, 0.5] with (0, 0) at the image center.
2. make_ray() scales the horizontal axis by the aspect ratio and shoots
   through an image plane at ``z = -1 / tan(fov / 2)``.

Example:
    >>> from marchtrace.camera.pinhole import PinholeCamera, generate_ray
    >>> camera = PinholeCamera(origin=(0.0, 0.0, 3.0), vfov=60.0)
    >>> ray = generate_ray(camera, (32.0, 24.0), (64, 48))  # image center
    >>> ray.direction
    array([ 0.,  0., -1.])
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from marchtrace.core.config import DEFAULT_VFOV
from marchtrace.core.ray import Ray, Vec3, as_vec3, normalize, vec3


@dataclass(frozen=True, eq=False)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        origin: Camera position in world space.
        vfov: Vertical field of view in degrees, in (0, 180).
    """

    origin: Vec3 = (0.0, 0.0, 0.0)  # type: ignore[assignment]
    vfov: float = DEFAULT_VFOV

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", as_vec3(self.origin))
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")


def image_plane_distance(vertical_fov_degrees: float) -> float:
    """Distance to the image plane for a unit-height viewport."""
    return 1.0 / math.tan(math.radians(vertical_fov_degrees) / 2.0)


def make_ray(
    origin: Vec3,
    vertical_fov_degrees: float,
    aspect_ratio: float,
    centered_uv: Sequence[float],
) -> Ray:
    """Create a primary ray through centered image coordinates.

    Args:
        origin: Camera position.
        vertical_fov_degrees: Vertical field of view.
        aspect_ratio: Width divided by height; scales the horizontal axis.
        centered_uv: Image coordinates in [-0.5, 0.5] with (0, 0) at the
            center and +v pointing up.

    Returns:
        A ray from ``origin`` with unit direction
        ``normalize(u * aspect_ratio, v, -z)``.
    """
    z = image_plane_distance(vertical_fov_degrees)
    direction = normalize(vec3(centered_uv[0] * aspect_ratio, centered_uv[1], -z))
    return Ray(origin=as_vec3(origin), direction=direction)


def centered_uv(uv: Sequence[float], resolution: Sequence[int]) -> tuple[float, float]:
    """Map pixel-space coordinates to centered image coordinates.

    Raises:
        ValueError: If either resolution component is not positive.
    """
    width, height = resolution
    if width <= 0 or height <= 0:
        raise ValueError(f"Resolution must be positive, got {tuple(resolution)}")
    return uv[0] / width - 0.5, uv[1] / height - 0.5


def generate_ray(camera: PinholeCamera, uv: Sequence[float], resolution: Sequence[int]) -> Ray:
    """Generate the primary ray for a pixel-space coordinate.

    Args:
        camera: The camera to shoot from.
        uv: Pixel-space coordinate (x to the right, y up).
        resolution: Image (width, height) in pixels.

    Returns:
        The primary world-space ray.
    """
    width, height = resolution
    cu = centered_uv(uv, resolution)
    return make_ray(camera.origin, camera.vfov, width / height, cu)
