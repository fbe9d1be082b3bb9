"""Camera module for primary ray generation.

Ray generation uses pixel coordinates with x to the right and y up:
    centered_uv() maps them to [-0.5, 0.5] around the image center
    make_ray() applies the aspect ratio and field of view
"""

from .pinhole import PinholeCamera, centered_uv, generate_ray, image_plane_distance, make_ray

__all__ = [
    "PinholeCamera",
    "centered_uv",
    "generate_ray",
    "image_plane_distance",
    "make_ray",
]
