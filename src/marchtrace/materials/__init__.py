"""Materials module.

A single layered Material describes every surface: a base color plus
emission, metallic, roughness, transmission and specular weights. The
integrator blends its diffuse, specular, transmission and emissive layers
according to those weights.
"""

from .material import DEFAULT_REFRACTIVE_INDEX, Material

__all__ = [
    "Material",
    "DEFAULT_REFRACTIVE_INDEX",
]
