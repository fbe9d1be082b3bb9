"""Hybrid sphere-marching and analytic ray tracing renderer.

This package renders scenes built from two disjoint kinds of geometry:
implicit surfaces described by signed-distance functions ("marchables") and
analytic primitives with closed-form intersection ("traceables"). Both are
reconciled into a single hit per ray and shaded with a recursive stochastic
integrator that blends diffuse, specular, transmission and emissive layers.

Subpackages:
    core: Vectors, rays, sampling, configuration, integrator and rendering loop
    geometry: Capability interfaces plus traceable and marchable primitives
    materials: The layered Material value type and its sentinels
    scene: Scene container, marching and trace solvers, hit dispatch
    camera: Pinhole camera and primary ray generation
    preview: Tone mapping, PNG export and preview windows
"""

__version__ = "0.1.0"
