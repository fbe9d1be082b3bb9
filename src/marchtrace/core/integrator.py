"""Recursive stochastic shading integrator.

The integrator turns a ray into radiance by intersecting it with the scene
and recursively gathering light along sampled directions. Each hit blends
four layers:

    diffuse       sample_count rays toward ``n + sample_unit_ball()``,
                  each recursing with one sample
    specular      one mirror ray (roughness == 0, full sample budget) or
                  sample_count jittered mirror rays with a halved budget
    transmission  pluggable term, zero by default
    emission      final lerp toward ``color * emission``

Blend, applied in this exact order:

    base   = transmission * m.transmission + diffuse * (1 - m.transmission)
    base   = base + specular * m.specular
    layer  = base * (1 - m.metallic) + (specular * m.color) * m.metallic
    result = layer * max(1 - m.emission, 0) + m.color * m.emission

Recursion is bounded: every child call has exactly one bounce fewer than its
parent and never more samples. Integrator.child_radiance() is the only path
into recursion and enforces both rules, so pluggable terms cannot break them.

Example:
    >>> import numpy as np
    >>> from marchtrace.core.integrator import radiance
    >>> from marchtrace.core.ray import Ray
    >>> from marchtrace.scene.scene import Scene
    >>> ray = Ray.towards((0, 0, 0), (0, 0, -1))
    >>> radiance(Scene(), ray, 4, 16, rng=np.random.default_rng(0))
    array([1., 1., 1.])
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from marchtrace.core.config import DEFAULT_CONFIG, RenderConfig
from marchtrace.core.ray import Ray, Vec3, normalize, reflect, sample_unit_ball
from marchtrace.errors import BudgetError
from marchtrace.materials.material import Material
from marchtrace.scene.intersection import cast_ray
from marchtrace.scene.scene import Scene

# Type alias for pluggable transmission terms
TransmissionTerm = Callable[["Integrator", "SurfaceInteraction"], Vec3]


@dataclass(frozen=True, eq=False)
class SurfaceInteraction:
    """Everything known about a shading point.

    Attributes:
        ray: The incoming ray.
        position: The hit point on the surface.
        normal: Unit surface normal at the hit.
        material: Material of the surface.
        bounce_budget: Remaining bounces at this level (>= 1).
        sample_count: Samples granted to this level.
    """

    ray: Ray
    position: Vec3
    normal: Vec3
    material: Material
    bounce_budget: int
    sample_count: int


def no_transmission(integrator: Integrator, interaction: SurfaceInteraction) -> Vec3:
    """Default transmission term: contributes nothing."""
    return np.zeros(3)


class Integrator:
    """Shades rays against one scene with one random source.

    Attributes:
        scene: The scene being rendered (read-only).
        config: Solver and budget tunables.
        rng: Random source for all stochastic sampling.
        transmission: The transmission term plugged into the blend.
    """

    def __init__(
        self,
        scene: Scene,
        config: RenderConfig = DEFAULT_CONFIG,
        *,
        rng: np.random.Generator | None = None,
        transmission: TransmissionTerm = no_transmission,
    ) -> None:
        self.scene = scene
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.transmission = transmission

    def radiance(self, ray: Ray, bounce_budget: int, sample_count: int) -> Vec3:
        """Compute the radiance arriving along ``ray``.

        Args:
            ray: The ray to shade (unit direction).
            bounce_budget: Remaining recursion depth (>= 0).
            sample_count: Stochastic rays to average at this level (>= 1).

        Returns:
            Linear, unclamped RGB radiance.

        Raises:
            ValueError: If the budget is negative or the sample count < 1.
        """
        if bounce_budget < 0:
            raise ValueError(f"bounce_budget must be non-negative, got {bounce_budget}")
        if sample_count < 1:
            raise ValueError(f"sample_count must be at least 1, got {sample_count}")

        result = cast_ray(self.scene, ray, self.config)
        if not result.hit:
            return self.scene.sky.emitted
        if bounce_budget == 0:
            return result.material.emitted

        interaction = SurfaceInteraction(
            ray=ray,
            position=ray.point_at(result.distance),
            normal=result.normal,
            material=result.material,
            bounce_budget=bounce_budget,
            sample_count=sample_count,
        )
        return self.shade(interaction)

    def shade(self, interaction: SurfaceInteraction) -> Vec3:
        """Blend the diffuse, specular, transmission and emissive layers."""
        m = interaction.material
        diffuse = self.diffuse(interaction)
        specular = self.specular(interaction)
        transmission = self.transmission(self, interaction)

        base = transmission * m.transmission + diffuse * (1.0 - m.transmission)
        base = base + specular * m.specular
        layer = base * (1.0 - m.metallic) + (specular * m.color) * m.metallic
        return layer * max(1.0 - m.emission, 0.0) + m.color * m.emission

    def diffuse(self, interaction: SurfaceInteraction) -> Vec3:
        """Average ``color * L`` over rays toward ``n + sample_unit_ball()``.

        This is a cheap approximation of cosine-weighted hemisphere sampling.
        Each child gets a single sample, trading breadth for depth.
        """
        n = interaction.sample_count
        total = np.zeros(3)
        for _ in range(n):
            direction = interaction.normal + sample_unit_ball(self.rng)
            total += interaction.material.color * self.child_radiance(interaction, direction, 1)
        return total / n

    def specular(self, interaction: SurfaceInteraction) -> Vec3:
        """Mirror reflection, or jittered reflection for rough surfaces."""
        m = interaction.material
        mirror = reflect(interaction.ray.direction, interaction.normal)
        if m.roughness == 0.0:
            return self.child_radiance(interaction, mirror, interaction.sample_count)

        n = interaction.sample_count
        child_samples = max(n // 2, 1)
        total = np.zeros(3)
        for _ in range(n):
            direction = mirror + sample_unit_ball(self.rng) * m.roughness
            total += self.child_radiance(interaction, direction, child_samples)
        return total / n

    def spawn_ray(self, interaction: SurfaceInteraction, direction: Vec3) -> Ray:
        """Create a secondary ray leaving the surface.

        The origin is pushed along the normal by ``config.spawn_offset`` so
        neither solver re-detects the surface the ray starts on.
        """
        origin = interaction.position + interaction.normal * self.config.spawn_offset
        return Ray(origin=origin, direction=normalize(direction))

    def child_radiance(
        self, interaction: SurfaceInteraction, direction: Vec3, sample_count: int
    ) -> Vec3:
        """Recurse along ``direction`` with one bounce fewer.

        A degenerate zero direction contributes no light.

        Raises:
            BudgetError: If ``sample_count`` exceeds the parent's samples or
                is below 1.
        """
        if not 1 <= sample_count <= interaction.sample_count:
            raise BudgetError(
                f"Child sample count {sample_count} outside [1, {interaction.sample_count}]"
            )
        if not np.any(direction):
            return np.zeros(3)
        ray = self.spawn_ray(interaction, direction)
        return self.radiance(ray, interaction.bounce_budget - 1, sample_count)


def radiance(
    scene: Scene,
    ray: Ray,
    bounce_budget: int,
    sample_count: int,
    *,
    rng: np.random.Generator | None = None,
    config: RenderConfig = DEFAULT_CONFIG,
    transmission: TransmissionTerm = no_transmission,
) -> Vec3:
    """Compute the radiance along ``ray`` in ``scene``.

    Convenience wrapper around Integrator.radiance(); see that method.
    """
    integrator = Integrator(scene, config, rng=rng, transmission=transmission)
    return integrator.radiance(ray, bounce_budget, sample_count)
