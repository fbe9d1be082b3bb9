"""Rendering constants and the immutable render configuration.

The module-level constants are the process-wide defaults. RenderConfig bundles
them into a frozen value that is passed explicitly through the solvers and the
integrator; nothing here is mutated at runtime.

Example:
    >>> from marchtrace.core.config import DEFAULT_CONFIG
    >>> fast = DEFAULT_CONFIG.with_overrides(samples=4, max_bounces=2)
    >>> fast.samples
    4
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum sphere-marching steps per ray
MAX_STEPS = 128

# Distance beyond which a marched ray is declared a miss
FAR_PLANE = 512.0

# Surface tolerance: march hit threshold, normal estimation step and
# minimum accepted analytic hit distance
EPSILON = 1e-3

# Offset along the normal for secondary ray origins, chosen so the spawn
# point sits outside the EPSILON shell of the surface it left
SPAWN_OFFSET = 2.0 * EPSILON

# Top-level recursion depth and samples per shading level
MAX_BOUNCES = 4
SAMPLES = 16

# Vertical field of view of the default camera, in degrees
DEFAULT_VFOV = 120.0


@dataclass(frozen=True)
class RenderConfig:
    """Tunable constants for one rendering session.

    Attributes:
        max_steps: Sphere-marching step budget.
        far_plane: Marching distance after which a ray misses.
        epsilon: Surface tolerance used by both solvers.
        spawn_offset: Distance secondary rays are pushed off the surface.
        max_bounces: Bounce budget for primary rays.
        samples: Sample count for primary rays.
    """

    max_steps: int = MAX_STEPS
    far_plane: float = FAR_PLANE
    epsilon: float = EPSILON
    spawn_offset: float = SPAWN_OFFSET
    max_bounces: int = MAX_BOUNCES
    samples: int = SAMPLES

    def __post_init__(self) -> None:
        if self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        if self.far_plane <= 0.0:
            raise ValueError(f"far_plane must be positive, got {self.far_plane}")
        if self.epsilon <= 0.0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.spawn_offset <= self.epsilon:
            raise ValueError(
                f"spawn_offset ({self.spawn_offset}) must exceed epsilon ({self.epsilon})"
            )
        if self.max_bounces < 0:
            raise ValueError(f"max_bounces must be non-negative, got {self.max_bounces}")
        if self.samples < 1:
            raise ValueError(f"samples must be at least 1, got {self.samples}")

    def with_overrides(self, **changes: float) -> RenderConfig:
        """Return a copy with the given fields replaced (validated again)."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = RenderConfig()
