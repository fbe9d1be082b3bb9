"""Tests for the recursive shading integrator.

This module tests:
- Base cases (sky on miss, emission at zero bounces)
- The exact layer blend
- Energy bounds for diffuse surfaces under a constant sky
- Budget monotonicity and BudgetError
- The pluggable transmission term
- Input validation and reproducibility
"""

import numpy as np
import pytest


def _between_planes(surface):
    """Two facing marchable planes at y = 0 and y = 2 sharing one material."""
    from marchtrace.geometry.sdf import SdfPlane
    from marchtrace.scene.scene import Scene

    return Scene(
        marchables=(
            SdfPlane(normal=(0, 1, 0), offset=0.0, surface=surface),
            SdfPlane(normal=(0, -1, 0), offset=-2.0, surface=surface),
        ),
    )


def _recording_integrator(scene, rng):
    """An Integrator that records every radiance call and its parent call."""
    from marchtrace.core.integrator import Integrator

    class RecordingIntegrator(Integrator):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.calls = []
            self._stack = []

        def radiance(self, ray, bounce_budget, sample_count):
            parent = self._stack[-1] if self._stack else None
            self.calls.append((parent, (bounce_budget, sample_count)))
            self._stack.append((bounce_budget, sample_count))
            try:
                return super().radiance(ray, bounce_budget, sample_count)
            finally:
                self._stack.pop()

    return RecordingIntegrator(scene, rng=rng)


def _interaction(sample_count=4, bounce_budget=2, surface=None):
    from marchtrace.core.integrator import SurfaceInteraction
    from marchtrace.core.ray import Ray, vec3
    from marchtrace.materials.material import Material

    return SurfaceInteraction(
        ray=Ray.towards((0, 1, 0), (0, -1, 0)),
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 1.0, 0.0),
        material=surface if surface is not None else Material(color=(0.5, 0.5, 0.5)),
        bounce_budget=bounce_budget,
        sample_count=sample_count,
    )


class TestBaseCases:
    """Test the recursion base cases."""

    @pytest.mark.parametrize("bounce_budget", [0, 1, 4])
    @pytest.mark.parametrize("sample_count", [1, 3, 16])
    def test_miss_returns_sky_for_any_budget(self, bounce_budget, sample_count, rng):
        """Test that an escaping ray sees exactly sky.color * sky.emission."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        scene = Scene(sky=Material.sky(color=(0.2, 0.4, 0.8), emission=1.5))
        result = radiance(
            scene, Ray.towards((0, 0, 0), (0, 0, -1)), bounce_budget, sample_count, rng=rng
        )

        assert np.array_equal(result, scene.sky.color * scene.sky.emission)

    def test_empty_scene_render_is_sky(self, empty_scene, rng):
        """An empty scene renders exactly the sky."""
        from marchtrace.core.render import render

        result = render(empty_scene, (3.0, 7.0), (16, 16), rng=rng)

        assert np.array_equal(result, np.array([1.0, 1.0, 1.0]))

    def test_zero_bounces_returns_emission(self, rng):
        """Test that a hit with no budget left returns only emitted light."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.geometry.sphere import Sphere
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        light = Material(color=(1.0, 0.5, 0.25), emission=2.0)
        scene = Scene(traceables=(Sphere(center=(0, 0, -3), radius=1.0, surface=light),))

        result = radiance(scene, Ray.towards((0, 0, 0), (0, 0, -1)), 0, 8, rng=rng)
        assert np.allclose(result, [2.0, 1.0, 0.5])

    def test_zero_bounces_on_non_emitter_is_black(self, diffuse_sphere_scene, rng):
        """Test that a non-emissive hit with no budget is black."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray

        result = radiance(diffuse_sphere_scene, Ray.towards((0, 0, 0), (0, 0, -1)), 0, 4, rng=rng)
        assert np.allclose(result, 0.0)


class TestShading:
    """Test shading results that do not depend on the random stream."""

    def test_diffuse_convex_object_under_constant_sky(self, diffuse_sphere_scene, rng):
        """Every diffuse child of a convex object escapes to the sky."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray

        result = radiance(diffuse_sphere_scene, Ray.towards((0, 0, 0), (0, 0, -1)), 3, 8, rng=rng)
        assert np.allclose(result, [0.5, 0.5, 0.5])

    def test_perfect_mirror_reflects_tinted_sky(self, rng):
        """A fully metallic mirror returns color * sky."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.geometry.sphere import Sphere
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        mirror = Material(color=(0.9, 0.8, 0.7), metallic=1.0)
        scene = Scene(
            traceables=(Sphere(center=(0, 0, -3), radius=1.0, surface=mirror),),
            sky=Material.sky(color=(0.5, 0.5, 1.0)),
        )

        result = radiance(scene, Ray.towards((0, 0, 0), (0.1, 0.05, -1)), 2, 4, rng=rng)
        assert np.allclose(result, [0.45, 0.4, 0.7])

    def test_emission_above_one_discards_other_layers(self, rng):
        """Test that the max(1 - emission, 0) clamp removes reflected light."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.geometry.sphere import Sphere
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        light = Material(color=(1.0, 0.9, 0.8), emission=3.0, specular=1.0)
        scene = Scene(traceables=(Sphere(center=(0, 0, -3), radius=1.0, surface=light),))

        result = radiance(scene, Ray.towards((0, 0, 0), (0, 0, -1)), 2, 4, rng=rng)
        assert np.allclose(result, [3.0, 2.7, 2.4])

    def test_no_energy_gain_between_diffuse_planes(self, rng):
        """Diffuse, opaque, non-emissive surfaces never exceed the sky."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material

        scene = _between_planes(Material(color=(0.9, 0.7, 0.5)))
        for direction in [(0.3, -1, 0.2), (-0.5, 1, 0.1), (1.0, -0.2, 0.0)]:
            result = radiance(scene, Ray.towards((0, 1, 0), direction), 3, 3, rng=rng)
            assert np.all(result >= 0.0)
            assert np.all(result <= 1.0 + 1e-12)

    def test_closed_traceable_room_stays_dark(self, rng):
        """Test that no sky light leaks into an unlit sphere seen from inside."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.geometry.sphere import Sphere
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        room = Sphere(center=(0, 0, 0), radius=5.0, surface=Material(color=(0.5, 0.5, 0.5)))
        scene = Scene(traceables=(room,))

        for direction in [(0, 0, -1), (0.3, 0.8, 0.1), (-1, -0.2, 0.4)]:
            result = radiance(scene, Ray.towards((0, 0, 0), direction), 3, 4, rng=rng)
            assert np.array_equal(result, np.zeros(3))


class TestBlend:
    """Test the exact layer blend with stubbed layers."""

    def _stub_integrator(self, diffuse, specular, transmission):
        from marchtrace.core.integrator import Integrator
        from marchtrace.scene.scene import Scene

        class StubIntegrator(Integrator):
            def diffuse(self, interaction):
                return diffuse

            def specular(self, interaction):
                return specular

        return StubIntegrator(Scene(), transmission=lambda integrator, interaction: transmission)

    def test_blend_order(self):
        """Test base, additive specular, metallic mix and emissive lerp."""
        from marchtrace.materials.material import Material

        d = np.array([0.2, 0.4, 0.6])
        s = np.array([1.0, 0.5, 0.25])
        t = np.array([0.1, 0.1, 0.1])
        m = Material(
            color=(0.5, 0.6, 0.7),
            emission=0.3,
            metallic=0.4,
            transmission=0.25,
            specular=0.5,
        )

        integrator = self._stub_integrator(d, s, t)
        result = integrator.shade(_interaction(surface=m))

        base = t * 0.25 + d * 0.75
        base = base + s * 0.5
        layer = base * 0.6 + (s * m.color) * 0.4
        expected = layer * 0.7 + m.color * 0.3
        assert np.allclose(result, expected)

    def test_opaque_dielectric_is_diffuse_plus_specular(self):
        """Test that with no metal, transmission or emission the layers add."""
        from marchtrace.materials.material import Material

        d = np.array([0.2, 0.2, 0.2])
        s = np.array([0.6, 0.6, 0.6])
        integrator = self._stub_integrator(d, s, np.zeros(3))

        result = integrator.shade(_interaction(surface=Material(color=(1, 1, 1), specular=0.5)))
        assert np.allclose(result, [0.5, 0.5, 0.5])


class TestBudget:
    """Test that recursion budgets only shrink."""

    def test_children_have_one_bounce_less_and_no_more_samples(self, rng):
        """Test budget monotonicity over a whole recursion tree."""
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material

        surface = Material(color=(0.5, 0.5, 0.5), specular=0.5, roughness=0.5, metallic=0.3)
        integrator = _recording_integrator(_between_planes(surface), rng)

        integrator.radiance(Ray.towards((0, 1, 0), (0.3, -1, 0.2)), 3, 4)

        assert len(integrator.calls) > 1
        for parent, (bounce, samples) in integrator.calls[1:]:
            parent_bounce, parent_samples = parent
            assert bounce == parent_bounce - 1
            assert 1 <= samples <= parent_samples
        assert min(bounce for _, (bounce, _) in integrator.calls) == 0

    def test_mirror_children_keep_full_sample_count(self, rng):
        """Test that a perfect mirror passes the full sample budget on."""
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material

        mirror = Material(color=(1, 1, 1), metallic=1.0)
        integrator = _recording_integrator(_between_planes(mirror), rng)

        integrator.radiance(Ray.towards((0, 1, 0), (0.3, -1, 0.2)), 2, 4)

        specular_children = [c for p, c in integrator.calls if p == (2, 4) and c[1] == 4]
        assert specular_children == [(1, 4)]

    def test_rough_specular_halves_samples(self, rng):
        """Test max(n // 2, 1) samples for rough reflections."""
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material

        rough = Material(color=(1, 1, 1), metallic=1.0, roughness=0.5)
        integrator = _recording_integrator(_between_planes(rough), rng)

        integrator.radiance(Ray.towards((0, 1, 0), (0.3, -1, 0.2)), 1, 6)

        children = [c for p, c in integrator.calls if p == (1, 6)]
        # 6 diffuse children with 1 sample, 6 rough specular children with 3
        assert sorted(children) == [(0, 1)] * 6 + [(0, 3)] * 6

    def test_child_radiance_rejects_growing_samples(self, rng):
        """Test that asking for more samples than the parent raises."""
        from marchtrace.core.integrator import Integrator
        from marchtrace.core.ray import vec3
        from marchtrace.errors import BudgetError
        from marchtrace.scene.scene import Scene

        integrator = Integrator(Scene(), rng=rng)

        with pytest.raises(BudgetError):
            integrator.child_radiance(_interaction(sample_count=4), vec3(0, 1, 0), 5)
        with pytest.raises(BudgetError):
            integrator.child_radiance(_interaction(sample_count=4), vec3(0, 1, 0), 0)

    def test_budget_error_is_runtime_error(self):
        """Test the exception hierarchy."""
        from marchtrace.errors import BudgetError, MarchtraceError

        assert issubclass(BudgetError, RuntimeError)
        assert issubclass(BudgetError, MarchtraceError)

    def test_zero_direction_contributes_nothing(self, rng):
        """Test that a degenerate sampled direction is black, not an error."""
        from marchtrace.core.integrator import Integrator
        from marchtrace.core.ray import vec3
        from marchtrace.scene.scene import Scene

        integrator = Integrator(Scene(), rng=rng)
        result = integrator.child_radiance(_interaction(), vec3(0, 0, 0), 1)

        assert np.array_equal(result, np.zeros(3))

    def test_spawn_ray_offsets_along_normal(self, rng):
        """Test the secondary ray origin and normalized direction."""
        from marchtrace.core.config import DEFAULT_CONFIG
        from marchtrace.core.integrator import Integrator
        from marchtrace.core.ray import vec3
        from marchtrace.scene.scene import Scene

        integrator = Integrator(Scene(), rng=rng)
        ray = integrator.spawn_ray(_interaction(), vec3(0, 3, 4))

        assert np.allclose(ray.origin, [0.0, DEFAULT_CONFIG.spawn_offset, 0.0])
        assert np.allclose(ray.direction, [0.0, 0.6, 0.8])


class TestTransmission:
    """Test the pluggable transmission term."""

    def test_default_contributes_nothing(self, rng):
        """Test that the default term is zero."""
        from marchtrace.core.integrator import Integrator, no_transmission
        from marchtrace.scene.scene import Scene

        integrator = Integrator(Scene(), rng=rng)
        assert np.array_equal(no_transmission(integrator, _interaction()), np.zeros(3))

    def test_fully_transmissive_surface_uses_term(self, rng):
        """Test that transmission = 1 shows only the plugged-in term."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.geometry.sphere import Sphere
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        glass = Material(color=(1, 1, 1), transmission=1.0)
        scene = Scene(traceables=(Sphere(center=(0, 0, -3), radius=1.0, surface=glass),))
        seen = []

        def constant_term(integrator, interaction):
            seen.append(interaction)
            return np.array([0.25, 0.5, 0.75])

        result = radiance(
            scene, Ray.towards((0, 0, 0), (0, 0, -1)), 2, 4, rng=rng, transmission=constant_term
        )

        assert np.allclose(result, [0.25, 0.5, 0.75])
        assert len(seen) == 1
        assert seen[0].material is glass
        assert abs(seen[0].position[2] + 2.0) < 1e-9
        assert seen[0].bounce_budget == 2

    def test_term_recursing_through_child_radiance(self, rng):
        """Test that an extension term recurses under the same budget rules."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.errors import BudgetError
        from marchtrace.geometry.sphere import Sphere
        from marchtrace.materials.material import Material
        from marchtrace.scene.scene import Scene

        glass = Material(color=(1, 1, 1), transmission=1.0)
        scene = Scene(traceables=(Sphere(center=(0, 0, -3), radius=1.0, surface=glass),))
        ray = Ray.towards((0, 0, 0), (0, 0, -1))

        def greedy_term(integrator, interaction):
            direction = interaction.ray.direction
            return integrator.child_radiance(interaction, direction, interaction.sample_count + 1)

        with pytest.raises(BudgetError):
            radiance(scene, ray, 2, 4, rng=rng, transmission=greedy_term)


class TestValidationAndDeterminism:
    """Test input validation and seeded reproducibility."""

    def test_negative_budget_raises(self, empty_scene, rng):
        """Test that a negative bounce budget is rejected."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray

        with pytest.raises(ValueError, match="bounce_budget"):
            radiance(empty_scene, Ray.towards((0, 0, 0), (0, 0, -1)), -1, 4, rng=rng)

    def test_zero_samples_raises(self, empty_scene, rng):
        """Test that at least one sample is required."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray

        with pytest.raises(ValueError, match="sample_count"):
            radiance(empty_scene, Ray.towards((0, 0, 0), (0, 0, -1)), 2, 0, rng=rng)

    def test_same_seed_same_radiance(self):
        """Test that the random stream fully determines the result."""
        from marchtrace.core.integrator import radiance
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material

        scene = _between_planes(Material(color=(0.6, 0.6, 0.6), specular=0.3, roughness=0.4))
        ray = Ray.towards((0, 1, 0), (0.2, -1, 0.1))

        a = radiance(scene, ray, 3, 3, rng=np.random.default_rng(11))
        b = radiance(scene, ray, 3, 3, rng=np.random.default_rng(11))

        assert np.array_equal(a, b)

    def test_function_matches_integrator(self):
        """Test that radiance() wraps Integrator.radiance()."""
        from marchtrace.core.integrator import Integrator, radiance
        from marchtrace.core.ray import Ray
        from marchtrace.materials.material import Material

        scene = _between_planes(Material(color=(0.6, 0.6, 0.6)))
        ray = Ray.towards((0, 1, 0), (0.2, -1, 0.1))

        a = radiance(scene, ray, 2, 3, rng=np.random.default_rng(3))
        b = Integrator(scene, rng=np.random.default_rng(3)).radiance(ray, 2, 3)

        assert np.array_equal(a, b)
