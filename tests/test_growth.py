"""
Tests for the growth projector: progressive branch reveal and entity fade-in.
"""

import numpy as np
import pytest

from plants.bounds import FitTransform, compute_bounds, compute_fit, growth_budget
from plants.branch import Branch, Entity
from plants.geometry import Color, Point
from plants.growth import (
    OPACITY_FLOOR,
    entity_opacity,
    flatten,
    reveal_fraction,
    smooth_step,
    truncate_curve,
)
from plants.pine import PinePolicy
from plants.sunflower import SunflowerPolicy


def make_entity(dist: float, center: Point = Point(1, 1), radius: float = 3.0) -> Entity:
    """Create a leaf appearing at a given distance."""
    return Entity(center, radius, Color(0, 120, 0), Color(40, 160, 40), 'leaf', dist)


def make_branch(dist: float, length: float = 10.0, entities=(), children=()) -> Branch:
    """Create a vertical branch starting at the origin."""
    start = Point(0, 0)
    end = Point(0, -length)
    return Branch(start, end, start.lerp(end, 0.5), 6.0, length, dist,
                  tuple(children), tuple(entities))


@pytest.fixture(scope="module")
def pine_scene():
    policy = PinePolicy()
    tree = policy.generate("test-seed-1")
    fit = compute_fit(compute_bounds(tree), (1080, 1080), 80)
    return policy, tree, fit, growth_budget(tree, policy.growth_margin)


class TestRevealFraction:
    """How much of a branch is drawn."""

    def test_before_start(self) -> None:
        branch = make_branch(dist=20)
        assert reveal_fraction(branch, 0) == 0
        assert reveal_fraction(branch, 20) == 0

    def test_partial_and_complete(self) -> None:
        branch = make_branch(dist=20, length=10)
        assert reveal_fraction(branch, 25) == pytest.approx(0.5)
        assert reveal_fraction(branch, 30) == 1.0
        assert reveal_fraction(branch, 1000) == 1.0

    def test_zero_length_branch(self) -> None:
        branch = make_branch(dist=5, length=0.0)
        assert reveal_fraction(branch, 6) == 1.0

    def test_monotonic_in_progress(self, pine_scene) -> None:
        _, tree, _, budget = pine_scene
        grid = np.linspace(0, budget, 40)
        for branch in tree.walk():
            fractions = [reveal_fraction(branch, p) for p in grid]
            assert all(b >= a for a, b in zip(fractions, fractions[1:]))


class TestEntityOpacity:
    """Smoothstep fade-in after the reveal distance."""

    def test_smooth_step_endpoints(self) -> None:
        assert smooth_step(0) == 0
        assert smooth_step(1) == 1
        assert smooth_step(0.5) == pytest.approx(0.5)

    def test_zero_until_reached(self) -> None:
        assert entity_opacity(make_entity(40), 40, 150) == 0

    def test_full_after_fade(self) -> None:
        assert entity_opacity(make_entity(40), 190, 150) == 1.0
        assert entity_opacity(make_entity(40), 500, 150) == 1.0

    def test_monotonic(self) -> None:
        e = make_entity(10)
        values = [entity_opacity(e, p, 50) for p in np.linspace(0, 100, 60)]
        assert all(b >= a for a, b in zip(values, values[1:]))


class TestTruncateCurve:
    """De Casteljau split of a quadratic Bézier."""

    def test_full_curve_unchanged(self) -> None:
        seg = truncate_curve(Point(0, 0), Point(5, 10), Point(10, 0), 1.0)
        assert seg.control == Point(5, 10)
        assert seg.end == Point(10, 0)

    def test_end_lies_on_curve(self) -> None:
        p0, c, p2 = Point(0, 0), Point(5, 10), Point(10, 0)
        seg = truncate_curve(p0, c, p2, 0.5)
        expected = p0 * 0.25 + c * 0.5 + p2 * 0.25
        assert seg.end.x == pytest.approx(expected.x)
        assert seg.end.y == pytest.approx(expected.y)
        assert seg.start == p0


class TestFlatten:
    """Whole-tree projection at one instant."""

    def test_nothing_at_progress_zero(self, pine_scene) -> None:
        policy, tree, fit, _ = pine_scene
        frame = flatten(tree, 0, fit, policy)
        assert frame.segments == []
        assert frame.entities == []

    def test_everything_at_full_budget(self, pine_scene) -> None:
        policy, tree, fit, budget = pine_scene
        frame = flatten(tree, budget, fit, policy)
        assert len(frame.segments) == tree.count_branches()
        assert len(frame.entities) == sum(1 for _ in tree.all_entities())
        assert all(e.opacity == 1.0 for e in frame.entities)
        for seg, branch in zip(frame.segments, tree.walk()):
            assert seg.end == fit.apply(branch.end)
            assert seg.stroke_width == pytest.approx(branch.stroke_width * fit.scale)

    def test_segment_count_grows(self, pine_scene) -> None:
        policy, tree, fit, budget = pine_scene
        counts = [len(flatten(tree, p, fit, policy).segments) for p in np.linspace(0, budget, 25)]
        assert all(b >= a for a, b in zip(counts, counts[1:]))

    def test_repeatable_and_non_mutating(self, pine_scene) -> None:
        policy, tree, fit, budget = pine_scene
        first = flatten(tree, budget * 0.4, fit, policy)
        second = flatten(tree, budget * 0.4, fit, policy)
        assert first == second
        assert tree == PinePolicy().generate("test-seed-1")

    def test_pine_stroke_tapers_while_growing(self) -> None:
        branch = make_branch(dist=0, length=10)
        frame = flatten(branch, 5, FitTransform(2.0, 0, 0), PinePolicy())
        assert frame.segments[0].stroke_width == pytest.approx(6.0 * 2.0 * 0.5)

    def test_sunflower_stroke_is_constant(self) -> None:
        branch = make_branch(dist=0, length=10)
        frame = flatten(branch, 5, FitTransform(2.0, 0, 0), SunflowerPolicy())
        assert frame.segments[0].stroke_width == pytest.approx(6.0 * 2.0)

    def test_faint_entities_are_omitted(self) -> None:
        branch = make_branch(dist=0, length=100, entities=[make_entity(0)])
        policy = PinePolicy()
        assert flatten(branch, 1, FitTransform.identity(), policy).entities == []
        visible = flatten(branch, 30, FitTransform.identity(), policy).entities
        assert len(visible) == 1
        assert visible[0].opacity > OPACITY_FLOOR

    def test_entities_are_placed_on_canvas(self) -> None:
        original = make_entity(0, center=Point(1, 1), radius=3)
        branch = make_branch(dist=0, entities=[original])
        frame = flatten(branch, 500, FitTransform(2.0, 10, 20), PinePolicy())
        placed = frame.entities[0]
        assert placed.center == Point(12, 22)
        assert placed.radius == 6
        assert branch.entities[0] == original
        assert original.opacity == 1.0

    def test_children_of_unstarted_parent_are_visited(self) -> None:
        """Reveal is keyed on distance alone, even if the parent has not started."""
        child = make_branch(dist=0, length=10)
        parent = make_branch(dist=50, length=10, children=[child])
        frame = flatten(parent, 5, FitTransform.identity(), PinePolicy())
        assert len(frame.segments) == 1
        assert frame.segments[0].end == Point(0, -5)

    def test_entities_of_unstarted_branch_are_hidden(self) -> None:
        branch = make_branch(dist=50, entities=[make_entity(0)])
        frame = flatten(branch, 40, FitTransform.identity(), PinePolicy())
        assert frame.entities == []
