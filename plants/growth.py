"""
Growth flattening - projects the immutable structure onto one animation instant.

Progress is a distance in the same units as branch length. A branch is revealed
from its start as progress passes its distance from the root; entities fade in
once progress passes their own distance. The output is in canvas pixel space.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from .branch import Branch, Entity
from .geometry import Point
from .profiling import profile

if TYPE_CHECKING:
    from .archetype import ArchetypePolicy
    from .bounds import FitTransform


OPACITY_FLOOR = 0.01


@dataclass(frozen=True)
class Segment:
    """A (possibly partial) branch ready to be stroked as a quadratic curve."""
    start: Point
    end: Point
    control: Point
    stroke_width: float


@dataclass
class FlatFrame:
    segments: List[Segment] = field(default_factory=list)
    entities: List[Entity] = field(default_factory=list)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def smooth_step(t: float) -> float:
    return t * t * (3 - 2 * t)


def reveal_fraction(branch: Branch, progress: float) -> float:
    """How much of the branch is drawn at this progress, in [0, 1]."""
    if progress <= branch.dist_from_root:
        return 0.0
    if branch.length <= 0:
        return 1.0
    return clamp((progress - branch.dist_from_root) / branch.length, 0.0, 1.0)


def entity_opacity(entity: Entity, progress: float, fade_speed: float) -> float:
    """Smoothstep fade-in over `fade_speed` units of growth after the entity's reveal distance."""
    if progress <= entity.dist_from_root:
        return 0.0
    age = progress - entity.dist_from_root
    return smooth_step(clamp(age / fade_speed, 0.0, 1.0))


def truncate_curve(start: Point, control: Point, end: Point, t: float) -> Segment:
    """
    First part [0, t] of a quadratic Bézier via de Casteljau subdivision.
    Returns the sub-curve's control and end point with a zero stroke width.
    """
    cur_control = start.lerp(control, t)
    q1 = control.lerp(end, t)
    cur_end = cur_control.lerp(q1, t)
    return Segment(start, cur_end, cur_control, 0.0)


@profile
def flatten(root: Branch, progress: float, transform: 'FitTransform',
            policy: 'ArchetypePolicy') -> FlatFrame:
    """
    Visible segments and faded-in entities of the whole tree at `progress`.

    A branch that has not started yet is skipped but its children are still
    visited, since every reveal is keyed on the global distance alone.
    """
    frame = FlatFrame()
    scale = transform.scale
    offset_x = transform.offset_x
    offset_y = transform.offset_y

    for branch in root.walk():
        local_t = reveal_fraction(branch, progress)
        if local_t <= 0:
            continue

        t_start = branch.start.transform(scale, offset_x, offset_y)
        t_end = branch.end.transform(scale, offset_x, offset_y)
        t_control = branch.control.transform(scale, offset_x, offset_y)
        partial = truncate_curve(t_start, t_control, t_end, local_t)

        frame.segments.append(Segment(
            partial.start,
            partial.end,
            partial.control,
            policy.visible_stroke(branch, scale, local_t),
        ))

        for entity in branch.entities:
            if progress <= entity.dist_from_root:
                continue
            opacity = entity_opacity(entity, progress, policy.entity_fade_speed(entity))
            if opacity > OPACITY_FLOOR:
                frame.entities.append(entity.placed(scale, offset_x, offset_y, opacity))

    return frame
