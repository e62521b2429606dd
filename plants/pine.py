"""
Pine archetype - a conical conifer.

Every segment continues with a near-vertical leader and one or two short,
almost horizontal side branches; needle clusters (and the odd cone) cover
the upper part of the tree. Cones hidden behind needle clusters in front of
them are not drawn.
"""

from dataclasses import dataclass
from typing import ClassVar, List

from .archetype import ArchetypePolicy, bowed_control, jittered_end
from .branch import Branch, Entity
from .compositor import ComposedFrame, partition_by_kind, sort_back_to_front, suppress_occluded
from .geometry import Color, Point
from .growth import FlatFrame
from .profiling import profile
from .seeded_random import SeededRandom


@dataclass(frozen=True)
class PinePolicy(ArchetypePolicy):
    name: ClassVar[str] = 'pine'

    initial_length: float = 180.0
    heading: float = -90.0
    depth: int = 8
    growth_margin: float = 200.0
    fade_speed: float = 150.0
    taper_stroke: bool = True

    heading_jitter: float = 10.0
    bow: float = 0.05              # max control point offset as a fraction of length
    leader_shrink: tuple = (0.85, 0.95)
    side_count: tuple = (1, 3)
    side_angle: tuple = (60.0, 85.0)
    side_shrink: tuple = (0.5, 0.7)

    foliage_depth: int = 5         # segments at or below this depth carry needles
    cone_depth: int = 4
    cone_threshold: float = 0.92   # cones are rare: draw must exceed this
    cluster_count: tuple = (6, 10)
    cluster_radius: tuple = (15.0, 25.0)
    cluster_spread: float = 15.0
    occlusion_reach: float = 0.9

    def grow(self, rand: SeededRandom, start: Point, length: float,
             angle: float, depth: int, current_dist: float) -> Branch:
        end = jittered_end(rand, start, length, angle, self.heading_jitter)
        control = bowed_control(start, end, rand.next_float(-self.bow, self.bow) * length)
        stroke_width = max(2.0, depth * 5 + rand.next_float(-1, 1))

        children: List[Branch] = []
        if depth > 0:
            leader_angle = angle + rand.next_float(-self.heading_jitter, self.heading_jitter)
            leader_length = length * rand.next_float(*self.leader_shrink)
            children.append(self.grow(
                rand, end, leader_length, leader_angle, depth - 1, current_dist + length
            ))

            for _ in range(rand.next_int(*self.side_count)):
                side = 1 if rand.next_float(0, 1) > 0.5 else -1
                side_angle = angle + rand.next_float(*self.side_angle) * side
                side_length = length * rand.next_float(*self.side_shrink)
                # no side branches on the last level keeps the crown pointed
                if depth > 1:
                    children.append(self.grow(
                        rand, end, side_length, side_angle, depth - 1, current_dist + length
                    ))

        entities: List[Entity] = []
        if depth <= self.foliage_depth:
            entities = self._foliage(rand, start, end, length, depth, current_dist)

        return Branch(start, end, control, stroke_width, length, current_dist,
                      tuple(children), tuple(entities))

    def _foliage(self, rand: SeededRandom, start: Point, end: Point, length: float,
                 depth: int, current_dist: float) -> List[Entity]:
        entities = []
        for _ in range(rand.next_int(*self.cluster_count)):
            radius = rand.next_float(*self.cluster_radius)
            t = rand.next_float(0.1, 1.0)
            anchor = start.lerp(end, t)
            center = Point(
                anchor.x + rand.next_float(-self.cluster_spread, self.cluster_spread),
                anchor.y + rand.next_float(-self.cluster_spread, self.cluster_spread),
            )
            dist = current_dist + length * t

            is_cone = depth <= self.cone_depth and rand.next_float(0, 1) > self.cone_threshold
            if is_cone:
                base = Color(
                    100 + rand.next_float(0, 40),
                    70 + rand.next_float(0, 30),
                    40 + rand.next_float(0, 20),
                )
                entities.append(Entity(center, radius * 0.9, base, base.brighten(40), 'fruit', dist))
            else:
                base = Color(
                    20 + rand.next_float(0, 20),
                    60 + rand.next_float(0, 40),
                    30 + rand.next_float(0, 20),
                )
                entities.append(Entity(center, radius, base, base.brighten(30), 'leaf', dist))
        return entities

    @profile
    def composite(self, frame: FlatFrame) -> ComposedFrame:
        groups = partition_by_kind(frame.entities)
        leaves = groups.get('leaf', [])
        cones = suppress_occluded(groups.get('fruit', []), leaves, self.occlusion_reach)
        return ComposedFrame(
            segments=list(frame.segments),
            foreground=sort_back_to_front(leaves) + sort_back_to_front(cones),
        )
