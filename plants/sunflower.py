"""
Sunflower archetype - a single stalk ending in a flower head.

The stalk grows one segment per level with large leaves on alternating sides
along its middle. The last segment carries the head: a ring of ray petals and
a Fibonacci spiral of disc seeds whose reveal is staggered outwards.
"""

import math
from dataclasses import dataclass
from typing import ClassVar, List

from .archetype import ArchetypePolicy, jittered_end
from .branch import Branch, Entity
from .compositor import ComposedFrame, partition_by_kind, sort_by_reveal
from .geometry import Color, Point
from .growth import FlatFrame
from .profiling import profile
from .seeded_random import SeededRandom


LEAF_BASE = Color(50, 120, 50)
LEAF_HIGHLIGHT = Color(80, 160, 80)
PETAL_BASE = Color(255, 204, 0)
PETAL_HIGHLIGHT = Color(255, 230, 100)
INNER_SEED = Color(40, 25, 10)
OUTER_SEED = Color(60, 40, 15)


@dataclass(frozen=True)
class SunflowerPolicy(ArchetypePolicy):
    name: ClassVar[str] = 'sunflower'

    initial_length: float = 120.0
    heading: float = -90.0
    depth: int = 8                 # stalk segments below the head
    growth_margin: float = 300.0
    fade_speed: float = 150.0
    seed_fade_speed: float = 50.0  # seeds pop in faster than leaves and petals
    taper_stroke: bool = False

    heading_jitter: float = 5.0
    sway: float = 2.0
    control_jitter: float = 10.0
    segment_shrink: float = 0.95

    leaf_segments: tuple = (1, 7)  # exclusive range of countdown values that carry a leaf
    leaf_radius: tuple = (50.0, 70.0)
    petiole_length: float = 40.0
    leaf_lift: float = 10.0

    petal_count: tuple = (20, 30)
    petal_ring_radius: float = 110.0
    petal_ring_jitter: float = 10.0
    petal_radius: tuple = (35.0, 45.0)

    seed_count: int = 150
    golden_angle: float = 137.508
    spiral_spread: float = 7.0
    seed_radius: tuple = (6.0, 9.0)
    inner_seed_fraction: float = 0.3
    seed_stagger: float = 0.5      # extra growth distance per spiral index

    def grow(self, rand: SeededRandom, start: Point, length: float,
             angle: float, depth: int, current_dist: float) -> Branch:
        end = jittered_end(rand, start, length, angle, self.heading_jitter)
        mid = Point((start.x + end.x) / 2, (start.y + end.y) / 2)
        control = Point(
            mid.x + rand.next_float(-self.control_jitter, self.control_jitter),
            mid.y + rand.next_float(-self.control_jitter, self.control_jitter),
        )
        stroke_width = max(8.0, depth * 3.5)

        children: List[Branch] = []
        entities: List[Entity] = []

        if depth > 0:
            low, high = self.leaf_segments
            if low < depth < high:
                entities.append(self._leaf(rand, start, end, length, depth, current_dist))

            children.append(self.grow(
                rand,
                end,
                length * self.segment_shrink,
                angle + rand.next_float(-self.sway, self.sway),
                depth - 1,
                current_dist + length,
            ))
        else:
            entities.extend(self._petals(rand, end, current_dist))
            entities.extend(self._seeds(rand, end, current_dist))

        return Branch(start, end, control, stroke_width, length, current_dist,
                      tuple(children), tuple(entities))

    def _leaf(self, rand: SeededRandom, start: Point, end: Point, length: float,
              depth: int, current_dist: float) -> Entity:
        side = -1 if depth % 2 == 0 else 1
        petiole_base = start.lerp(end, 0.5)
        radius = rand.next_float(*self.leaf_radius)
        center = Point(petiole_base.x + self.petiole_length * side, petiole_base.y - self.leaf_lift)
        return Entity(center, radius, LEAF_BASE, LEAF_HIGHLIGHT, 'leaf', current_dist + length * 0.5)

    def _petals(self, rand: SeededRandom, head: Point, current_dist: float) -> List[Entity]:
        petals = []
        count = rand.next_int(*self.petal_count)
        for i in range(count):
            p_angle = (i / count) * math.pi * 2
            r = self.petal_ring_radius + rand.next_float(-self.petal_ring_jitter, self.petal_ring_jitter)
            center = Point(head.x + math.cos(p_angle) * r, head.y + math.sin(p_angle) * r)
            petals.append(Entity(
                center, rand.next_float(*self.petal_radius),
                PETAL_BASE, PETAL_HIGHLIGHT, 'petal', current_dist,
            ))
        return petals

    def _seeds(self, rand: SeededRandom, head: Point, current_dist: float) -> List[Entity]:
        seeds = []
        golden = self.golden_angle * (math.pi / 180)
        for i in range(self.seed_count):
            r = self.spiral_spread * math.sqrt(i)
            theta = i * golden
            center = Point(head.x + r * math.cos(theta), head.y + r * math.sin(theta))
            base = INNER_SEED if i < self.seed_count * self.inner_seed_fraction else OUTER_SEED
            seeds.append(Entity(
                center, rand.next_float(*self.seed_radius),
                base, base.brighten(30, 20, 10), 'seed',
                current_dist + i * self.seed_stagger,
            ))
        return seeds

    def entity_fade_speed(self, entity: Entity) -> float:
        if entity.kind == 'seed':
            return self.seed_fade_speed
        return self.fade_speed

    @profile
    def composite(self, frame: FlatFrame) -> ComposedFrame:
        groups = partition_by_kind(frame.entities)
        return ComposedFrame(
            segments=list(frame.segments),
            background=list(groups.get('leaf', [])),
            foreground=list(groups.get('petal', [])) + sort_by_reveal(groups.get('seed', [])),
        )
