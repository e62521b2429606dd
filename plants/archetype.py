"""
Archetype policy - the per-plant rules plugged into the shared growth engine.

A policy decides how a segment branches, which entities it carries, how fast
those entities fade in, how a growing branch's stroke is drawn and how the
flattened entities are layered. Everything else (random source, bounds, fit,
flattening, rendering) is shared.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Optional, Union

from .branch import Branch, Entity
from .geometry import GeometryError, Point
from .profiling import profile
from .seeded_random import SeededRandom

if TYPE_CHECKING:
    from .compositor import ComposedFrame
    from .growth import FlatFrame


def jittered_end(rand: SeededRandom, start: Point, length: float,
                 angle: float, jitter: float) -> Point:
    """End point of a segment whose heading is perturbed by up to +-jitter degrees."""
    angle_offset = rand.next_float(-jitter, jitter)
    return Point.polar(start, length, angle + angle_offset)


def bowed_control(start: Point, end: Point, offset: float) -> Point:
    """
    Midpoint pushed `offset` units along the segment's left-hand normal.
    A zero-length segment gets no displacement.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    mid = Point(start.x + dx * 0.5, start.y + dy * 0.5)
    seg_len = math.sqrt(dx * dx + dy * dy)
    if seg_len == 0:
        return mid
    return Point(mid.x + (-dy / seg_len) * offset, mid.y + (dx / seg_len) * offset)


@dataclass(frozen=True)
class ArchetypePolicy(ABC):
    name: ClassVar[str] = ''

    initial_length: float = 100.0
    heading: float = -90.0
    depth: int = 8
    growth_margin: float = 200.0   # distance added after the last reveal so the animation settles
    fade_speed: float = 150.0
    taper_stroke: bool = True

    @profile
    def generate(self, seed: Union[str, SeededRandom], start: Optional[Point] = None,
                 length: Optional[float] = None, heading: Optional[float] = None,
                 depth: Optional[int] = None) -> Branch:
        """
        Build the full, immutable structure for a seed.

        Omitted arguments fall back to the policy's own parameters.
        """
        rand = seed if isinstance(seed, SeededRandom) else SeededRandom(seed)
        start = Point(0.0, 0.0) if start is None else start
        length = self.initial_length if length is None else length
        heading = self.heading if heading is None else heading
        depth = self.depth if depth is None else depth

        if not (math.isfinite(length) and length > 0):
            raise GeometryError(f"Initial segment length must be positive and finite, got {length}")
        if not math.isfinite(heading):
            raise GeometryError(f"Heading must be finite, got {heading}")
        if not start.is_finite():
            raise GeometryError(f"Start point must be finite, got {start}")
        if depth < 0:
            raise GeometryError(f"Depth must be non-negative, got {depth}")

        return self.grow(rand, start, length, heading, int(depth), 0.0)

    @abstractmethod
    def grow(self, rand: SeededRandom, start: Point, length: float,
             angle: float, depth: int, current_dist: float) -> Branch:
        """Generate one segment and, recursively, everything it carries."""

    def entity_fade_speed(self, entity: Entity) -> float:
        return self.fade_speed

    def visible_stroke(self, branch: Branch, scale: float, local_t: float) -> float:
        if self.taper_stroke:
            return branch.stroke_width * scale * local_t
        return branch.stroke_width * scale

    @abstractmethod
    def composite(self, frame: 'FlatFrame') -> 'ComposedFrame':
        """Order (and occlude) one frame's entities for painter's-algorithm drawing."""
