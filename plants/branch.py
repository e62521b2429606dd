"""
Branch and Entity - the immutable pieces of a generated plant structure.

A Branch is a quadratic Bézier segment that owns its child branches and the
decorative entities (needle clusters, cones, leaves, petals, seeds) attached to it.
"""

from dataclasses import dataclass, field, replace
from typing import Iterator, Literal, Tuple

from .geometry import Color, Point


EntityKind = Literal['leaf', 'fruit', 'petal', 'seed']
ENTITY_KINDS: Tuple[str, ...] = ('leaf', 'fruit', 'petal', 'seed')


@dataclass(frozen=True)
class Entity:
    center: Point
    radius: float
    base_color: Color
    highlight_color: Color
    kind: EntityKind
    dist_from_root: float  # growth distance at which the entity starts to appear
    opacity: float = 1.0

    def placed(self, scale: float, offset_x: float, offset_y: float, opacity: float) -> 'Entity':
        """Per-frame copy in canvas space. The generation-time entity is left untouched."""
        return replace(
            self,
            center=self.center.transform(scale, offset_x, offset_y),
            radius=self.radius * scale,
            opacity=opacity,
        )


@dataclass(frozen=True)
class Branch:
    start: Point
    end: Point
    control: Point
    stroke_width: float
    length: float
    dist_from_root: float
    children: Tuple['Branch', ...] = field(default_factory=tuple)
    entities: Tuple[Entity, ...] = field(default_factory=tuple)

    @property
    def is_tip(self) -> bool:
        return len(self.children) == 0

    @property
    def reach(self) -> float:
        """Growth distance at which this branch is fully drawn."""
        return self.dist_from_root + self.length

    def walk(self) -> Iterator['Branch']:
        """Pre-order traversal of the subtree rooted here."""
        stack = [self]
        while stack:
            branch = stack.pop()
            yield branch
            stack.extend(reversed(branch.children))

    def walk_with_depth(self) -> Iterator[Tuple['Branch', int]]:
        stack = [(self, 0)]
        while stack:
            branch, depth = stack.pop()
            yield branch, depth
            stack.extend((child, depth + 1) for child in reversed(branch.children))

    def all_entities(self) -> Iterator[Entity]:
        for branch in self.walk():
            yield from branch.entities

    def count_branches(self) -> int:
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        return (f"Branch({self.start} -> {self.end}, dist={self.dist_from_root:.1f}, "
                f"children={len(self.children)}, entities={len(self.entities)})")
