"""
Frame compositing: painter's-algorithm ordering and approximate occlusion.

Which kinds are drawn behind the branches, which in front, in what order and
which kind hides which is decided per archetype; the helpers here are the
shared building blocks those policies combine.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .branch import Entity
from .profiling import profile
from .spatial import EntitySpatialIndex


@dataclass
class ComposedFrame:
    """Draw-ready frame: background entities, then segments, then foreground entities."""
    segments: list = field(default_factory=list)
    background: List[Entity] = field(default_factory=list)
    foreground: List[Entity] = field(default_factory=list)

    @property
    def entities(self) -> List[Entity]:
        return self.background + self.foreground

    @property
    def is_empty(self) -> bool:
        return not (self.segments or self.background or self.foreground)


def partition_by_kind(entities: Sequence[Entity]) -> Dict[str, List[Entity]]:
    groups: Dict[str, List[Entity]] = defaultdict(list)
    for entity in entities:
        groups[entity.kind].append(entity)
    return groups


def sort_back_to_front(entities: Sequence[Entity]) -> List[Entity]:
    """Ascending center y: entities lower on the canvas are drawn last, on top."""
    return sorted(entities, key=lambda e: e.center.y)


def sort_by_reveal(entities: Sequence[Entity]) -> List[Entity]:
    return sorted(entities, key=lambda e: e.dist_from_root)


def is_occluded(target: Entity, index: EntitySpatialIndex, reach: float) -> bool:
    """
    True when some occluder sits in front of the target (strictly greater y)
    and the target's center falls within reach * occluder.radius of it.
    """
    for occluder in index.candidates(target.center.x, target.center.y, reach):
        if occluder.center.y <= target.center.y:
            continue
        dx = occluder.center.x - target.center.x
        dy = occluder.center.y - target.center.y
        if math.sqrt(dx * dx + dy * dy) < occluder.radius * reach:
            return True
    return False


@profile
def suppress_occluded(targets: Sequence[Entity], occluders: Sequence[Entity],
                      reach: float = 0.9) -> List[Entity]:
    """Drop every target hidden behind an occluder. No occluders means nothing is hidden."""
    if not targets or not occluders:
        return list(targets)
    index = EntitySpatialIndex(occluders)
    return [t for t in targets if not is_occluded(t, index, reach)]
