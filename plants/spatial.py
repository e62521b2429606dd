"""
Spatial partitioning for occlusion lookups between entities.
Uses scipy's KDTree so each query only inspects nearby occluders.
"""

from typing import List, Sequence

import numpy as np
from scipy.spatial import cKDTree

from .branch import Entity


class EntitySpatialIndex:
    """KD-Tree over entity centers, queried with the largest entity radius as reach."""

    def __init__(self, entities: Sequence[Entity] = ()):
        self._entities: List[Entity] = []
        self._tree: cKDTree = None
        self._max_radius: float = 0.0
        self.rebuild(entities)

    def rebuild(self, entities: Sequence[Entity]):
        self._entities = list(entities)

        if not self._entities:
            self._tree = None
            self._max_radius = 0.0
            return

        positions = np.array([[e.center.x, e.center.y] for e in self._entities])
        self._tree = cKDTree(positions)
        self._max_radius = max(e.radius for e in self._entities)

    def candidates(self, x: float, y: float, reach_factor: float = 1.0) -> List[Entity]:
        """Entities whose center lies within reach_factor * (largest radius) of (x, y)."""
        if self._tree is None:
            return []
        indices = self._tree.query_ball_point([x, y], r=self._max_radius * reach_factor)
        return [self._entities[i] for i in sorted(indices)]

    @property
    def entities(self) -> List[Entity]:
        return self._entities

    @property
    def tree(self):
        return self._tree

    def __len__(self) -> int:
        return len(self._entities)
