"""
Bounds and auto-fit: how big a generated plant is, and how to place it on a canvas.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .branch import Branch
from .geometry import Bounds, GeometryError, Point
from .profiling import profile


@dataclass(frozen=True)
class FitTransform:
    """Uniform scale followed by a translation, from structure space to canvas pixels."""
    scale: float
    offset_x: float
    offset_y: float

    def apply(self, p: Point) -> Point:
        return p.transform(self.scale, self.offset_x, self.offset_y)

    @classmethod
    def identity(cls) -> 'FitTransform':
        return cls(1.0, 0.0, 0.0)


@profile
def compute_bounds(root: Branch) -> Bounds:
    """
    Smallest rectangle holding every start/end/control point of every branch
    and every entity circle in the tree.
    """
    xs = []
    ys = []
    for branch in root.walk():
        xs.extend((branch.start.x, branch.end.x, branch.control.x))
        ys.extend((branch.start.y, branch.end.y, branch.control.y))
        for e in branch.entities:
            xs.extend((e.center.x - e.radius, e.center.x + e.radius))
            ys.extend((e.center.y - e.radius, e.center.y + e.radius))

    return Bounds.from_arrays(np.asarray(xs, dtype=float), np.asarray(ys, dtype=float))


def compute_fit(bounds: Bounds, canvas_size: Tuple[int, int], padding: float) -> FitTransform:
    """
    Scale the bounds into the padded canvas keeping the aspect ratio, centered
    horizontally with the lowest point (the ground) resting on the bottom padding.
    """
    width, height = canvas_size
    tree_width = bounds.width
    tree_height = bounds.height

    if not (math.isfinite(tree_width) and math.isfinite(tree_height)):
        raise GeometryError(f"Bounds are not finite: {bounds}")
    if tree_width <= 0 or tree_height <= 0:
        raise GeometryError(f"Cannot fit degenerate bounds {bounds} (zero width or height)")

    avail_w = width - padding * 2
    avail_h = height - padding * 2
    if avail_w <= 0 or avail_h <= 0:
        raise GeometryError(
            f"Padding {padding} leaves no drawable area on a {width}x{height} canvas"
        )

    scale = min(avail_w / tree_width, avail_h / tree_height)

    offset_x = width / 2 - bounds.center_x * scale
    offset_y = (height - padding) - bounds.max_y * scale

    return FitTransform(scale, offset_x, offset_y)


def compute_max_distance(root: Branch) -> float:
    """Growth distance at which every branch is complete and every entity has started to appear."""
    max_dist = 0.0
    for branch in root.walk():
        max_dist = max(max_dist, branch.reach)
        for e in branch.entities:
            max_dist = max(max_dist, e.dist_from_root)
    return max_dist


def growth_budget(root: Branch, margin: float) -> float:
    """Total progress an animation sweeps through: the max distance plus a settling margin."""
    return compute_max_distance(root) + margin
