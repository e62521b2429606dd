"""
Growth animation timing and the pull-based frame sequence.

The structure, its fit on the canvas and the growth budget are computed once;
each frame is then flattened and composited from scratch for its own progress.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .archetype import ArchetypePolicy
from .bounds import FitTransform, compute_bounds, compute_fit, growth_budget
from .branch import Branch
from .compositor import ComposedFrame
from .geometry import Bounds
from .growth import flatten
from .seeded_random import random_seed


def progress_for_frame(frame: int, total_frames: int, budget: float) -> float:
    """Growth progress shown at `frame`, sweeping linearly from 0 to the full budget."""
    if total_frames < 1:
        raise ValueError(f"total_frames must be at least 1, got {total_frames}")
    if not 0 <= frame < total_frames:
        raise ValueError(f"frame {frame} outside [0, {total_frames})")
    if total_frames == 1:
        return budget
    return frame / (total_frames - 1) * budget


@dataclass(frozen=True)
class GrowthAnimation:
    policy: ArchetypePolicy
    seed: str
    tree: Branch
    bounds: Bounds
    transform: FitTransform
    budget: float
    total_frames: int
    canvas_size: Tuple[int, int]

    @classmethod
    def build(cls, policy: ArchetypePolicy, seed: Optional[str] = None,
              width: int = 1080, height: int = 1080, padding: float = 80,
              fps: int = 30, duration_seconds: float = 30,
              verbose: bool = True) -> 'GrowthAnimation':
        seed = random_seed() if seed is None else seed
        total_frames = int(fps * duration_seconds)
        if total_frames < 1:
            raise ValueError(f"fps * duration_seconds must give at least one frame, got {total_frames}")

        if verbose:
            print(f"Building {policy.name} structure (seed {seed})...")
        tree = policy.generate(seed)

        bounds = compute_bounds(tree)
        transform = compute_fit(bounds, (width, height), padding)
        budget = growth_budget(tree, policy.growth_margin)

        if verbose:
            print(f"  Size: {bounds.width:.0f}x{bounds.height:.0f}")
            print(f"  Scale: {transform.scale:.3f}")
            print(f"  Growth budget: {budget:.1f} over {total_frames} frames")

        return cls(policy, seed, tree, bounds, transform, budget, total_frames, (width, height))

    def progress_at(self, frame: int) -> float:
        return progress_for_frame(frame, self.total_frames, self.budget)

    def frame_at(self, frame: int) -> ComposedFrame:
        return self.compose(self.progress_at(frame))

    def compose(self, progress: float) -> ComposedFrame:
        flat = flatten(self.tree, progress, self.transform, self.policy)
        return self.policy.composite(flat)

    def final_frame(self) -> ComposedFrame:
        return self.frame_at(self.total_frames - 1)

    def iter_frames(self, start: int = 0) -> Iterator[ComposedFrame]:
        """
        Frames in order, each computed only when the consumer asks for it.
        Closing the generator stops production.
        """
        for frame in range(start, self.total_frames):
            yield self.frame_at(frame)
