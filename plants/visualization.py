"""
Visualization utilities for generated plant structures (matplotlib previews).
"""

from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.patches import Circle

from .bounds import compute_bounds, compute_max_distance
from .branch import ENTITY_KINDS, Branch


def sample_curve(branch: Branch, steps: int = 12) -> np.ndarray:
    """Points along the branch's quadratic Bézier, shape [steps + 1, 2]."""
    t = np.linspace(0.0, 1.0, steps + 1)[:, np.newaxis]
    p0 = np.array(branch.start.to_tuple())
    p1 = np.array(branch.control.to_tuple())
    p2 = np.array(branch.end.to_tuple())
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2


def visualize_structure(
    tree: Branch,
    show_entities: bool = True,
    branch_color: str = 'saddlebrown',
    figsize: Tuple[int, int] = (10, 10),
    save_path: Optional[str] = None,
    show: bool = False
):
    """
    Static preview of the full structure in its own (unscaled) coordinates.

    Unless shown, the figure is closed once saved; the returned figure can
    still be saved again but is no longer tracked by pyplot.
    """
    fig, ax = plt.subplots(figsize=figsize)

    branches = list(tree.walk())
    curves = [sample_curve(b) for b in branches]
    widths = [max(0.5, b.stroke_width / 4) for b in branches]
    ax.add_collection(LineCollection(curves, colors=branch_color, linewidths=widths))

    if show_entities:
        entities = list(tree.all_entities())
        if entities:
            patches = [Circle(e.center.to_tuple(), e.radius) for e in entities]
            colors = [np.array(e.base_color.to_rgba()) for e in entities]
            ax.add_collection(PatchCollection(patches, facecolors=colors, edgecolors='none', alpha=0.8))

    bounds = compute_bounds(tree)
    ax.set_xlim(bounds.min_x, bounds.max_x)
    ax.set_ylim(bounds.max_y, bounds.min_y)
    ax.set_aspect('equal')
    ax.axis('off')

    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        print(f"Saved preview to {save_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig, ax


def plot_growth_statistics(tree: Branch, save_path: Optional[str] = None, show: bool = False):
    """Branch length distribution, branches per depth and entity reveal timeline. Closed like the preview."""
    fig, axes = plt.subplots(1, 3, figsize=(16, 5))

    branch_lengths = [b.length for b in tree.walk()]
    axes[0].hist(branch_lengths, bins=30, color='saddlebrown', edgecolor='black')
    axes[0].set_xlabel('Branch Length')
    axes[0].set_ylabel('Count')
    axes[0].set_title('Branch Length Distribution')

    depths = [depth for _, depth in tree.walk_with_depth()]
    max_depth = max(depths) if depths else 0
    depth_counts = [depths.count(d) for d in range(max_depth + 1)]
    axes[1].bar(range(max_depth + 1), depth_counts, color='forestgreen', edgecolor='black')
    axes[1].set_xlabel('Tree Depth')
    axes[1].set_ylabel('Branch Count')
    axes[1].set_title('Branches per Depth Level')

    max_dist = compute_max_distance(tree)
    bins = np.linspace(0, max_dist if max_dist > 0 else 1, 31)
    for kind in ENTITY_KINDS:
        dists = [e.dist_from_root for e in tree.all_entities() if e.kind == kind]
        if dists:
            axes[2].hist(dists, bins=bins, alpha=0.6, label=kind)
    axes[2].set_xlabel('Reveal Distance')
    axes[2].set_ylabel('Entities')
    axes[2].set_title('Entity Reveal Timeline')
    if axes[2].has_data():
        axes[2].legend()

    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved statistics to {save_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig, axes
