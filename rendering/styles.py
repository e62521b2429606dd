"""
Per-archetype drawing styles: bark/stalk strokes, entity shadows and detailing.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from plants.geometry import Color


@dataclass(frozen=True)
class BranchStyle:
    outline: Color
    highlight: Color
    highlight_width: float                 # fraction of the outline width
    highlight_offset: Tuple[float, float]
    highlight_min_width: float
    highlight_at_min: bool = False         # a stroke exactly at the minimum still gets its highlight
    interleaved: bool = False              # highlight each branch right after its outline

    def has_highlight(self, stroke_width: float) -> bool:
        if self.highlight_at_min:
            return stroke_width >= self.highlight_min_width
        return stroke_width > self.highlight_min_width


@dataclass(frozen=True)
class PlantStyle:
    branch: BranchStyle
    shadow_alpha: float = 0.15
    leaf_veins: bool = False
    cone_scales: bool = False
    seed_shine: bool = False


STYLES: Dict[str, PlantStyle] = {
    'pine': PlantStyle(
        branch=BranchStyle(
            outline=Color(45, 36, 30),          # bark shadow
            highlight=Color(92, 78, 66),        # gray-brown bark
            highlight_width=0.6,
            highlight_offset=(-1.0, -1.0),
            highlight_min_width=1.0,
            highlight_at_min=True,
        ),
        shadow_alpha=0.2,
        cone_scales=True,
    ),
    'sunflower': PlantStyle(
        branch=BranchStyle(
            outline=Color(46, 125, 50),         # dark stalk green
            highlight=Color(76, 175, 80),
            highlight_width=0.4,
            highlight_offset=(-2.0, 0.0),
            highlight_min_width=2.0,
            interleaved=True,
        ),
        shadow_alpha=0.15,
        leaf_veins=True,
        seed_shine=True,
    ),
}


def get_style(archetype: str) -> PlantStyle:
    if archetype not in STYLES:
        raise KeyError(f"No drawing style for archetype '{archetype}'. Available: {', '.join(STYLES)}")
    return STYLES[archetype]
