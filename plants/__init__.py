"""
Procedural plant structures and their organic growth animation.

A seed drives a deterministic recursive generator (one policy per plant
archetype); the growth projector then reveals the structure frame by frame
along its distance from the root.
"""

from .seeded_random import SeededRandom, random_seed
from .geometry import Point, Color, Bounds, GeometryError
from .branch import Branch, Entity
from .archetype import ArchetypePolicy
from .pine import PinePolicy
from .sunflower import SunflowerPolicy
from .registry import ARCHETYPES, get_archetype, available_archetypes
from .bounds import FitTransform, compute_bounds, compute_fit, compute_max_distance, growth_budget
from .growth import Segment, FlatFrame, flatten, reveal_fraction, entity_opacity
from .compositor import ComposedFrame
from .animation import GrowthAnimation, progress_for_frame
from .visualization import visualize_structure, plot_growth_statistics

__all__ = [
    'SeededRandom',
    'random_seed',
    'Point',
    'Color',
    'Bounds',
    'GeometryError',
    'Branch',
    'Entity',
    'ArchetypePolicy',
    'PinePolicy',
    'SunflowerPolicy',
    'ARCHETYPES',
    'get_archetype',
    'available_archetypes',
    'FitTransform',
    'compute_bounds',
    'compute_fit',
    'compute_max_distance',
    'growth_budget',
    'Segment',
    'FlatFrame',
    'flatten',
    'reveal_fraction',
    'entity_opacity',
    'ComposedFrame',
    'GrowthAnimation',
    'progress_for_frame',
    'visualize_structure',
    'plot_growth_statistics',
]
