"""
Configuration module.
"""

from .pipeline import PipelineConfig, load_config, save_config
from .render_config import PlantRenderConfig
from .grid_config import GridConfig, PlantPlacement, load_placements, save_placements

__all__ = [
    'PipelineConfig',
    'load_config',
    'save_config',
    'PlantRenderConfig',
    'GridConfig',
    'PlantPlacement',
    'load_placements',
    'save_placements',
]
