"""
Rendering module for plant growth animations.
Uses Cairo for resolution-independent vector graphics and imageio/ffmpeg for video.
"""

from config.render_config import PlantRenderConfig
from .plant_renderer import PlantRenderer
from .styles import PlantStyle, BranchStyle, STYLES, get_style
from .video import VideoSink, FrameSinkError, append_with_retry
from .grid_renderer import GridRenderer, GridPosition, export_grid_positions
from .exporters import (
    export_structure,
    load_structure,
    load_structure_data,
    export_archetype_index
)
