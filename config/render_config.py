"""
Configuration for rendering module.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class PlantRenderConfig:
    output_width: int = 1080
    output_height: int = 1080
    background_color: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)  # transparent

    shadow_offset: Tuple[float, float] = (2.0, 3.0)
    gradient_focus: float = 0.3    # highlight center shift toward the top-left, in radii

    antialiasing: bool = True

    @classmethod
    def from_pipeline(cls, pipeline_config) -> 'PlantRenderConfig':
        """Create render config from PipelineConfig."""
        return cls(
            output_width=pipeline_config.width,
            output_height=pipeline_config.height,
        )
