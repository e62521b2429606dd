"""
Unified configuration for the plant growth pipeline.

All output paths are derived from the archetype name and the output base.
This is the single source of truth for the grow and render scripts.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional
import json
import re

from plants.seeded_random import random_seed


@dataclass
class PipelineConfig:
    """
    Unified configuration for the plant growth pipeline.
    All output paths are derived from archetype and output_base.
    """

    # ==================== MAIN SETTING ====================
    archetype: str = 'pine'
    seed: Optional[str] = None     # None = fresh random seed per run

    # ==================== CANVAS ====================
    width: int = 1080
    height: int = 1080
    padding: float = 80

    # ==================== ANIMATION ====================
    fps: int = 30
    duration_seconds: float = 30
    video_suffix: str = '.webm'    # '.webm' keeps the transparent background, '.mp4' does not

    # ==================== OUTPUT SETTINGS ====================
    output_base: str = 'outputs'
    cache_base: str = 'cache'

    # ==================== RENDERING ====================
    workers: int = 1               # >1 renders frames in bounded batches on a process pool
    max_sink_retries: int = 2
    profile: bool = False

    # ==================== GARDEN GRID ====================
    grid_config_path: str = 'tree-config.json'  # plant placements for --mode grid
    grid_resolution: int = 4

    def __post_init__(self):
        if self.seed is None:
            self.seed = random_seed()

    @property
    def total_frames(self) -> int:
        return int(self.fps * self.duration_seconds)

    # ==================== DERIVED PATHS ====================
    @property
    def seed_tag(self) -> str:
        """First 8 seed characters, with anything unsafe in a file name replaced by '_'."""
        return re.sub(r'[^A-Za-z0-9_-]', '_', self.seed[:8]) or '_'

    @property
    def run_name(self) -> str:
        return f'{self.archetype}_{self.seed_tag}'

    @property
    def structure_output_dir(self) -> Path:
        return Path(self.output_base) / 'structures'

    @property
    def render_output_dir(self) -> Path:
        return Path(self.output_base) / 'rendering'

    @property
    def structure_path(self) -> Path:
        return self.structure_output_dir / f'{self.run_name}_structure.json'

    @property
    def metadata_path(self) -> Path:
        return self.structure_output_dir / f'{self.run_name}_metadata.json'

    @property
    def preview_path(self) -> Path:
        return self.structure_output_dir / f'{self.run_name}_preview.png'

    @property
    def stats_path(self) -> Path:
        return self.structure_output_dir / f'{self.run_name}_stats.png'

    @property
    def video_path(self) -> Path:
        return self.render_output_dir / f'{self.run_name}{self.video_suffix}'

    @property
    def image_path(self) -> Path:
        return self.render_output_dir / f'{self.run_name}_final.png'

    @property
    def grid_image_path(self) -> Path:
        return self.render_output_dir / 'isometric_grid_with_trees.png'

    @property
    def grid_positions_path(self) -> Path:
        return self.render_output_dir / 'grid_positions.json'

    @property
    def cache_dir(self) -> Path:
        return Path(self.cache_base) / 'video'

    @property
    def archetype_index_path(self) -> Path:
        return Path(self.cache_base) / 'entity_data.json'

    # ==================== DIRECTORY CREATION ====================
    def create_output_dirs(self):
        """Create all output directories."""
        self.structure_output_dir.mkdir(parents=True, exist_ok=True)
        self.render_output_dir.mkdir(parents=True, exist_ok=True)


def load_config(path: str = 'config/pipeline.json') -> PipelineConfig:
    """Load config from JSON file, with defaults for missing fields."""
    config_path = Path(path)
    if not config_path.exists():
        return PipelineConfig()

    with open(config_path, 'r') as f:
        data = json.load(f)

    return PipelineConfig(**data)


def save_config(config: PipelineConfig, path: str = 'config/pipeline.json'):
    """Save config to JSON file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(asdict(config), f, indent=2)

    print(f"Saved config to {config_path}")
