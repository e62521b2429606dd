"""
Configuration for the isometric garden grid.

Plant placements are read from a JSON file of the form
{"trees": [{"imagePath": ..., "gridX": ..., "gridY": ..., "scale": ...,
            "trunkStartPosition": {"x": ..., "y": ...}}]}
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List
import json


@dataclass(frozen=True)
class PlantPlacement:
    image_path: str
    grid_x: int
    grid_y: int
    trunk_x: float                 # trunk base in the source render, pixels
    trunk_y: float
    scale: float = 0.5

    @classmethod
    def from_dict(cls, data: Dict) -> 'PlantPlacement':
        trunk = data['trunkStartPosition']
        return cls(
            image_path=data['imagePath'],
            grid_x=int(data['gridX']),
            grid_y=int(data['gridY']),
            trunk_x=float(trunk['x']),
            trunk_y=float(trunk['y']),
            # a missing or zero scale falls back to the default
            scale=float(data.get('scale') or 0.5),
        )

    def to_dict(self) -> Dict:
        return {
            'imagePath': self.image_path,
            'gridX': self.grid_x,
            'gridY': self.grid_y,
            'scale': self.scale,
            'trunkStartPosition': {'x': self.trunk_x, 'y': self.trunk_y},
        }


@dataclass
class GridConfig:
    """Tile geometry in base units; every length is multiplied by `resolution`."""

    resolution: int = 4            # 4x for high resolution output
    tile_width: float = 100
    grass_height: float = 15
    soil_height: float = 40
    min_grid_size: int = 3
    source_width: int = 1080       # width of the plant renders the trunk positions refer to

    margin_x: float = 100          # added to the grid width
    margin_y: float = 200          # added to the grid height
    start_y: float = 150           # top corner of tile (0, 0)
    tuft_size: float = 6

    grass_top: str = '#A6D858'
    grass_side_light: str = '#8BC34A'
    grass_side_dark: str = '#7CB342'
    grass_tuft: str = '#73A536'
    grid_stroke: str = '#88B446'
    soil_side_light: str = '#795548'
    soil_side_dark: str = '#5D4037'

    def scaled(self, value: float) -> float:
        return value * self.resolution


def load_placements(path: str = 'tree-config.json') -> List[PlantPlacement]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Plant placements not found at {path}. Write a tree config with a 'trees' list first."
        )
    with open(config_path, 'r') as f:
        data = json.load(f)
    return [PlantPlacement.from_dict(entry) for entry in data['trees']]


def save_placements(placements: List[PlantPlacement], path: str = 'tree-config.json'):
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        json.dump({'trees': [p.to_dict() for p in placements]}, f, indent=2)
    print(f"Saved placements to {config_path}")
