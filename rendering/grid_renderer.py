"""
Isometric garden grid renderer using Cairo.

Draws a square grid of grass-topped soil blocks and stands rendered plant
images on their tiles, anchored at each plant's trunk base. Blocks are drawn
back to front (by gridX + gridY) so nearer blocks and plants cover farther ones.
"""

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import cairo
import imageio
import numpy as np

from config.grid_config import GridConfig, PlantPlacement
from plants.geometry import Color
from .base import surface_to_rgba


@dataclass(frozen=True)
class GridPosition:
    """Top-face center of a tile on the output canvas, rounded to pixels."""
    grid_x: int
    grid_y: int
    pixel_x: int
    pixel_y: int

    def to_dict(self) -> Dict[str, int]:
        return {'gridX': self.grid_x, 'gridY': self.grid_y,
                'pixelX': self.pixel_x, 'pixelY': self.pixel_y}


@dataclass(frozen=True)
class GridLayout:
    grid_size: int
    canvas_width: int
    canvas_height: int
    start_x: float
    start_y: float


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def tuft_offset(grid_x: int, grid_y: int, resolution: float) -> Optional[Tuple[float, float]]:
    """
    Deterministic grass tuft on about half of the empty tiles: the offset from
    the tile center, or None for a bare tile.
    """
    seed = math.sin(grid_x * 12.9898 + grid_y * 78.233) * 43758.5453
    if seed - math.floor(seed) <= 0.5:
        return None
    # truncated remainder, keeps the sign of the seed
    rand_x = math.fmod(seed * 10, 20 * resolution) - 10 * resolution
    rand_y = math.fmod(seed * 20, 10 * resolution) - 5 * resolution
    return rand_x, rand_y


class GridRenderer:
    def __init__(self, config: GridConfig = None):
        self.config = config or GridConfig()

    def layout(self, placements: Sequence[PlantPlacement]) -> GridLayout:
        """Grid just large enough for every placement (never below the minimum size)."""
        cfg = self.config
        grid_size = cfg.min_grid_size
        for p in placements:
            grid_size = max(grid_size, p.grid_x + 1, p.grid_y + 1)

        tile_w = cfg.scaled(cfg.tile_width)
        width = grid_size * 2 * (tile_w / 2) + cfg.scaled(cfg.margin_x)
        height = (grid_size * (tile_w / 2)
                  + (cfg.scaled(cfg.soil_height) + cfg.scaled(cfg.grass_height)) * 2
                  + cfg.scaled(cfg.margin_y))
        return GridLayout(grid_size, int(width), int(height), width / 2, cfg.scaled(cfg.start_y))

    def positions(self, layout: GridLayout) -> List[GridPosition]:
        """Every tile, row by row."""
        tile_w = self.config.scaled(self.config.tile_width)
        result = []
        for y in range(layout.grid_size):
            for x in range(layout.grid_size):
                iso_x = (x - y) * (tile_w / 2)
                iso_y = (x + y) * (tile_w / 4)
                result.append(GridPosition(
                    x, y,
                    round_half_up(layout.start_x + iso_x),
                    round_half_up(layout.start_y + iso_y + tile_w / 4),
                ))
        return result

    @staticmethod
    def draw_order(positions: Sequence[GridPosition]) -> List[GridPosition]:
        """Back to front; tiles on the same diagonal keep their row order."""
        return sorted(positions, key=lambda p: p.grid_x + p.grid_y)

    def _poly(self, ctx: cairo.Context, points: Sequence[Tuple[float, float]],
              fill: Color, stroke: Color = None):
        ctx.new_path()
        ctx.move_to(*points[0])
        for point in points[1:]:
            ctx.line_to(*point)
        ctx.close_path()
        ctx.set_source_rgba(*fill.to_rgba())
        ctx.fill_preserve()
        ctx.set_source_rgba(*(stroke or fill).to_rgba())
        ctx.set_line_width(self.config.scaled(1))
        ctx.stroke()

    def _side_faces(self, ctx: cairo.Context, x: float, top: float, w: float, h: float,
                    depth: float, light: Color, dark: Color):
        self._poly(ctx, [(x, top + h), (x + w / 2, top + h / 2),
                         (x + w / 2, top + h / 2 + depth), (x, top + h + depth)], dark)
        self._poly(ctx, [(x, top + h), (x - w / 2, top + h / 2),
                         (x - w / 2, top + h / 2 + depth), (x, top + h + depth)], light)

    def _tuft(self, ctx: cairo.Context, cx: float, cy: float):
        size = self.config.scaled(self.config.tuft_size)
        ctx.set_source_rgba(*Color.from_hex(self.config.grass_tuft).to_rgba())
        ctx.set_line_width(self.config.scaled(2))
        ctx.set_line_cap(cairo.LINE_CAP_ROUND)
        ctx.new_path()
        ctx.move_to(cx - size, cy - size / 2)
        ctx.line_to(cx, cy + size / 2)
        ctx.line_to(cx + size, cy - size / 2)
        ctx.stroke()

    def _draw_block(self, ctx: cairo.Context, layout: GridLayout, grid_x: int, grid_y: int,
                    occupied: bool):
        cfg = self.config
        w = cfg.scaled(cfg.tile_width)
        h = w / 2
        x = layout.start_x + (grid_x - grid_y) * (w / 2)
        y = layout.start_y + (grid_x + grid_y) * (w / 4)
        grass = cfg.scaled(cfg.grass_height)

        self._side_faces(ctx, x, y + grass, w, h, cfg.scaled(cfg.soil_height),
                         Color.from_hex(cfg.soil_side_light), Color.from_hex(cfg.soil_side_dark))
        self._side_faces(ctx, x, y, w, h, grass,
                         Color.from_hex(cfg.grass_side_light), Color.from_hex(cfg.grass_side_dark))
        self._poly(ctx, [(x, y), (x + w / 2, y + h / 2), (x, y + h), (x - w / 2, y + h / 2)],
                   Color.from_hex(cfg.grass_top), Color.from_hex(cfg.grid_stroke))

        if not occupied:
            offset = tuft_offset(grid_x, grid_y, cfg.resolution)
            if offset is not None:
                self._tuft(ctx, x + offset[0], y + h / 2 + offset[1])

    def _draw_plant(self, ctx: cairo.Context, image: cairo.ImageSurface,
                    placement: PlantPlacement, position: GridPosition):
        scale = placement.scale
        # trunk x is measured from the right edge of the source render
        draw_x = position.pixel_x - (self.config.source_width - placement.trunk_x) * scale
        draw_y = position.pixel_y - placement.trunk_y * scale
        ctx.save()
        ctx.translate(draw_x, draw_y)
        ctx.scale(scale, scale)
        ctx.set_source_surface(image, 0, 0)
        ctx.paint()
        ctx.restore()

    @staticmethod
    def load_images(placements: Sequence[PlantPlacement]) -> Dict[str, cairo.ImageSurface]:
        """Each distinct image once. Unreadable images are reported and left out."""
        images = {}
        for p in placements:
            if p.image_path in images:
                continue
            if not Path(p.image_path).exists():
                print(f"Warning: could not load image {p.image_path} (file not found)")
                continue
            try:
                images[p.image_path] = cairo.ImageSurface.create_from_png(p.image_path)
            except (cairo.Error, OSError) as e:
                print(f"Warning: could not load image {p.image_path}: {e}")
                continue
            print(f"Loaded image: {p.image_path}")
        return images

    def render(self, placements: Sequence[PlantPlacement]) -> Tuple[np.ndarray, List[GridPosition]]:
        """Draw the grid with its plants; returns the RGBA image and the tile positions."""
        layout = self.layout(placements)
        positions = self.positions(layout)
        by_tile = {(p.grid_x, p.grid_y): p for p in placements}
        images = self.load_images(placements)

        print(f"Generating {layout.grid_size}x{layout.grid_size} grid at "
              f"{self.config.resolution}x resolution ({layout.canvas_width}x{layout.canvas_height})...")

        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, layout.canvas_width, layout.canvas_height)
        ctx = cairo.Context(surface)
        ctx.set_antialias(cairo.ANTIALIAS_BEST)

        for pos in self.draw_order(positions):
            placement = by_tile.get((pos.grid_x, pos.grid_y))
            self._draw_block(ctx, layout, pos.grid_x, pos.grid_y, placement is not None)
            if placement is not None and placement.image_path in images:
                self._draw_plant(ctx, images[placement.image_path], placement, pos)

        return surface_to_rgba(surface), positions

    def save(self, placements: Sequence[PlantPlacement], image_path: str,
             positions_path: str) -> List[GridPosition]:
        image, positions = self.render(placements)

        Path(image_path).parent.mkdir(parents=True, exist_ok=True)
        imageio.imwrite(image_path, image)
        export_grid_positions(positions, positions_path)

        print(f"Grid with plants generated: {image_path} ({image.shape[1]}x{image.shape[0]})")
        print(f"Positions saved: {positions_path}")
        return positions


def export_grid_positions(positions: Sequence[GridPosition], output_path: str):
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump([p.to_dict() for p in positions], f, indent=2)
