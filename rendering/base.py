"""
Base renderer class defining the interface for all renderers.
"""

import cairo
import numpy as np
from abc import ABC, abstractmethod
from typing import Tuple

from config.render_config import PlantRenderConfig


def surface_to_rgba(surface: cairo.ImageSurface) -> np.ndarray:
    """Cairo's premultiplied BGRA memory as a straight-alpha RGBA uint8 array."""
    surface.flush()
    height = surface.get_height()
    width = surface.get_width()
    stride = surface.get_stride()
    buf = surface.get_data()
    arr = np.ndarray(
        shape=(height, stride // 4, 4),
        dtype=np.uint8,
        buffer=buf
    )[:, :width]

    bgra = arr.astype(np.float32)
    alpha = bgra[:, :, 3:4]
    safe_alpha = np.where(alpha > 0, alpha, 1.0)
    rgb = np.where(alpha > 0, bgra[:, :, 2::-1] * 255.0 / safe_alpha, 0.0)

    arr_rgba = np.zeros((height, width, 4), dtype=np.uint8)
    arr_rgba[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    arr_rgba[:, :, 3] = arr[:, :, 3]
    return arr_rgba


class Renderer(ABC):
    def __init__(self, config: PlantRenderConfig):
        self.config = config

    def _create_surface(self) -> Tuple[cairo.ImageSurface, cairo.Context]:
        surface = cairo.ImageSurface(
            cairo.FORMAT_ARGB32,
            self.config.output_width,
            self.config.output_height
        )
        ctx = cairo.Context(surface)

        if self.config.antialiasing:
            ctx.set_antialias(cairo.ANTIALIAS_BEST)

        r, g, b, a = self.config.background_color
        ctx.set_source_rgba(r, g, b, a)
        ctx.set_operator(cairo.OPERATOR_SOURCE)
        ctx.paint()
        ctx.set_operator(cairo.OPERATOR_OVER)

        return surface, ctx

    def _surface_to_numpy(self, surface: cairo.ImageSurface) -> np.ndarray:
        return surface_to_rgba(surface)

    @abstractmethod
    def render_frame(self, *args, **kwargs) -> np.ndarray:
        pass

    @abstractmethod
    def render_animation(self, *args, **kwargs):
        pass
