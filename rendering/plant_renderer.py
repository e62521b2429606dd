"""
Plant renderer using Cairo.
Draws composed growth frames: branches as quadratic curves, entities as
shadowed radial-gradient discs, layered as the archetype's compositor decided.
"""

import math
import multiprocessing
from pathlib import Path
from typing import Iterator, Optional, Sequence

import cairo
import imageio
import numpy as np
from tqdm import tqdm

from config.render_config import PlantRenderConfig
from plants.animation import GrowthAnimation
from plants.branch import Entity
from plants.compositor import ComposedFrame
from plants.geometry import Point
from plants.growth import Segment
from plants.profiling import profile_block
from .base import Renderer
from .styles import PlantStyle, get_style
from .video import VideoSink, append_with_retry


_worker_state = {}


def _init_worker(style: PlantStyle, config: PlantRenderConfig, animation: GrowthAnimation):
    _worker_state['renderer'] = PlantRenderer(style, config)
    _worker_state['animation'] = animation


def render_plant_frame_wrapper(frame_index: int) -> np.ndarray:
    renderer = _worker_state['renderer']
    animation = _worker_state['animation']
    return renderer.render_frame(animation.frame_at(frame_index))


class PlantRenderer(Renderer):
    def __init__(self, style: PlantStyle, config: PlantRenderConfig = None):
        super().__init__(config or PlantRenderConfig())
        self.style = style

    @classmethod
    def for_archetype(cls, archetype: str, config: PlantRenderConfig = None) -> 'PlantRenderer':
        return cls(get_style(archetype), config)

    @staticmethod
    def _quadratic_path(ctx: cairo.Context, start: Point, control: Point, end: Point,
                        dx: float = 0.0, dy: float = 0.0):
        # Quadratic P0->P2 with control P1 as a cubic: CP1 = P0 + 2/3(P1-P0), CP2 = P2 + 2/3(P1-P2)
        sx, sy = start.x + dx, start.y + dy
        cx, cy = control.x + dx, control.y + dy
        ex, ey = end.x + dx, end.y + dy
        ctx.new_path()
        ctx.move_to(sx, sy)
        ctx.curve_to(
            sx + (2 / 3) * (cx - sx), sy + (2 / 3) * (cy - sy),
            ex + (2 / 3) * (cx - ex), ey + (2 / 3) * (cy - ey),
            ex, ey
        )

    def _stroke_outline(self, ctx: cairo.Context, seg: Segment):
        ctx.set_source_rgba(*self.style.branch.outline.to_rgba())
        ctx.set_line_width(seg.stroke_width)
        self._quadratic_path(ctx, seg.start, seg.control, seg.end)
        ctx.stroke()

    def _stroke_highlight(self, ctx: cairo.Context, seg: Segment):
        branch_style = self.style.branch
        if not branch_style.has_highlight(seg.stroke_width):
            return
        dx, dy = branch_style.highlight_offset
        ctx.set_source_rgba(*branch_style.highlight.to_rgba())
        ctx.set_line_width(seg.stroke_width * branch_style.highlight_width)
        self._quadratic_path(ctx, seg.start, seg.control, seg.end, dx, dy)
        ctx.stroke()

    def _draw_branches(self, ctx: cairo.Context, segments: Sequence[Segment]):
        ctx.set_line_cap(cairo.LINE_CAP_ROUND)
        ctx.set_line_join(cairo.LINE_JOIN_ROUND)

        visible = [seg for seg in segments if seg.stroke_width > 0]
        if self.style.branch.interleaved:
            for seg in visible:
                self._stroke_outline(ctx, seg)
                self._stroke_highlight(ctx, seg)
        else:
            for seg in visible:
                self._stroke_outline(ctx, seg)
            for seg in visible:
                self._stroke_highlight(ctx, seg)

    def _fill_circle(self, ctx: cairo.Context, x: float, y: float, radius: float):
        ctx.new_path()
        ctx.arc(x, y, radius, 0, 2 * math.pi)
        ctx.fill()

    def _draw_entity(self, ctx: cairo.Context, e: Entity):
        opacity = e.opacity
        x, y, radius = e.center.x, e.center.y, e.radius
        if radius <= 0:
            return

        shadow_dx, shadow_dy = self.config.shadow_offset
        ctx.set_source_rgba(0, 0, 0, self.style.shadow_alpha * opacity)
        self._fill_circle(ctx, x + shadow_dx, y + shadow_dy, radius)

        focus = self.config.gradient_focus
        gradient = cairo.RadialGradient(
            x - radius * focus, y - radius * focus, radius * 0.1,
            x, y, radius
        )
        hr, hg, hb, _ = e.highlight_color.to_rgba()
        br, bg, bb, _ = e.base_color.to_rgba()
        gradient.add_color_stop_rgba(0, hr, hg, hb, opacity)
        gradient.add_color_stop_rgba(1, br, bg, bb, opacity)
        ctx.set_source(gradient)
        self._fill_circle(ctx, x, y, radius)

        if e.kind == 'fruit' and self.style.cone_scales:
            ctx.set_source_rgba(60 / 255, 40 / 255, 20 / 255, 0.3 * opacity)
            self._fill_circle(ctx, x, y - radius * 0.2, radius * 0.5)

        if e.kind == 'leaf' and self.style.leaf_veins:
            ctx.set_source_rgba(0, 0, 0, 0.1 * opacity)
            ctx.set_line_width(2)
            ctx.new_path()
            ctx.move_to(x, y - radius + 5)
            ctx.line_to(x, y + radius - 5)
            ctx.stroke()

        if e.kind == 'seed' and self.style.seed_shine:
            ctx.set_source_rgba(1, 1, 1, 0.1 * opacity)
            self._fill_circle(ctx, x - 1, y - 1, radius * 0.3)

    def render_frame(self, frame: ComposedFrame) -> np.ndarray:
        """Render one composed frame to an RGBA array of shape [output_height, output_width, 4]."""
        surface, ctx = self._create_surface()

        with profile_block('PlantRenderer.draw'):
            for e in frame.background:
                self._draw_entity(ctx, e)
            self._draw_branches(ctx, frame.segments)
            for e in frame.foreground:
                self._draw_entity(ctx, e)

        return self._surface_to_numpy(surface)

    def save_frame(self, frame: ComposedFrame, output_path: str) -> np.ndarray:
        image = self.render_frame(frame)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        imageio.imwrite(output_path, image)
        return image

    def iter_rendered(self, animation: GrowthAnimation, workers: int = 1) -> Iterator[np.ndarray]:
        """
        Rendered frames in order. With several workers, frames are rendered in
        batches of `workers` and the next batch starts only once the consumer
        has taken every frame of the current one.
        """
        if workers <= 1:
            for composed in animation.iter_frames():
                yield self.render_frame(composed)
            return

        with multiprocessing.Pool(
            processes=workers,
            initializer=_init_worker,
            initargs=(self.style, self.config, animation)
        ) as pool:
            for batch_start in range(0, animation.total_frames, workers):
                batch = range(batch_start, min(batch_start + workers, animation.total_frames))
                yield from pool.map(render_plant_frame_wrapper, batch)

    def render_animation(self, animation: GrowthAnimation, output_path: str, fps: int = 30,
                         workers: int = 1, max_retries: int = 2, sink=None) -> Optional[np.ndarray]:
        """
        Render the growth animation frame by frame into a video sink.

        Returns the last rendered frame (the fully grown plant), or None when
        the animation has no frames.
        """
        owns_sink = sink is None
        if owns_sink:
            sink = VideoSink(output_path, fps=fps).open()

        last_frame = None
        frames = self.iter_rendered(animation, workers)
        try:
            for index, image in enumerate(tqdm(frames, total=animation.total_frames,
                                               desc=f"Rendering {animation.policy.name} frames")):
                append_with_retry(sink, image, index, max_retries)
                last_frame = image
        finally:
            frames.close()
            if owns_sink:
                sink.close()

        if owns_sink:
            print(f"  Saved animation: {output_path}")
        return last_frame
