"""
Tests for the Cairo renderer and the frame sink protocol.
"""

import numpy as np
import pytest

from config.render_config import PlantRenderConfig
from plants.animation import GrowthAnimation
from plants.compositor import ComposedFrame
from plants.pine import PinePolicy
from plants.sunflower import SunflowerPolicy
from rendering.plant_renderer import PlantRenderer
from rendering.styles import get_style
from rendering.video import FrameSinkError, VideoSink, append_with_retry


SIZE = 64


class ListSink:
    """Collects frames in memory."""

    def __init__(self):
        self.frames = []

    def append(self, frame: np.ndarray):
        self.frames.append(frame)


class FlakySink(ListSink):
    """Rejects the first `failures` appends, then accepts."""

    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def append(self, frame: np.ndarray):
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise FrameSinkError(len(self.frames), "busy")
        super().append(frame)


def make_animation(policy) -> GrowthAnimation:
    """Tiny animation matching the test canvas."""
    return GrowthAnimation.build(policy, seed="render", width=SIZE, height=SIZE, padding=4,
                                 fps=4, duration_seconds=1, verbose=False)


def make_renderer(archetype: str = 'pine') -> PlantRenderer:
    return PlantRenderer.for_archetype(archetype, PlantRenderConfig(output_width=SIZE, output_height=SIZE))


class TestRenderFrame:
    """Single frames."""

    def test_empty_frame_is_transparent(self) -> None:
        image = make_renderer().render_frame(ComposedFrame())
        assert image.shape == (SIZE, SIZE, 4)
        assert image.dtype == np.uint8
        assert not image.any()

    @pytest.mark.parametrize("archetype,policy", [
        ('pine', PinePolicy(depth=3)),
        ('sunflower', SunflowerPolicy(depth=3)),
    ])
    def test_grown_plant_draws_pixels(self, archetype: str, policy) -> None:
        image = make_renderer(archetype).render_frame(make_animation(policy).final_frame())
        assert image.shape == (SIZE, SIZE, 4)
        assert image[:, :, 3].any()

    def test_opaque_background(self) -> None:
        config = PlantRenderConfig(output_width=SIZE, output_height=SIZE,
                                   background_color=(1.0, 1.0, 1.0, 1.0))
        image = PlantRenderer(get_style('pine'), config).render_frame(ComposedFrame())
        assert (image == 255).all()

    def test_save_frame(self, tmp_path) -> None:
        path = tmp_path / "still" / "final.png"
        animation = make_animation(PinePolicy(depth=3))
        image = make_renderer().save_frame(animation.final_frame(), str(path))
        assert path.exists()
        assert image.shape == (SIZE, SIZE, 4)

    def test_unknown_style(self) -> None:
        with pytest.raises(KeyError):
            get_style('cactus')


class TestBranchHighlight:
    """Which stroke widths get the lighter highlight pass."""

    def test_pine_highlights_down_to_one_pixel(self) -> None:
        branch = get_style('pine').branch
        assert branch.has_highlight(1.0)
        assert branch.has_highlight(1.5)
        assert not branch.has_highlight(0.99)

    def test_sunflower_needs_more_than_two_pixels(self) -> None:
        branch = get_style('sunflower').branch
        assert not branch.has_highlight(2.0)
        assert branch.has_highlight(2.01)


class TestRenderAnimation:
    """Frames flow in order into the sink."""

    def test_all_frames_delivered(self) -> None:
        animation = make_animation(PinePolicy(depth=3))
        sink = ListSink()
        last = make_renderer().render_animation(animation, "unused.webm", sink=sink)
        assert len(sink.frames) == animation.total_frames
        assert not sink.frames[0].any()
        assert np.array_equal(last, sink.frames[-1])

    def test_frames_match_single_renders(self) -> None:
        animation = make_animation(SunflowerPolicy(depth=3))
        renderer = make_renderer('sunflower')
        sink = ListSink()
        renderer.render_animation(animation, "unused.webm", sink=sink)
        assert np.array_equal(sink.frames[2], renderer.render_frame(animation.frame_at(2)))

    def test_rejected_frame_is_retried(self) -> None:
        animation = make_animation(PinePolicy(depth=3))
        sink = FlakySink(failures=2)
        make_renderer().render_animation(animation, "unused.webm", sink=sink, max_retries=2)
        assert len(sink.frames) == animation.total_frames
        assert sink.attempts == animation.total_frames + 2

    def test_persistent_failure_propagates(self) -> None:
        animation = make_animation(PinePolicy(depth=3))
        sink = FlakySink(failures=100)
        with pytest.raises(FrameSinkError) as excinfo:
            make_renderer().render_animation(animation, "unused.webm", sink=sink, max_retries=1)
        assert excinfo.value.frame_index == 0
        assert sink.attempts == 2
        assert sink.frames == []


class TestSink:
    def test_append_with_retry_succeeds_first_time(self) -> None:
        sink = ListSink()
        append_with_retry(sink, np.zeros((2, 2, 4), dtype=np.uint8), 0)
        assert len(sink.frames) == 1

    def test_unopened_sink_rejects(self, tmp_path) -> None:
        sink = VideoSink(str(tmp_path / "out.webm"))
        with pytest.raises(FrameSinkError):
            sink.append(np.zeros((2, 2, 4), dtype=np.uint8))

    def test_unsupported_suffix(self, tmp_path) -> None:
        with pytest.raises(ValueError):
            VideoSink(str(tmp_path / "out.gif"))

    def test_format_defaults(self, tmp_path) -> None:
        webm = VideoSink(str(tmp_path / "out.webm"))
        assert webm.codec == 'libvpx-vp9'
        assert webm.pixel_format == 'yuva420p'
        mp4 = VideoSink(str(tmp_path / "out.mp4"))
        assert mp4.codec == 'libx264'
        assert mp4.bitrate is None
