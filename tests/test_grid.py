"""
Tests for the isometric garden grid: layout, draw order, plant placement and
the exported tile positions.
"""

import json

import cairo
import pytest

from config import GridConfig, PipelineConfig, PlantPlacement, load_placements, save_placements
from rendering.grid_renderer import GridRenderer, export_grid_positions, tuft_offset


GRASS_TOP = [166, 216, 88, 255]
RED = [255, 0, 0, 255]


def make_png(path, size: int = 10) -> str:
    """Write a solid red PNG and return its path."""
    surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, size, size)
    ctx = cairo.Context(surface)
    ctx.set_source_rgb(1, 0, 0)
    ctx.paint()
    surface.write_to_png(str(path))
    return str(path)


def make_placement(image_path: str, grid_x: int = 1, grid_y: int = 1) -> PlantPlacement:
    """A placement whose trunk base is 5px left of the source's right edge and 10px down."""
    return PlantPlacement(image_path, grid_x, grid_y, trunk_x=1075, trunk_y=10, scale=1.0)


def make_renderer() -> GridRenderer:
    return GridRenderer(GridConfig(resolution=1))


class TestLayout:
    """Grid size and canvas dimensions."""

    def test_minimum_size_without_placements(self) -> None:
        layout = GridRenderer().layout([])
        assert layout.grid_size == 3
        assert (layout.canvas_width, layout.canvas_height) == (1600, 1840)
        assert (layout.start_x, layout.start_y) == (800, 600)

    def test_grows_to_fit_placements(self) -> None:
        layout = make_renderer().layout([make_placement('a.png', 4, 1)])
        assert layout.grid_size == 5
        assert (layout.canvas_width, layout.canvas_height) == (600, 560)

    def test_unit_resolution_canvas(self) -> None:
        layout = make_renderer().layout([make_placement('a.png')])
        assert layout.grid_size == 3
        assert (layout.canvas_width, layout.canvas_height) == (400, 460)


class TestPositions:
    """Tile centers and the order tiles are painted in."""

    def test_every_tile_row_by_row(self) -> None:
        renderer = make_renderer()
        positions = renderer.positions(renderer.layout([]))
        assert len(positions) == 9
        assert [(p.grid_x, p.grid_y) for p in positions[:4]] == [(0, 0), (1, 0), (2, 0), (0, 1)]

    def test_pixel_centers(self) -> None:
        renderer = make_renderer()
        by_tile = {(p.grid_x, p.grid_y): p for p in renderer.positions(renderer.layout([]))}
        assert (by_tile[0, 0].pixel_x, by_tile[0, 0].pixel_y) == (200, 175)
        assert (by_tile[1, 1].pixel_x, by_tile[1, 1].pixel_y) == (200, 225)
        assert (by_tile[2, 0].pixel_x, by_tile[2, 0].pixel_y) == (300, 225)
        assert (by_tile[0, 2].pixel_x, by_tile[0, 2].pixel_y) == (100, 225)

    def test_draw_order_back_to_front(self) -> None:
        renderer = make_renderer()
        order = renderer.draw_order(renderer.positions(renderer.layout([])))
        sums = [p.grid_x + p.grid_y for p in order]
        assert sums == sorted(sums)
        assert [(p.grid_x, p.grid_y) for p in order if p.grid_x + p.grid_y == 2] == [
            (2, 0), (1, 1), (0, 2),
        ]

    def test_position_json_keys(self) -> None:
        renderer = make_renderer()
        first = renderer.positions(renderer.layout([]))[0]
        assert first.to_dict() == {'gridX': 0, 'gridY': 0, 'pixelX': 200, 'pixelY': 175}


class TestTufts:
    def test_origin_tile_is_bare(self) -> None:
        assert tuft_offset(0, 0, 4) is None

    def test_deterministic_and_near_center(self) -> None:
        offsets = [tuft_offset(x, y, 1) for x in range(6) for y in range(6)]
        assert offsets == [tuft_offset(x, y, 1) for x in range(6) for y in range(6)]
        drawn = [o for o in offsets if o is not None]
        assert drawn
        for dx, dy in drawn:
            assert -30 < dx < 10
            assert -15 < dy < 5


class TestRender:
    """Pixels of the composed garden."""

    def test_plant_anchored_on_trunk(self, tmp_path) -> None:
        image, positions = make_renderer().render([make_placement(make_png(tmp_path / 'red.png'))])
        assert image.shape == (460, 400, 4)
        assert len(positions) == 9
        # drawn at (195, 215), covering 10x10 pixels
        assert image[220, 200].tolist() == RED
        assert image[175, 200].tolist() == GRASS_TOP

    def test_corners_stay_transparent(self) -> None:
        image, _ = make_renderer().render([])
        assert image[0, 0, 3] == 0
        assert image[-1, -1, 3] == 0

    def test_missing_image_is_skipped(self, tmp_path) -> None:
        placement = make_placement(str(tmp_path / 'missing.png'))
        image, positions = make_renderer().render([placement])
        assert len(positions) == 9
        assert image[225, 200].tolist() == GRASS_TOP

    def test_unreadable_image_is_skipped(self, tmp_path) -> None:
        broken = tmp_path / 'broken.png'
        broken.write_bytes(b'not a png')
        assert GridRenderer.load_images([make_placement(str(broken))]) == {}

    def test_image_loaded_once(self, tmp_path) -> None:
        path = make_png(tmp_path / 'red.png')
        images = GridRenderer.load_images([make_placement(path, 0, 1), make_placement(path, 1, 0)])
        assert list(images) == [path]


class TestSave:
    def test_writes_image_and_positions(self, tmp_path) -> None:
        image_path = tmp_path / 'out' / 'grid.png'
        positions_path = tmp_path / 'out' / 'grid_positions.json'
        placement = make_placement(make_png(tmp_path / 'red.png'))
        positions = make_renderer().save([placement], str(image_path), str(positions_path))

        assert image_path.exists()
        with open(positions_path) as f:
            data = json.load(f)
        assert len(data) == len(positions) == 9
        assert data[0] == {'gridX': 0, 'gridY': 0, 'pixelX': 200, 'pixelY': 175}
        assert data[4] == {'gridX': 1, 'gridY': 1, 'pixelX': 200, 'pixelY': 225}

    def test_export_positions(self, tmp_path) -> None:
        renderer = make_renderer()
        path = tmp_path / 'positions.json'
        export_grid_positions(renderer.positions(renderer.layout([])), str(path))
        with open(path) as f:
            assert [entry['gridX'] for entry in json.load(f)][:3] == [0, 1, 2]


class TestPlacements:
    """Tree config parsing and writing."""

    def test_from_dict(self) -> None:
        placement = PlantPlacement.from_dict({
            'imagePath': 'pine.png', 'gridX': 2, 'gridY': 1, 'scale': 0.25,
            'trunkStartPosition': {'x': 540, 'y': 1000},
        })
        assert placement == PlantPlacement('pine.png', 2, 1, 540.0, 1000.0, 0.25)

    @pytest.mark.parametrize("scale", [None, 0])
    def test_scale_defaults_to_half(self, scale) -> None:
        data = {'imagePath': 'p.png', 'gridX': 0, 'gridY': 0,
                'trunkStartPosition': {'x': 1, 'y': 2}}
        if scale is not None:
            data['scale'] = scale
        assert PlantPlacement.from_dict(data).scale == 0.5

    def test_save_and_load(self, tmp_path) -> None:
        path = tmp_path / 'tree-config.json'
        placements = [make_placement('a.png', 0, 2), make_placement('b.png', 3, 1)]
        save_placements(placements, str(path))
        assert load_placements(str(path)) == placements

    def test_missing_config(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="trees"):
            load_placements(str(tmp_path / 'nope.json'))


class TestRenderGridMode:
    def test_render_grid_writes_outputs(self, tmp_path) -> None:
        from render import render_grid

        config_path = tmp_path / 'tree-config.json'
        save_placements([make_placement(make_png(tmp_path / 'red.png'))], str(config_path))
        pipeline = PipelineConfig(seed='grid', output_base=str(tmp_path / 'out'),
                                  grid_config_path=str(config_path), grid_resolution=1)

        positions = render_grid(pipeline)

        assert len(positions) == 9
        assert pipeline.grid_image_path.exists()
        with open(pipeline.grid_positions_path) as f:
            assert len(json.load(f)) == 9
        assert isinstance(positions[0].pixel_x, int)
        assert isinstance(positions[0].pixel_y, int)
