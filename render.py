"""
Rendering Script

Renders plant growth animations with the Cairo-based renderer.

Configuration is loaded from config/pipeline.json; --archetype and --seed override it.
All paths are derived from the archetype and seed.

Modes:
    video - Render the growth animation and a snapshot of the fully grown plant
    image - Render only the fully grown plant
    cache - Render a video for every archetype into the cache directory (fixed seed)
    grid  - Stand rendered plant images on an isometric garden grid (placements from a tree config)
"""

import argparse
import dataclasses
import os
from pathlib import Path

from config import GridConfig, PlantRenderConfig, load_config, load_placements
from plants import GeometryError, GrowthAnimation, available_archetypes, get_archetype
from plants.profiling import profiler
from rendering import FrameSinkError, GridRenderer, PlantRenderer, export_archetype_index


CACHE_SEED = '6969696969696969'


def remove_if_exists(path: str):
    """Remove file if it exists to ensure fresh write."""
    p = Path(path)
    if p.exists():
        try:
            os.remove(p)
            print(f"Removed existing file: {path}")
        except OSError as e:
            print(f"Error removing {path}: {e}")


def build_animation(pipeline) -> GrowthAnimation:
    return GrowthAnimation.build(
        get_archetype(pipeline.archetype),
        seed=pipeline.seed,
        width=pipeline.width,
        height=pipeline.height,
        padding=pipeline.padding,
        fps=pipeline.fps,
        duration_seconds=pipeline.duration_seconds,
    )


def render_video(pipeline):
    """Render the growth animation, then save the last frame as a still."""
    animation = build_animation(pipeline)
    renderer = PlantRenderer.for_archetype(pipeline.archetype, PlantRenderConfig.from_pipeline(pipeline))

    output_path = str(pipeline.video_path)
    remove_if_exists(output_path)
    print(f"Rendering {animation.total_frames} frames at {pipeline.width}x{pipeline.height} with Cairo...")
    renderer.render_animation(
        animation, output_path,
        fps=pipeline.fps,
        workers=pipeline.workers,
        max_retries=pipeline.max_sink_retries
    )

    print("Saving final snapshot...")
    renderer.save_frame(animation.final_frame(), str(pipeline.image_path))

    print("\nFiles created:")
    print(f"  1. Video: {output_path}")
    print(f"  2. Image: {pipeline.image_path}")
    return animation


def render_image(pipeline):
    """Render only the fully grown plant."""
    animation = build_animation(pipeline)
    renderer = PlantRenderer.for_archetype(pipeline.archetype, PlantRenderConfig.from_pipeline(pipeline))
    renderer.save_frame(animation.final_frame(), str(pipeline.image_path))
    print(f"Saved image to {pipeline.image_path}")
    return animation


def render_cache(pipeline, width: int = 480, height: int = 480, fps: int = 25):
    """Render every archetype with a fixed seed into the cache directory."""
    cache_dir = pipeline.cache_dir
    cache_dir.mkdir(parents=True, exist_ok=True)
    names = available_archetypes()

    print(f"Generating videos for {len(names)} archetypes")
    print(f"  Seed: {CACHE_SEED}")
    print(f"  Output: {cache_dir}\n")

    failed = []
    for name in names:
        print(f"Processing: {name}")
        entry = dataclasses.replace(
            pipeline, archetype=name, seed=CACHE_SEED,
            width=width, height=height, fps=fps, video_suffix='.webm'
        )
        renderer = PlantRenderer.for_archetype(name, PlantRenderConfig.from_pipeline(entry))
        output_path = str(cache_dir / f'{name}.webm')
        remove_if_exists(output_path)
        try:
            animation = build_animation(entry)
            renderer.render_animation(animation, output_path, fps=fps,
                                      workers=entry.workers, max_retries=entry.max_sink_retries)
        except (FrameSinkError, GeometryError, OSError) as e:
            print(f"  Error generating {name}: {e}")
            failed.append(name)

    export_archetype_index(names, str(pipeline.archetype_index_path))

    print(f"\nVideo cache complete! Output directory: {cache_dir}")
    if failed:
        print(f"  Failed: {', '.join(failed)}")
    return failed


def render_grid(pipeline):
    """Draw the isometric garden with the plants listed in the tree config."""
    placements = load_placements(pipeline.grid_config_path)
    print(f"Placing {len(placements)} plants from {pipeline.grid_config_path}")
    renderer = GridRenderer(GridConfig(resolution=pipeline.grid_resolution))
    return renderer.save(placements, str(pipeline.grid_image_path), str(pipeline.grid_positions_path))


def main():
    parser = argparse.ArgumentParser(description="Render plant growth animations.")
    parser.add_argument(
        '--mode',
        type=str,
        choices=['video', 'image', 'cache', 'grid'],
        default='video',
        help='Rendering mode: video, image, cache or grid (default: video)'
    )
    parser.add_argument('--config', type=str, default='config/pipeline.json',
                        help='Pipeline config file (default: config/pipeline.json)')
    parser.add_argument('--archetype', type=str, choices=available_archetypes(), default=None,
                        help='Plant archetype (default: from config)')
    parser.add_argument('--seed', type=str, default=None,
                        help='Seed string (default: from config, or random)')
    parser.add_argument('--tree-config', type=str, default=None,
                        help='Plant placements for grid mode (default: from config)')
    args = parser.parse_args()

    pipeline = load_config(args.config)
    if args.archetype:
        pipeline.archetype = args.archetype
    if args.seed:
        pipeline.seed = args.seed
    if args.tree_config:
        pipeline.grid_config_path = args.tree_config
    pipeline.create_output_dirs()
    profiler.enabled = pipeline.profile

    print(f"Rendering: {pipeline.archetype} (seed {pipeline.seed})")
    print(f"Output: {pipeline.render_output_dir}")
    print(f"Mode: {args.mode}")
    print()

    if args.mode == 'video':
        render_video(pipeline)
    elif args.mode == 'image':
        render_image(pipeline)
    elif args.mode == 'cache':
        render_cache(pipeline)
    elif args.mode == 'grid':
        render_grid(pipeline)

    if pipeline.profile:
        profiler.print_stats()


if __name__ == '__main__':
    main()
