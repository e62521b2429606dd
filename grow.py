"""
Plant Structure Script

Generates the full branching structure of a plant from a seed and saves it
for inspection and caching.

Configuration is loaded from config/pipeline.json; --archetype and --seed override it.
All output paths are derived from the archetype and seed.

Outputs:
- Structure data (.json)
- Preview of the full structure (.png)
- Growth statistics (.png)
- Metadata (.json)
"""

import argparse
import json

from config import load_config
from plants import (
    compute_bounds,
    compute_fit,
    compute_max_distance,
    get_archetype,
    available_archetypes,
    plot_growth_statistics,
    visualize_structure,
)
from plants.profiling import profiler
from rendering.exporters import export_structure


def main():
    parser = argparse.ArgumentParser(description="Generate a plant structure from a seed.")
    parser.add_argument('--config', type=str, default='config/pipeline.json',
                        help='Pipeline config file (default: config/pipeline.json)')
    parser.add_argument('--archetype', type=str, choices=available_archetypes(), default=None,
                        help='Plant archetype (default: from config)')
    parser.add_argument('--seed', type=str, default=None,
                        help='Seed string (default: from config, or random)')
    args = parser.parse_args()

    pipeline = load_config(args.config)
    if args.archetype:
        pipeline.archetype = args.archetype
    if args.seed:
        pipeline.seed = args.seed
    pipeline.create_output_dirs()
    profiler.enabled = pipeline.profile

    policy = get_archetype(pipeline.archetype)

    print(f"Growing {policy.name} from seed {pipeline.seed}")
    print(f"  Initial length: {policy.initial_length}")
    print(f"  Depth: {policy.depth}")
    print()

    tree = policy.generate(pipeline.seed)
    bounds = compute_bounds(tree)
    transform = compute_fit(bounds, (pipeline.width, pipeline.height), pipeline.padding)
    max_distance = compute_max_distance(tree)

    data = export_structure(tree, str(pipeline.structure_path),
                            seed=pipeline.seed, archetype=policy.name)
    print(f"Generated {data['num_branches']} branches and {data['num_entities']} entities")
    print(f"Exported structure to: {pipeline.structure_path}")

    visualize_structure(tree, save_path=str(pipeline.preview_path))
    plot_growth_statistics(tree, save_path=str(pipeline.stats_path))

    metadata = {
        'archetype': policy.name,
        'seed': pipeline.seed,
        'num_branches': data['num_branches'],
        'num_entities': data['num_entities'],
        'bounds': [bounds.min_x, bounds.max_x, bounds.min_y, bounds.max_y],
        'scale': transform.scale,
        'offset': [transform.offset_x, transform.offset_y],
        'max_distance': max_distance,
        'growth_budget': max_distance + policy.growth_margin,
        'structure_path': str(pipeline.structure_path),
    }
    with open(pipeline.metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)
    print(f"Saved metadata to {pipeline.metadata_path}")

    if pipeline.profile:
        profiler.print_stats()

    print("\nStructure complete!")
    print(f"  Preview: {pipeline.preview_path}")
    print(f"  Metadata: {pipeline.metadata_path}")
    print(f"\nTo render it, run:")
    print(f"  python render.py --archetype {policy.name} --seed {pipeline.seed}")


if __name__ == '__main__':
    main()
