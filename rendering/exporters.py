"""
Data exporters to convert generated structures into JSON and back.
Keeps the cached/debug representation decoupled from the generators.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from plants.branch import Branch, Entity
from plants.geometry import Color, Point


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    return {
        "center": [entity.center.x, entity.center.y],
        "radius": entity.radius,
        "base_color": entity.base_color.to_list(),
        "highlight_color": entity.highlight_color.to_list(),
        "kind": entity.kind,
        "dist_from_root": entity.dist_from_root,
    }


def entity_from_dict(data: Dict[str, Any]) -> Entity:
    return Entity(
        center=Point.from_tuple(data["center"]),
        radius=data["radius"],
        base_color=Color.from_list(data["base_color"]),
        highlight_color=Color.from_list(data["highlight_color"]),
        kind=data["kind"],
        dist_from_root=data["dist_from_root"],
    )


def structure_to_dict(branch: Branch) -> Dict[str, Any]:
    """
    Nested form of a branch and its subtree:
    {
        "start": [x, y], "end": [x, y], "control": [x, y],
        "stroke_width": float, "length": float, "dist_from_root": float,
        "entities": [...], "children": [...]
    }
    """
    return {
        "start": [branch.start.x, branch.start.y],
        "end": [branch.end.x, branch.end.y],
        "control": [branch.control.x, branch.control.y],
        "stroke_width": branch.stroke_width,
        "length": branch.length,
        "dist_from_root": branch.dist_from_root,
        "entities": [entity_to_dict(e) for e in branch.entities],
        "children": [structure_to_dict(child) for child in branch.children],
    }


def structure_from_dict(data: Dict[str, Any]) -> Branch:
    return Branch(
        start=Point.from_tuple(data["start"]),
        end=Point.from_tuple(data["end"]),
        control=Point.from_tuple(data["control"]),
        stroke_width=data["stroke_width"],
        length=data["length"],
        dist_from_root=data["dist_from_root"],
        children=tuple(structure_from_dict(child) for child in data["children"]),
        entities=tuple(entity_from_dict(e) for e in data["entities"]),
    )


def export_structure(tree: Branch, output_path: str, seed: Optional[str] = None,
                     archetype: Optional[str] = None) -> Dict[str, Any]:
    """Write the structure, with the seed and archetype that produced it, as JSON."""
    data = {
        "archetype": archetype,
        "seed": seed,
        "num_branches": tree.count_branches(),
        "num_entities": sum(1 for _ in tree.all_entities()),
        "tree": structure_to_dict(tree),
    }

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)

    return data


def load_structure_data(path: str) -> Dict[str, Any]:
    if not Path(path).exists():
        raise FileNotFoundError(
            f"Structure data not found at {path}. Run grow.py first to generate it."
        )
    with open(path, 'r') as f:
        return json.load(f)


def load_structure(path: str) -> Branch:
    return structure_from_dict(load_structure_data(path)["tree"])


def export_archetype_index(names: Iterable[str], output_path: str) -> Dict[str, Any]:
    """Write the list of available plant archetypes."""
    data = {"plants": list(names)}
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)
    print(f"Exported archetype index with {len(data['plants'])} plants to {output_path}")
    return data
