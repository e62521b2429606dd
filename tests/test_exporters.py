"""
Tests for JSON export of generated structures.
"""

import json

import pytest

from plants.pine import PinePolicy
from plants.sunflower import SunflowerPolicy
from rendering.exporters import (
    export_archetype_index,
    export_structure,
    load_structure,
    load_structure_data,
    structure_to_dict,
)


class TestStructureExport:
    """Structures written as JSON and read back."""

    def test_reload_gives_same_tree(self, tmp_path) -> None:
        tree = SunflowerPolicy().generate("export")
        path = tmp_path / "tree.json"
        export_structure(tree, str(path), seed="export", archetype="sunflower")
        assert load_structure(str(path)) == tree

    def test_header(self, tmp_path) -> None:
        tree = PinePolicy(depth=3).generate("export")
        path = tmp_path / "nested" / "tree.json"
        export_structure(tree, str(path), seed="export", archetype="pine")
        data = load_structure_data(str(path))
        assert data["archetype"] == "pine"
        assert data["seed"] == "export"
        assert data["num_branches"] == tree.count_branches()
        assert data["num_entities"] == sum(1 for _ in tree.all_entities())

    def test_nested_form(self) -> None:
        tree = PinePolicy(depth=1).generate("export")
        data = structure_to_dict(tree)
        assert data["dist_from_root"] == 0
        assert len(data["children"]) == len(tree.children)
        assert data["children"][0]["start"] == [tree.end.x, tree.end.y]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_structure_data(str(tmp_path / "nope.json"))


class TestArchetypeIndex:
    def test_index_file(self, tmp_path) -> None:
        path = tmp_path / "cache" / "entity_data.json"
        export_archetype_index(["pine", "sunflower"], str(path))
        assert json.loads(path.read_text()) == {"plants": ["pine", "sunflower"]}
