"""Tests de la reconciliación del árbol de categorías."""

from core.domain.models import CategoryNode
from core.services.category_tree import (
    build_tree_from_flat,
    count_nodes,
    flatten_tree,
    label_paths,
    split_path,
)


def _node(code: str, name: str | None = None, parent: str | None = None) -> CategoryNode:
    return CategoryNode(code=code, name=name, parent_code=parent)


class TestBuildTreeFromFlat:
    def test_preserves_node_count(self) -> None:
        flat = [
            _node("T1", "Electronics"),
            _node("T2", "Phones", "T1"),
            _node("T3", "Laptops", "T1"),
            _node("T4", "Samsung", "T2"),
            _node("T5", "Garden", ""),
        ]

        forest = build_tree_from_flat(flat)

        assert count_nodes(forest) == len(flat)
        assert [r.code for r in forest] == ["T1", "T5"]
        assert [c.code for c in forest[0].children] == ["T2", "T3"]

    def test_children_listed_before_parent_are_still_attached(self) -> None:
        forest = build_tree_from_flat([_node("C", parent="B"), _node("B", parent="A"), _node("A")])

        assert [r.code for r in forest] == ["A"]
        assert forest[0].children[0].children[0].code == "C"

    def test_unresolved_parent_becomes_root(self) -> None:
        forest = build_tree_from_flat([_node("T1", "Root"), _node("T9", "Orphan", "MISSING")])

        assert {r.code for r in forest} == {"T1", "T9"}

    def test_self_parent_becomes_root(self) -> None:
        forest = build_tree_from_flat([_node("T1", "Loop", "T1")])

        assert [r.code for r in forest] == ["T1"]
        assert forest[0].children == []

    def test_stale_children_are_reset(self) -> None:
        parent = _node("A")
        parent.children = [_node("stale")]

        forest = build_tree_from_flat([parent])

        assert forest[0].children == []

    def test_cycle_nodes_are_unreachable(self) -> None:
        forest = build_tree_from_flat([_node("R"), _node("X", parent="Y"), _node("Y", parent="X")])

        assert [r.code for r in forest] == ["R"]
        assert count_nodes(forest) == 1


class TestLabelPaths:
    def test_three_level_chain(self) -> None:
        forest = build_tree_from_flat([_node("a", "A"), _node("b", "B", "a"), _node("c", "C", "b")])

        label_paths(forest)

        index = flatten_tree(forest)
        assert index["a"].path == "A"
        assert index["b"].path == "A > B"
        assert index["c"].path == "A > B > C"

    def test_missing_name_uses_code(self) -> None:
        forest = build_tree_from_flat([_node("T1", "Root"), _node("T2", None, "T1")])

        label_paths(forest)

        assert forest[0].children[0].path == "Root > T2"

    def test_nested_forest_from_tree_endpoint(self) -> None:
        forest = [
            CategoryNode.model_validate(
                {
                    "CategoryCode": "T1",
                    "CategoryName": "Home",
                    "Children": [{"CategoryCode": "T2", "CategoryName": "Kitchen"}],
                }
            )
        ]

        label_paths(forest)

        assert forest[0].children[0].path == "Home > Kitchen"
        assert split_path(forest[0].children[0].path) == ["Home", "Kitchen"]


def test_split_path_empty() -> None:
    assert split_path(None) == []
    assert split_path("") == []
