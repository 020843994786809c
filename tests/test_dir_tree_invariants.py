"""Invariant checks for decoded DIR trees.

These tests validate tree-shape guarantees independently from the rendering
snapshots.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from wspan_dir.message import (
    encode_array_section,
    encode_message,
    encode_section,
    parse_dir_message,
)
from wspan_dir.tree import DIRTree

ROOT = Path(__file__).resolve().parents[1]


def _deep_message(levels: int) -> str:
    section = encode_section("V", "leaf")
    for level in range(levels):
        section = encode_array_section(f"L{level}", [section, encode_section("W", str(level))])
    return encode_message("DEEP", [section])


TEST_MESSAGES = [
    # Single value section.
    "$23PNR15A1212",
    # Array followed by a value.
    "$03PNR220*12N19B12xyC11zA1212",
    # Long type codes, terminator padding.
    encode_message("REC", [encode_section("ABC", "hello"), ">", encode_section("Z", "")]),
    # Repeated type codes under one array.
    encode_message(
        "PNR",
        [encode_array_section("P", [encode_section("NM", n) for n in ("A/B", "C/D", "E/F")])],
    ),
    # Nested arrays.
    _deep_message(4),
    # Empty array and an array of terminators only.
    encode_message("PNR", [encode_array_section("N", []), encode_section("A", "12")]),
    encode_message("PNR", [encode_array_section("N", [">", "0"])]),
    # Snapshot fixture input.
    json.loads(
        (ROOT / "tests" / "fixtures" / "dir" / "pnr_snapshot_v1.json").read_text(encoding="utf-8"),
    )["input_text"],
]


def _assert_tree_invariants(tree: DIRTree) -> None:
    nodes = list(tree.walk())
    ids = [node.id for node in nodes]

    # 1) Exactly one root and it is the node we started from.
    roots = [node for node in nodes if node.is_root()]
    assert roots == [tree]
    assert tree.depth == 0

    # 2) Ids are unique.
    assert len(ids) == len(set(ids)), f"duplicate ids: {ids}"

    for node in nodes:
        # 3) Depth and parent reciprocity.
        if node is not tree:
            parent = node.parent
            assert parent is not None
            assert node.depth == parent.depth + 1
            assert any(child is node for child in parent.children)
            assert node.path == f"{parent.path}.{node.name}"

        # 4) Never both a value and children. A None value marks a branch,
        #    which is childless only when it came from an empty array.
        if node is not tree:
            assert not (node.value is not None and node.children), (
                f"{node.id} must not have both a value and children"
            )
            assert node.is_leaf == (node.value is not None)


@pytest.mark.parametrize("text", TEST_MESSAGES)
def test_dir_tree_invariants_hold(text: str) -> None:
    tree = parse_dir_message(text)
    assert tree.children, "Expected at least one section in the sample"
    _assert_tree_invariants(tree)


def test_walk_visits_every_node_exactly_once() -> None:
    tree = parse_dir_message(_deep_message(6))
    count = 0

    def visit(node: DIRTree) -> None:
        nonlocal count
        count += 1

    tree.traverse_down(visit)
    assert count == len({node.id for node in tree.walk()})
    # root + 6 arrays + 6 W leaves + the innermost V leaf
    assert count == 1 + 6 + 6 + 1


def test_deep_nesting_does_not_recurse() -> None:
    tree = parse_dir_message(_deep_message(60))
    leaf = tree.find("V")[0]
    assert leaf.depth == 61
    assert leaf.root() is tree
