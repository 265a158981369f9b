from __future__ import annotations

"""
Unit tests for the Folder Tree Builder.

Verifies:
1. Pre-order node sequence with correct depths.
2. Exclusion of prefixed files and whole prefixed subtrees.
3. Separation of fragments and diagram sources.
4. Idempotence and the output-directory materialization pass.
"""

import os
from pathlib import Path

import pytest

from treedocs.core.analysis.tree_builder import build_tree, materialize_output_tree
from treedocs.domain.config import BuildConfig


def test_tree_is_pre_ordered_with_depths(sample_source: Path) -> None:
    tree = build_tree(str(sample_source))

    assert [n.rel_path for n in tree] == ["", "child", os.path.join("child", "grand")]
    assert [n.depth for n in tree] == [1, 2, 3]
    assert [n.name for n in tree] == ["Overview", "child", "grand"]


def test_depth_matches_separator_count(sample_source: Path) -> None:
    for node in build_tree(str(sample_source)):
        expected = 1 if not node.rel_path else node.rel_path.count(os.sep) + 2
        assert node.depth == expected


def test_parent_links_and_child_names(sample_source: Path) -> None:
    root, child, grand = build_tree(str(sample_source))

    assert root.is_root
    assert child.parent_path == root.path
    assert grand.parent_path == child.path
    assert root.child_names == ("child",)
    assert child.child_names == ("grand",)
    assert grand.child_names == ()


def test_excluded_entries_never_appear(sample_source: Path) -> None:
    tree = build_tree(str(sample_source))

    assert all("_hidden" not in n.path for n in tree)
    assert all("_hidden" not in n.child_names for n in tree)
    for node in tree:
        assert "Skip" not in node.fragments
        assert "Draft" not in node.fragments


def test_fragments_and_diagrams_are_separated(sample_source: Path) -> None:
    root, child, grand = build_tree(str(sample_source))

    assert root.fragments == ("Hello",)
    assert child.fragments == ("World",)
    assert [d.name for d in child.diagrams] == ["flow.puml"]
    assert child.diagrams[0].content.startswith("@startuml")
    assert grand.fragments == ("Deep",)
    assert root.diagrams == ()


def test_other_files_are_ignored(sample_source: Path) -> None:
    (sample_source / "image.png").write_bytes(b"\x89PNG")
    (sample_source / "notes.txt").write_text("ignored", encoding="utf-8")

    root = build_tree(str(sample_source))[0]
    assert root.fragments == ("Hello",)
    assert root.diagrams == ()


def test_extension_match_is_case_insensitive(sample_source: Path) -> None:
    (sample_source / "EXTRA.MD").write_text("Upper", encoding="utf-8")

    root = build_tree(str(sample_source))[0]
    assert "Upper" in root.fragments


def test_empty_prefix_disables_exclusion(sample_source: Path) -> None:
    cfg = BuildConfig(root_folder=str(sample_source), exclude_prefix="")
    tree = build_tree(str(sample_source), cfg)

    assert len(tree) == 4
    assert "Skip" in [f for n in tree for f in n.fragments]


def test_parent_precedes_children_in_deep_trees(tmp_path: Path) -> None:
    root = tmp_path / "deep"
    (root / "a" / "b" / "c").mkdir(parents=True)
    (root / "z").mkdir()

    tree = build_tree(str(root))
    positions = {n.path: i for i, n in enumerate(tree)}

    for node in tree:
        if node.parent_path is not None:
            assert positions[node.parent_path] < positions[node.path]
    assert [n.depth for n in tree] == [1, 2, 3, 4, 2]


def test_build_is_idempotent(sample_source: Path) -> None:
    assert build_tree(str(sample_source)) == build_tree(str(sample_source))


def test_unreadable_root_fails_loudly(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        build_tree(str(tmp_path / "missing"))


def test_materialize_creates_mirrored_directories(tmp_path: Path, sample_source: Path) -> None:
    dist = tmp_path / "docs"
    dist.mkdir()
    cfg = BuildConfig(root_folder=str(sample_source), dist_folder=str(dist))
    tree = build_tree(str(sample_source), cfg)

    created = materialize_output_tree(tree, cfg)

    assert len(created) == 2
    assert (dist / "child" / "grand").is_dir()
    assert not (dist / "_hidden").exists()


def test_build_does_not_touch_output(tmp_path: Path, sample_source: Path) -> None:
    cfg = BuildConfig(root_folder=str(sample_source), dist_folder=str(tmp_path / "docs"))
    build_tree(str(sample_source), cfg)
    assert not (tmp_path / "docs").exists()
