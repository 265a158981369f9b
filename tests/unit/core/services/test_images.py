from __future__ import annotations

"""
Unit tests for the Local Image Pre-Rendering stage.
"""

import os
from pathlib import Path
from typing import Callable

from treedocs.core.analysis.tree_builder import build_tree, materialize_output_tree
from treedocs.core.services.images import render_images
from treedocs.domain.config import BuildConfig
from treedocs.infra.fs import make_directory


def test_images_are_written_beside_pages(
        tmp_path: Path, sample_source: Path, make_cfg: Callable[..., BuildConfig], fake_rasterizer
) -> None:
    cfg = make_cfg(generate_local_images=True, diagram_format="png")
    make_directory(cfg.dist_folder)
    tree = build_tree(cfg.root_folder, cfg)
    materialize_output_tree(tree, cfg)

    written = render_images(tree, cfg, fake_rasterizer)

    target = tmp_path / "docs" / "child" / "flow.png"
    assert written == [str(target)]
    assert target.read_bytes() == b"<png:flow.puml>"
    assert fake_rasterizer.calls == [(os.path.join(str(sample_source), "child", "flow.puml"), "png")]


def test_no_diagrams_no_calls(tmp_path: Path, fake_rasterizer) -> None:
    root = tmp_path / "plain"
    root.mkdir()
    (root / "README.md").write_text("Only text", encoding="utf-8")
    cfg = BuildConfig(root_folder=str(root), dist_folder=str(tmp_path / "out"))

    assert render_images(build_tree(str(root), cfg), cfg, fake_rasterizer) == []
    assert fake_rasterizer.calls == []
