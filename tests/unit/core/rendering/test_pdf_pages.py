from __future__ import annotations

"""
Unit tests for the Per-Folder PDF Renderer.
"""

from pathlib import Path
from typing import Callable

from treedocs.core.analysis.tree_builder import build_tree, materialize_output_tree
from treedocs.core.rendering.pdf_pages import render_pdf_pages
from treedocs.domain.config import BuildConfig
from treedocs.infra.fs import make_directory


def _build(cfg: BuildConfig):
    make_directory(cfg.dist_folder)
    tree = build_tree(cfg.root_folder, cfg)
    materialize_output_tree(tree, cfg)
    return tree


def test_one_pdf_per_node_and_no_temp_files(
        tmp_path: Path, make_cfg: Callable[..., BuildConfig], fake_converter
) -> None:
    cfg = make_cfg(generate_pdf=True)
    written = render_pdf_pages(_build(cfg), cfg, fake_converter)

    docs = tmp_path / "docs"
    assert written == [
        str(docs / "README.pdf"),
        str(docs / "child" / "README.pdf"),
        str(docs / "child" / "grand" / "README.pdf"),
    ]
    assert not list(docs.rglob("*_TEMP.md"))
    assert len(fake_converter.calls) == 3


def test_pdf_pages_use_raster_endpoint(make_cfg: Callable[..., BuildConfig], fake_converter) -> None:
    cfg = make_cfg(generate_pdf=True, diagram_format="svg", pdf_diagram_format="png")
    written = render_pdf_pages(_build(cfg), cfg, fake_converter)

    child_source = fake_converter.sources[written[1]]
    assert "![diagram](https://www.plantuml.com/plantuml/png/0/" in child_source
    assert child_source.startswith("# child\n\n`/child`")


def test_pdf_pages_address_images_from_output_root(make_cfg: Callable[..., BuildConfig], fake_converter) -> None:
    cfg = make_cfg(generate_pdf=True, generate_local_images=True, include_link_to_diagram=True)
    written = render_pdf_pages(_build(cfg), cfg, fake_converter)

    child_source = fake_converter.sources[written[1]]
    assert "child/flow.svg)" in child_source
    assert "![diagram](" in child_source
