from __future__ import annotations

"""
Unit tests for the Per-Folder Page Renderer.

Verifies:
1. One page per node, written in the mirrored output folder.
2. Whole-tree table of contents on every page.
3. Breadcrumb, diagram markup and progress reporting.
"""

import os
from pathlib import Path
from typing import Callable, List, Tuple

from treedocs.core.analysis.tree_builder import build_tree, materialize_output_tree
from treedocs.core.rendering.folder_pages import folder_page_variant, render_folder_pages
from treedocs.core.rendering.diagrams import LinkStyle, MarkupPolicy
from treedocs.domain.config import BuildConfig
from treedocs.infra.fs import make_directory


def _prepare(cfg: BuildConfig):
    make_directory(cfg.dist_folder)
    tree = build_tree(cfg.root_folder, cfg)
    materialize_output_tree(tree, cfg)
    return tree


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def test_variant_follows_config(make_cfg: Callable[..., BuildConfig]) -> None:
    variant = folder_page_variant(make_cfg(include_navigation=True, include_breadcrumbs=False))

    assert variant.link_style is LinkStyle.FOLDER_LOCAL
    assert variant.markup_policy is MarkupPolicy.LINK_IF_REQUESTED
    assert variant.include_nav is True
    assert variant.include_breadcrumb is False
    assert variant.page_file_name == "README.md"


def test_one_page_per_node(tmp_path: Path, make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_md=True)
    tree = _prepare(cfg)

    written = render_folder_pages(tree, cfg)

    docs = tmp_path / "docs"
    assert written == [
        str(docs / "README.md"),
        str(docs / "child" / "README.md"),
        str(docs / "child" / "grand" / "README.md"),
    ]
    assert all(os.path.isfile(p) for p in written)


def test_every_page_lists_whole_tree(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_md=True)
    tree = _prepare(cfg)

    for path in render_folder_pages(tree, cfg):
        toc_lines = [line for line in _read(path).splitlines() if line.lstrip().startswith("* [")]
        assert len(toc_lines) == len(tree)


def test_toc_can_be_disabled(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_md=True, include_table_of_contents=False)
    tree = _prepare(cfg)

    root_page = _read(render_folder_pages(tree, cfg)[0])
    assert root_page == "# Overview\n\nHello"


def test_child_page_content(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_md=True)
    tree = _prepare(cfg)

    page = _read(render_folder_pages(tree, cfg)[1])

    assert page.startswith("# child\n\n`/child`\n\n")
    assert page.index("![diagram](https://www.plantuml.com/plantuml/svg/0/") < page.index("World")


def test_diagram_links_when_requested(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_md=True, include_link_to_diagram=True, generate_local_images=True)
    tree = _prepare(cfg)

    page = _read(render_folder_pages(tree, cfg)[1])
    assert "[Go to flow diagram](flow.svg)" in page
    assert "![diagram]" not in page


def test_progress_reports_every_page(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_md=True)
    tree = _prepare(cfg)
    events: List[Tuple[int, int]] = []

    render_folder_pages(tree, cfg, on_progress=lambda done, total: events.append((done, total)))

    assert sorted(events) == [(1, 3), (2, 3), (3, 3)]
