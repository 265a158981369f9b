from __future__ import annotations

"""
Unit tests for the Site Renderer.

Verifies:
1. Pages without local table of contents, breadcrumb or navigation.
2. The global sidebar.
3. The templated entry page and hosting marker.
"""

import json
import re
from pathlib import Path
from typing import Callable

from treedocs.core.analysis.tree_builder import build_tree, materialize_output_tree
from treedocs.core.rendering.site import build_sidebar, render_shell, render_site, shell_settings
from treedocs.domain.config import BuildConfig
from treedocs.infra.fs import make_directory


def _build(cfg: BuildConfig):
    make_directory(cfg.dist_folder)
    tree = build_tree(cfg.root_folder, cfg)
    materialize_output_tree(tree, cfg)
    return tree


def test_site_outputs(tmp_path: Path, make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_website=True)
    written = render_site(_build(cfg), cfg)

    docs = tmp_path / "docs"
    assert written == [
        str(docs / "HOME.md"),
        str(docs / "child" / "HOME.md"),
        str(docs / "child" / "grand" / "HOME.md"),
        str(docs / "index.html"),
        str(docs / ".nojekyll"),
        str(docs / "_sidebar.md"),
    ]
    assert (docs / ".nojekyll").read_text(encoding="utf-8") == ""


def test_site_pages_have_no_local_navigation(tmp_path: Path, make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_website=True, include_navigation=True)
    render_site(_build(cfg), cfg)

    docs = tmp_path / "docs"
    assert (docs / "HOME.md").read_text(encoding="utf-8") == "# Overview\n\nHello"
    child_page = (docs / "child" / "HOME.md").read_text(encoding="utf-8")
    assert "`/child`" not in child_page
    assert "(up)" not in child_page
    assert child_page.endswith("World")


def test_site_links_remote_diagrams_when_requested(tmp_path: Path, make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_website=True, include_link_to_diagram=True)
    render_site(_build(cfg), cfg)

    page = (tmp_path / "docs" / "child" / "HOME.md").read_text(encoding="utf-8")
    assert "[Go to flow diagram](https://www.plantuml.com/plantuml/svg/0/" in page


def test_site_embeds_local_images(tmp_path: Path, make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(generate_website=True, include_link_to_diagram=True, generate_local_images=True)
    render_site(_build(cfg), cfg)

    page = (tmp_path / "docs" / "child" / "HOME.md").read_text(encoding="utf-8")
    assert "![diagram](flow.svg)" in page


def test_sidebar_lists_every_node(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg()
    sidebar = build_sidebar(build_tree(cfg.root_folder, cfg), cfg)

    assert sidebar == (
        "* [Overview](HOME)\n"
        "  * [child](child/HOME)\n"
        "    * [grand](child/grand/HOME)\n"
    )


def test_shell_settings(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(project_name="Demo", repo_url="https://example.com/repo")
    settings = shell_settings(cfg)

    assert settings["name"] == "Demo"
    assert settings["repo"] == "https://example.com/repo"
    assert settings["loadSidebar"] is True
    assert settings["homepage"] == "HOME.md"


def test_shell_page_carries_settings(make_cfg: Callable[..., BuildConfig]) -> None:
    cfg = make_cfg(project_name="Demo <Docs>", web_theme="//cdn.example/theme.css")
    html = render_shell(cfg)

    assert "<title>Demo &lt;Docs&gt;</title>" in html
    assert 'href="//cdn.example/theme.css"' in html

    match = re.search(r"window\.\$docsify = (.*);", html)
    assert match
    settings = json.loads(match.group(1))
    assert settings["name"] == "Demo <Docs>"
    assert settings["loadSidebar"] is True
