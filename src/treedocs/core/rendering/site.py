from __future__ import annotations

"""
Site Renderer.

Projects the tree into a docsify site: one page per folder without local
navigation, a single global sidebar, the templated entry page, and the marker
file that disables static-hosting post-processing.
"""

import logging
import os
import posixpath
from typing import Any, Callable, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from treedocs.core.analysis.naming import encode_uri_path, output_file
from treedocs.core.rendering.assembly import PageVariant, outline, render_page
from treedocs.core.rendering.diagrams import LinkStyle, MarkupPolicy
from treedocs.core.services.worker_pool import WorkerPool
from treedocs.domain.config import BuildConfig
from treedocs.domain.constants import (
    HOSTING_MARKER_FILE,
    PLANTUML_SKIN,
    SITE_ENTRY_FILE,
    SITE_SIDEBAR_FILE,
)
from treedocs.domain.pipeline_models import CounterCallback
from treedocs.domain.tree_models import FolderNode, FolderTree
from treedocs.infra.fs import RESOURCES_DIR, write_text

logger = logging.getLogger(__name__)

SHELL_TEMPLATE = "docsify.html.j2"


def site_page_variant(cfg: BuildConfig) -> PageVariant:
    return PageVariant(
        link_style=LinkStyle.FOLDER_LOCAL,
        markup_policy=MarkupPolicy.LINK_IF_REMOTE,
        page_file_name=f"{cfg.web_file_name}.md",
    )

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_site(
        tree: FolderTree,
        cfg: BuildConfig,
        pool: Optional[WorkerPool] = None,
        on_progress: Optional[CounterCallback] = None,
) -> List[str]:
    """
    Write the site pages, sidebar, entry page and hosting marker.

    Args:
        tree: Pre-ordered folder tree.
        cfg: Build settings.
        pool: Worker pool for the page writes.
        on_progress: Called with (completed, total) per written file.

    Returns:
        List[str]: Written paths: node pages in tree order, then the entry
                   page, the hosting marker and the sidebar.
    """
    pool = pool or WorkerPool(cfg.max_workers)
    variant = site_page_variant(cfg)
    logger.info("Generating docsify site")

    tasks: List[Callable[[], str]] = [_page_task(node, tree, cfg, variant) for node in tree]

    shell = render_shell(cfg)
    sidebar = build_sidebar(tree, cfg)
    dist = cfg.dist_folder
    tasks.append(lambda: write_text(os.path.join(dist, SITE_ENTRY_FILE), shell))
    tasks.append(lambda: write_text(os.path.join(dist, HOSTING_MARKER_FILE), ""))
    tasks.append(lambda: write_text(os.path.join(dist, SITE_SIDEBAR_FILE), sidebar))

    return pool.run(tasks, on_progress)


def build_sidebar(tree: FolderTree, cfg: BuildConfig) -> str:
    """Global outline linking every node's site page (extension omitted)."""
    def label(node: FolderNode) -> str:
        link = encode_uri_path(posixpath.join(*node.rel_parts, cfg.web_file_name), sep="/")
        return f"[{node.name}]({link})"

    return outline(tree, label)


def shell_settings(cfg: BuildConfig) -> Dict[str, Any]:
    return {
        "name": cfg.project_name,
        "repo": cfg.repo_url,
        "loadSidebar": True,
        "auto2top": True,
        "homepage": f"{cfg.web_file_name}.md",
        "plantuml": {"skin": PLANTUML_SKIN},
    }


def render_shell(cfg: BuildConfig) -> str:
    """Render the site entry page from the bundled template."""
    env = Environment(
        loader=FileSystemLoader(RESOURCES_DIR),
        autoescape=select_autoescape(enabled_extensions=("html", "j2")),
    )
    template = env.get_template(SHELL_TEMPLATE)
    return template.render(
        name=cfg.project_name,
        stylesheet=cfg.web_theme,
        settings=shell_settings(cfg),
    )

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _page_task(
        node: FolderNode,
        tree: FolderTree,
        cfg: BuildConfig,
        variant: PageVariant,
) -> Callable[[], str]:
    content = render_page(node, tree, cfg, variant)
    target = output_file(node, cfg, variant.page_file_name)
    return lambda: write_text(target, content)
