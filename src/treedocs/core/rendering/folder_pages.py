from __future__ import annotations

"""
Per-Folder Page Renderer.

Writes one markdown page into every mirrored output folder, with optional
breadcrumb, whole-tree table of contents and parent/child navigation.
"""

import logging
from typing import Callable, List, Optional

from treedocs.core.analysis.naming import output_file
from treedocs.core.rendering.assembly import PageVariant, render_page
from treedocs.core.rendering.diagrams import LinkStyle, MarkupPolicy
from treedocs.core.services.worker_pool import WorkerPool
from treedocs.domain.config import BuildConfig
from treedocs.domain.pipeline_models import CounterCallback
from treedocs.domain.tree_models import FolderNode, FolderTree
from treedocs.infra.fs import write_text

logger = logging.getLogger(__name__)


def folder_page_variant(cfg: BuildConfig) -> PageVariant:
    return PageVariant(
        link_style=LinkStyle.FOLDER_LOCAL,
        markup_policy=MarkupPolicy.LINK_IF_REQUESTED,
        include_breadcrumb=cfg.include_breadcrumbs,
        include_toc=cfg.include_table_of_contents,
        include_nav=cfg.include_navigation,
        page_file_name=f"{cfg.md_file_name}.md",
    )


def render_folder_pages(
        tree: FolderTree,
        cfg: BuildConfig,
        pool: Optional[WorkerPool] = None,
        on_progress: Optional[CounterCallback] = None,
) -> List[str]:
    """
    Write the markdown page of every folder.

    Page contents are assembled up front; only the writes run on the pool,
    so progress fires once per written page.

    Args:
        tree: Pre-ordered folder tree.
        cfg: Build settings.
        pool: Worker pool for the writes.
        on_progress: Called with (completed, total) per page.

    Returns:
        List[str]: Written page paths, in tree order.
    """
    pool = pool or WorkerPool(cfg.max_workers)
    variant = folder_page_variant(cfg)
    logger.info(f"Generating {len(tree)} markdown pages")

    tasks = [_write_task(node, tree, cfg, variant) for node in tree]
    return pool.run(tasks, on_progress)


def _write_task(
        node: FolderNode,
        tree: FolderTree,
        cfg: BuildConfig,
        variant: PageVariant,
) -> Callable[[], str]:
    content = render_page(node, tree, cfg, variant)
    target = output_file(node, cfg, variant.page_file_name)
    return lambda: write_text(target, content)
