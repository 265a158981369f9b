from __future__ import annotations

"""
Per-Folder PDF Renderer.

Produces one PDF per folder. Each page is written to a temporary markdown
file next to its target, converted, and the temporary file is removed once
the conversion has completed.
"""

import logging
from typing import Callable, List, Optional

from treedocs.core.analysis.naming import output_file
from treedocs.core.rendering.assembly import PageVariant, render_page
from treedocs.core.rendering.diagrams import LinkStyle, MarkupPolicy
from treedocs.core.services.worker_pool import WorkerPool
from treedocs.domain.config import BuildConfig
from treedocs.domain.constants import TEMP_SUFFIX
from treedocs.domain.pipeline_models import CounterCallback
from treedocs.domain.tree_models import FolderNode, FolderTree
from treedocs.infra.fs import remove_file, write_text
from treedocs.infra.pdf import PdfConverter, resolve_pdf_css

logger = logging.getLogger(__name__)


def pdf_page_variant(cfg: BuildConfig) -> PageVariant:
    return PageVariant(
        link_style=LinkStyle.OUTPUT_ROOT,
        markup_policy=MarkupPolicy.EMBED,
        include_breadcrumb=cfg.include_breadcrumbs,
        remote_format=cfg.pdf_diagram_format,
    )


def render_pdf_pages(
        tree: FolderTree,
        cfg: BuildConfig,
        converter: PdfConverter,
        pool: Optional[WorkerPool] = None,
        on_progress: Optional[CounterCallback] = None,
) -> List[str]:
    """
    Convert the page of every folder into a PDF.

    Args:
        tree: Pre-ordered folder tree.
        cfg: Build settings.
        converter: External markdown-to-PDF converter.
        pool: Worker pool bounding concurrent conversions.
        on_progress: Called with (completed, total) per PDF.

    Returns:
        List[str]: Written PDF paths, in tree order.
    """
    pool = pool or WorkerPool(cfg.max_workers)
    variant = pdf_page_variant(cfg)
    css_path = resolve_pdf_css(cfg)
    logger.info(f"Generating {len(tree)} pdf files")

    tasks = [_convert_task(node, tree, cfg, variant, converter, css_path) for node in tree]
    return pool.run(tasks, on_progress)


def _convert_task(
        node: FolderNode,
        tree: FolderTree,
        cfg: BuildConfig,
        variant: PageVariant,
        converter: PdfConverter,
        css_path: str,
) -> Callable[[], str]:
    content = render_page(node, tree, cfg, variant)
    temp_path = output_file(node, cfg, f"{cfg.md_file_name}{TEMP_SUFFIX}.md")
    pdf_path = output_file(node, cfg, f"{cfg.md_file_name}.pdf")

    def task() -> str:
        write_text(temp_path, content)
        converter.convert(temp_path, pdf_path, cfg.pdf_paper_format, css_path)
        remove_file(temp_path)
        return pdf_path

    return task
