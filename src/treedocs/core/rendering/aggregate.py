from __future__ import annotations

"""
Aggregated Document Renderer.

Concatenates the whole tree into a single document: a project heading, an
outline of every folder, then one second-level section per folder. The
markdown variant is written as-is; the PDF variant goes through a temporary
markdown file and the external converter.
"""

import logging
import os
from typing import List

from treedocs.core.analysis.naming import breadcrumb, heading_anchor
from treedocs.core.rendering.assembly import (
    BLOCK_SEPARATOR,
    RULE,
    PageVariant,
    node_blocks,
    outline,
)
from treedocs.core.rendering.diagrams import LinkStyle, MarkupPolicy
from treedocs.domain.config import BuildConfig
from treedocs.domain.constants import TEMP_SUFFIX
from treedocs.domain.tree_models import FolderNode, FolderTree
from treedocs.infra.fs import remove_file, write_text
from treedocs.infra.pdf import PdfConverter, resolve_pdf_css

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# VARIANTS
# -----------------------------------------------------------------------------

def markdown_document_variant(cfg: BuildConfig) -> PageVariant:
    return PageVariant(
        link_style=LinkStyle.DOCUMENT_ROOT,
        markup_policy=MarkupPolicy.LINK_IF_REQUESTED,
        include_breadcrumb=cfg.include_breadcrumbs,
    )


def pdf_document_variant(cfg: BuildConfig) -> PageVariant:
    return PageVariant(
        link_style=LinkStyle.OUTPUT_ROOT,
        markup_policy=MarkupPolicy.EMBED,
        include_breadcrumb=cfg.include_breadcrumbs,
    )

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_aggregate_document(tree: FolderTree, cfg: BuildConfig, *, for_pdf: bool = False) -> str:
    """
    Assemble the single document covering the whole tree.

    The markdown variant links outline entries to section anchors and gives
    every non-root section a link back to the top; the PDF variant uses a
    plain outline and no back links.

    Args:
        tree: Pre-ordered folder tree.
        cfg: Build settings.
        for_pdf: Select the PDF variant.

    Returns:
        str: The aggregated markdown text.
    """
    variant = pdf_document_variant(cfg) if for_pdf else markdown_document_variant(cfg)

    if for_pdf:
        toc = outline(tree, lambda node: node.name)
    else:
        toc = outline(tree, lambda node: f"[{node.name}](#{heading_anchor(node.name)})")

    blocks: List[str] = [f"# {cfg.project_name}", f"{toc}\n{RULE}"]
    for node in tree:
        blocks.extend(_section(node, cfg, variant, with_home_link=not for_pdf))

    return BLOCK_SEPARATOR.join(blocks)


def render_aggregate_markdown(tree: FolderTree, cfg: BuildConfig) -> str:
    """
    Write the aggregated markdown document at the output root.

    Returns:
        str: Path of "<project_name>.md".
    """
    logger.info("Generating complete markdown file")
    target = os.path.join(cfg.dist_folder, f"{cfg.project_name}.md")
    return write_text(target, build_aggregate_document(tree, cfg))


def render_aggregate_pdf(tree: FolderTree, cfg: BuildConfig, converter: PdfConverter) -> str:
    """
    Write the aggregated PDF document at the output root.

    The temporary markdown file lives only for the conversion: written,
    converted, then deleted. A failing conversion propagates and leaves the
    temporary file in place.

    Returns:
        str: Path of "<project_name>.pdf".
    """
    logger.info("Generating complete pdf file")
    temp_path = os.path.join(cfg.dist_folder, f"{cfg.project_name}{TEMP_SUFFIX}.md")
    pdf_path = os.path.join(cfg.dist_folder, f"{cfg.project_name}.pdf")

    write_text(temp_path, build_aggregate_document(tree, cfg, for_pdf=True))
    converter.convert(temp_path, pdf_path, cfg.pdf_paper_format, resolve_pdf_css(cfg))
    remove_file(temp_path)
    return pdf_path

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _section(node: FolderNode, cfg: BuildConfig, variant: PageVariant, with_home_link: bool) -> List[str]:
    blocks = [f"## {node.name}"]
    if not node.is_root:
        if variant.include_breadcrumb:
            blocks.append(f"`{breadcrumb(node)}`")
        if with_home_link:
            blocks.append(f"[{cfg.homepage_name}](#{heading_anchor(cfg.project_name)})")
    blocks.extend(node_blocks(node, cfg, variant))
    return blocks
