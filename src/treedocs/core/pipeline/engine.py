from __future__ import annotations

"""
Core build orchestration.

This module sequences the documentation build:
1. Clears and recreates the output root.
2. Builds the folder tree from the source root.
3. Materializes the mirrored output directories when a stage needs them.
4. Runs the enabled stages in a fixed order, each fully completed before
   the next starts: images, folder pages, site, complete markdown,
   complete PDF, folder PDFs.

Failures are not recovered here; they propagate to the caller.
"""

import logging
import os
import time
from typing import Callable, List, Optional

from treedocs.core.analysis.tree_builder import build_tree, materialize_output_tree
from treedocs.core.rendering.aggregate import render_aggregate_markdown, render_aggregate_pdf
from treedocs.core.rendering.folder_pages import render_folder_pages
from treedocs.core.rendering.pdf_pages import render_pdf_pages
from treedocs.core.rendering.site import render_site
from treedocs.core.services.images import render_images
from treedocs.core.services.worker_pool import WorkerPool
from treedocs.domain.config import BuildConfig
from treedocs.domain.errors import ConfigurationError
from treedocs.domain.pipeline_models import (
    BuildResult,
    CounterCallback,
    ProgressCallback,
    StageReport,
)
from treedocs.infra.fs import make_directory, remove_tree
from treedocs.infra.pdf import PdfConverter, create_pdf_converter
from treedocs.infra.rasterizer import DiagramRasterizer, create_rasterizer

logger = logging.getLogger(__name__)

# Stage identifiers, in execution order
STAGE_IMAGES = "images"
STAGE_MD = "md"
STAGE_SITE = "site"
STAGE_COMPLETE_MD = "complete_md"
STAGE_COMPLETE_PDF = "complete_pdf"
STAGE_PDF = "pdf"


def run_build(
        cfg: BuildConfig,
        *,
        rasterizer: Optional[DiagramRasterizer] = None,
        converter: Optional[PdfConverter] = None,
        on_progress: Optional[ProgressCallback] = None,
) -> BuildResult:
    """
    Execute a complete documentation build.

    Args:
        cfg: Validated build settings.
        rasterizer: Diagram renderer for the image stage. Built from the
                    config when None and the stage is enabled.
        converter: PDF converter for the PDF stages. Built from the config
                   when None and a PDF stage is enabled.
        on_progress: Called with (stage, completed, total) as per-node work
                     completes.

    Returns:
        BuildResult: Node counts and per-stage outputs and timings.

    Raises:
        ConfigurationError: If the source root is not a directory, or the
                            output folder is or contains it.
        ExternalToolError: If a rasterizer or converter call fails.
        OSError: On any filesystem failure.
    """
    started = time.perf_counter()
    logger.info("Build started.")

    if not os.path.isdir(cfg.root_folder):
        raise ConfigurationError(f"Source folder not found: {cfg.root_folder}")
    check_output_location(cfg)

    # -------------------------------------------------------------------------
    # 1) Output Root & Tree
    # -------------------------------------------------------------------------
    remove_tree(cfg.dist_folder)
    make_directory(cfg.dist_folder)

    tree = build_tree(cfg.root_folder, cfg)
    if cfg.needs_output_tree:
        materialize_output_tree(tree, cfg)

    pool = WorkerPool(cfg.max_workers)
    stages: List[StageReport] = []

    def run_stage(name: str, action: Callable[[Optional[CounterCallback]], List[str]]) -> None:
        stage_started = time.perf_counter()
        outputs = action(_stage_progress(name, on_progress))
        elapsed = time.perf_counter() - stage_started
        logger.debug(f"Stage '{name}' finished in {elapsed:.2f}s ({len(outputs)} files)")
        stages.append(StageReport(name=name, outputs=outputs, elapsed_seconds=elapsed))

    # -------------------------------------------------------------------------
    # 2) Stages
    # -------------------------------------------------------------------------
    if cfg.generate_local_images:
        active_rasterizer = rasterizer or create_rasterizer(cfg)
        run_stage(STAGE_IMAGES, lambda cb: render_images(tree, cfg, active_rasterizer, pool, cb))

    if cfg.generate_md:
        run_stage(STAGE_MD, lambda cb: render_folder_pages(tree, cfg, pool, cb))

    if cfg.generate_website:
        run_stage(STAGE_SITE, lambda cb: render_site(tree, cfg, pool, cb))

    if cfg.generate_complete_md:
        run_stage(STAGE_COMPLETE_MD, lambda cb: [render_aggregate_markdown(tree, cfg)])

    active_converter: Optional[PdfConverter] = None
    if cfg.generate_complete_pdf or cfg.generate_pdf:
        active_converter = converter or create_pdf_converter(cfg)

    if cfg.generate_complete_pdf:
        run_stage(STAGE_COMPLETE_PDF, lambda cb: [render_aggregate_pdf(tree, cfg, active_converter)])

    if cfg.generate_pdf:
        run_stage(STAGE_PDF, lambda cb: render_pdf_pages(tree, cfg, active_converter, pool, cb))

    elapsed_total = time.perf_counter() - started
    logger.info(f"built in {elapsed_total:.2f} seconds")

    return BuildResult(
        root_folder=cfg.root_folder,
        dist_folder=cfg.dist_folder,
        folder_count=len(tree),
        diagram_count=sum(len(node.diagrams) for node in tree),
        stages=stages,
        elapsed_seconds=elapsed_total,
    )


def check_output_location(cfg: BuildConfig) -> None:
    """
    Refuse an output folder that is, or contains, the source folder.

    The output root is wiped at the start of every build, so either case
    would delete the sources.

    Raises:
        ConfigurationError: If clearing the output folder would remove the
                            source folder.
    """
    root = os.path.realpath(cfg.root_folder)
    dist = os.path.realpath(cfg.dist_folder)
    try:
        common = os.path.commonpath([root, dist])
    except ValueError:
        # Different drives
        return
    if common == dist:
        raise ConfigurationError(
            f"Output folder '{cfg.dist_folder}' contains the source folder '{cfg.root_folder}'."
        )


def _stage_progress(name: str, on_progress: Optional[ProgressCallback]) -> Optional[CounterCallback]:
    if on_progress is None:
        return None

    def forward(completed: int, total: int) -> None:
        on_progress(name, completed, total)

    return forward
