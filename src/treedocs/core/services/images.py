from __future__ import annotations

"""
Local Image Pre-Rendering Service.

Renders every diagram of the tree into an image file inside the mirrored
output folder, where the renderers expect to find it.
"""

import logging
import os
from typing import Callable, List, Optional

from treedocs.core.analysis.naming import output_file
from treedocs.core.rendering.diagrams import diagram_ref
from treedocs.core.services.worker_pool import WorkerPool
from treedocs.domain.config import BuildConfig
from treedocs.domain.pipeline_models import CounterCallback
from treedocs.domain.tree_models import DiagramSource, FolderNode, FolderTree
from treedocs.infra.fs import write_bytes
from treedocs.infra.rasterizer import DiagramRasterizer

logger = logging.getLogger(__name__)


def render_images(
        tree: FolderTree,
        cfg: BuildConfig,
        rasterizer: DiagramRasterizer,
        pool: Optional[WorkerPool] = None,
        on_progress: Optional[CounterCallback] = None,
) -> List[str]:
    """
    Render all diagrams to "<output folder>/<diagram base name>.<format>".

    Args:
        tree: Pre-ordered folder tree.
        cfg: Build settings (output root, image format).
        rasterizer: External diagram renderer.
        pool: Worker pool bounding concurrent renders.
        on_progress: Called with (completed, total) per image.

    Returns:
        List[str]: Written image paths.
    """
    pool = pool or WorkerPool(cfg.max_workers)
    tasks = [
        _render_task(node, diagram, cfg, rasterizer)
        for node in tree
        for diagram in node.diagrams
    ]
    logger.info(f"Generating {len(tasks)} images")
    return pool.run(tasks, on_progress)


def _render_task(
        node: FolderNode,
        diagram: DiagramSource,
        cfg: BuildConfig,
        rasterizer: DiagramRasterizer,
) -> Callable[[], str]:
    source_path = os.path.join(node.path, diagram.name)
    target = output_file(node, cfg, diagram_ref(node, diagram, cfg).image_file_name)

    def task() -> str:
        return write_bytes(target, rasterizer.render(source_path, cfg.diagram_format))

    return task
