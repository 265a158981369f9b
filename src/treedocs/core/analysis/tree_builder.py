from __future__ import annotations

"""
Folder Tree Builder.

Scans the source root recursively and produces one FolderNode per directory,
in depth-first pre-order, carrying the folder's own markdown fragments and
diagram sources. Materializing the mirrored output directories is a separate
pass over the finished tree.
"""

import logging
import os
from typing import List, Optional, Tuple

from treedocs.core.analysis.naming import (
    folder_display_name,
    output_dir,
    relative_folder_path,
)
from treedocs.domain.config import BuildConfig
from treedocs.domain.tree_models import DiagramSource, FolderNode, FolderTree
from treedocs.infra.fs import list_entries, make_directory, read_text

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(root_path: str, cfg: Optional[BuildConfig] = None) -> FolderTree:
    """
    Build the pre-ordered folder tree of a source root.

    Entries whose name starts with the exclusion prefix are skipped, and
    excluded directories are never descended into. Each directory is listed
    once; sub-directories are visited before the directory's own files are
    read, but every node keeps the position of its first visit, so parents
    always precede their children in the result.

    Args:
        root_path: Source root directory.
        cfg: Build settings (names, prefix, extensions). Defaults apply if None.

    Returns:
        FolderTree: One node per reachable directory, root first.

    Raises:
        OSError: If any directory or file cannot be read.
    """
    cfg = cfg or BuildConfig(root_folder=root_path)
    logger.debug(f"Scanning source tree: {root_path}")

    slots: List[Optional[FolderNode]] = []
    _visit(root_path, root_path, None, 1, cfg, slots)

    tree = [node for node in slots if node is not None]
    logger.info(f"Parsed {len(tree)} folders")
    return tree


def materialize_output_tree(tree: FolderTree, cfg: BuildConfig) -> List[str]:
    """
    Create the output directory mirroring every folder of the tree.

    Renderers rely on this pass to find their target directories in place.

    Args:
        tree: Folder tree produced by build_tree.
        cfg: Build settings providing the output root.

    Returns:
        List[str]: Directories created (or already present), root excluded.
    """
    created: List[str] = []
    for node in tree:
        if node.is_root:
            continue
        created.append(make_directory(output_dir(node, cfg)))
    logger.debug(f"Materialized {len(created)} output directories")
    return created

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _visit(
        path: str,
        root_path: str,
        parent_path: Optional[str],
        depth: int,
        cfg: BuildConfig,
        slots: List[Optional[FolderNode]],
) -> None:
    """Reserve this folder's slot, descend into children, then fill the slot."""
    slot = len(slots)
    slots.append(None)

    entries = sorted(e for e in list_entries(path) if not _is_excluded(e, cfg.exclude_prefix))
    dirs = [e for e in entries if os.path.isdir(os.path.join(path, e))]
    files = [e for e in entries if e not in dirs]

    for child in dirs:
        _visit(os.path.join(path, child), root_path, path, depth + 1, cfg, slots)

    fragments, diagrams = _collect_contents(path, files, cfg)

    slots[slot] = FolderNode(
        path=path,
        rel_path=relative_folder_path(path, root_path),
        name=folder_display_name(path, root_path, cfg.homepage_name),
        depth=depth,
        parent_path=parent_path,
        child_names=tuple(dirs),
        fragments=fragments,
        diagrams=diagrams,
    )


def _collect_contents(
        path: str,
        files: List[str],
        cfg: BuildConfig,
) -> Tuple[Tuple[str, ...], Tuple[DiagramSource, ...]]:
    """Read the folder-local fragments and diagram sources."""
    fragments = tuple(
        read_text(os.path.join(path, f))
        for f in files
        if _has_extension(f, cfg.fragment_extension)
    )
    diagrams = tuple(
        DiagramSource(name=f, content=read_text(os.path.join(path, f)))
        for f in files
        if _has_extension(f, cfg.diagram_extension)
    )
    return fragments, diagrams


def _is_excluded(name: str, prefix: str) -> bool:
    return bool(prefix) and name.startswith(prefix)


def _has_extension(file_name: str, extension: str) -> bool:
    return os.path.splitext(file_name)[1].lower() == extension.lower()
