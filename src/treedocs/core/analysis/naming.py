from __future__ import annotations

"""
Path and Name Resolver.

Derives display names, source-relative paths and output locations for the
folders of the source tree. All renderers go through these helpers so that a
folder is named and placed identically in every output format.
"""

import os
import posixpath
from typing import List, Optional
from urllib.parse import quote

from treedocs.domain.config import BuildConfig
from treedocs.domain.tree_models import FolderNode

# Reserved characters kept literal when encoding paths as URLs
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def folder_display_name(path: str, root_path: str, homepage_name: str) -> str:
    """
    Return the name shown for a folder.

    Args:
        path: Folder path as produced by the tree builder.
        root_path: The source root path.
        homepage_name: Configured alias for the source root.

    Returns:
        str: The homepage name for the root, the base name otherwise.
    """
    if os.path.normpath(path) == os.path.normpath(root_path):
        return homepage_name
    return os.path.basename(os.path.normpath(path))


def relative_folder_path(path: str, root_path: str) -> str:
    """Path of a folder relative to the source root, "" for the root itself."""
    rel = os.path.relpath(path, root_path)
    return "" if rel == os.curdir else rel


def breadcrumb(node: FolderNode) -> str:
    """Slash-separated location of a node below the source root ("/a/b")."""
    return "/" + "/".join(node.rel_parts)


def output_dir(node: FolderNode, cfg: BuildConfig) -> str:
    """Mirrored output directory of a node."""
    return os.path.join(cfg.dist_folder, *node.rel_parts)


def output_file(node: FolderNode, cfg: BuildConfig, file_name: str) -> str:
    return os.path.join(output_dir(node, cfg), file_name)


def page_link(from_node: FolderNode, to_parts: List[str], file_name: str) -> str:
    """
    Relative, URL-encoded link from a node's page to a page in another folder.

    Args:
        from_node: Node whose page holds the link.
        to_parts: Relative path segments of the target folder.
        file_name: Target page file name.

    Returns:
        str: Encoded link usable in markdown.
    """
    start = posixpath.join(".", *from_node.rel_parts)
    target = posixpath.join(".", *to_parts, file_name)
    return encode_uri_path(posixpath.relpath(target, start))


def encode_uri_path(path: str, sep: Optional[str] = None) -> str:
    """Percent-encode a filesystem path for use as a URL."""
    sep = sep or os.sep
    return quote(path.replace(sep, "/"), safe=_URI_SAFE)


def heading_anchor(name: str) -> str:
    """In-document anchor derived from a heading text."""
    return encode_uri_path(name, sep="/").replace("%20", "-")
