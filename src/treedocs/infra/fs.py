from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin wrappers over 'os' and 'shutil' used by the tree builder, the renderers
and the build engine. Every helper fails loudly: I/O errors propagate to the
caller so a build never continues on a partial tree.
"""

import os
import shutil
from typing import List, Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

# Bundled templates and stylesheets
RESOURCES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "resources")

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def list_entries(path: str) -> List[str]:
    """Enumerate a directory once, in the order reported by the filesystem."""
    return os.listdir(path)

# -----------------------------------------------------------------------------
# READ / WRITE API
# -----------------------------------------------------------------------------

def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def write_text(path: str, content: str) -> str:
    """
    Write a text artifact, replacing any previous content.

    Args:
        path: Target file path. Its parent directory must exist.
        content: Text to persist.

    Returns:
        str: The path written.
    """
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def write_bytes(path: str, content: bytes) -> str:
    with open(path, "wb") as f:
        f.write(content)
    return path

# -----------------------------------------------------------------------------
# DIRECTORY LIFECYCLE API
# -----------------------------------------------------------------------------

def make_directory(path: str) -> str:
    """Recursively create a directory, tolerating an existing one."""
    os.makedirs(path, exist_ok=True)
    return path


def remove_tree(path: str) -> None:
    """Recursively delete a directory. A missing directory is not an error."""
    if os.path.isdir(path):
        shutil.rmtree(path)
    elif os.path.exists(path):
        os.remove(path)


def remove_file(path: str) -> None:
    os.remove(path)


def is_non_empty_dir(path: str) -> bool:
    return os.path.isdir(path) and bool(os.listdir(path))
