from __future__ import annotations

"""
Folder Tree Data Models.

Provides the flat, pre-ordered node records produced by the tree builder and
consumed read-only by every renderer.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DiagramSource:
    """
    A diagram-description file found directly inside a folder.

    Attributes:
        name: File name relative to its folder (e.g. "flow.puml").
        content: Raw, uninterpreted diagram source text.
    """
    name: str
    content: str

    @property
    def base_name(self) -> str:
        return os.path.splitext(self.name)[0]


@dataclass(frozen=True)
class FolderNode:
    """
    One directory of the source tree with its local content.

    Attributes:
        path: Source directory path (root folder joined with relative parts).
        rel_path: Path relative to the source root, "" for the root itself.
        name: Display name (homepage name for the root).
        depth: Nesting level, root is 1.
        parent_path: Path of the enclosing node, None for the root.
        child_names: Immediate sub-directory names, enumeration order.
        fragments: Raw text of each markdown fragment, enumeration order.
        diagrams: Diagram sources, enumeration order.
    """
    path: str
    rel_path: str
    name: str
    depth: int
    parent_path: Optional[str] = None
    child_names: Tuple[str, ...] = ()
    fragments: Tuple[str, ...] = ()
    diagrams: Tuple[DiagramSource, ...] = ()

    @property
    def is_root(self) -> bool:
        return self.parent_path is None

    @property
    def rel_parts(self) -> List[str]:
        """Relative path segments, empty for the root."""
        return [p for p in self.rel_path.split(os.sep) if p]


@dataclass(frozen=True)
class DiagramRef:
    """
    Everything needed to locate or rebuild the image of one diagram.

    Attributes:
        folder: The node that owns the diagram.
        diagram: The diagram source itself.
        image_format: Extension of the expected local image.
    """
    folder: FolderNode
    diagram: DiagramSource
    image_format: str

    @property
    def image_file_name(self) -> str:
        return f"{self.diagram.base_name}.{self.image_format}"


FolderTree = List[FolderNode]
