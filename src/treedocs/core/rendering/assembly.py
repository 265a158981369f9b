from __future__ import annotations

"""
Page Assembly.

Shared building blocks for every output renderer: the per-node body
(fragments and diagrams in the configured order), indented outlines, and the
single-page layout. Renderers differ only by the PageVariant they select.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from treedocs.core.analysis.naming import breadcrumb, page_link
from treedocs.core.rendering.diagrams import (
    LinkStyle,
    MarkupPolicy,
    diagram_ref,
    resolve_diagram,
    select_markup,
)
from treedocs.domain.config import BuildConfig
from treedocs.domain.tree_models import FolderNode, FolderTree

BLOCK_SEPARATOR = "\n\n"
RULE = "---"

# -----------------------------------------------------------------------------
# VARIANT MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PageVariant:
    """
    Per-renderer assembly switches.

    Attributes:
        link_style: How local diagram images are addressed.
        markup_policy: Whether diagrams are embedded or linked.
        include_breadcrumb: Show the folder location under the heading.
        include_toc: Show the outline of the whole tree.
        include_nav: Show the up link and the descendants list.
        page_file_name: Page file name targeted by outline/navigation links.
        remote_format: Rendering-service format (defaults to diagram_format).
    """
    link_style: LinkStyle
    markup_policy: MarkupPolicy
    include_breadcrumb: bool = False
    include_toc: bool = False
    include_nav: bool = False
    page_file_name: str = ""
    remote_format: Optional[str] = None

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def node_blocks(node: FolderNode, cfg: BuildConfig, variant: PageVariant) -> List[str]:
    """
    Markdown blocks carrying a node's own content.

    Diagrams and fragments keep their enumeration order; which group comes
    first follows diagrams_on_top.

    Args:
        node: Folder whose content is rendered.
        cfg: Build settings.
        variant: Diagram addressing and markup policy.

    Returns:
        List[str]: Blocks to be joined by blank lines.
    """
    diagrams = [
        select_markup(
            resolve_diagram(
                diagram_ref(node, d, cfg), cfg, variant.link_style, variant.remote_format
            ),
            variant.markup_policy,
            cfg,
        )
        for d in node.diagrams
    ]
    fragments = list(node.fragments)

    if cfg.diagrams_on_top:
        return diagrams + fragments
    return fragments + diagrams


def outline(tree: FolderTree, label: Callable[[FolderNode], str]) -> str:
    """
    Indented bullet list with one line per node, in tree order.

    Indentation by depth reconstructs the hierarchy because the tree is
    pre-ordered.
    """
    return "".join(f"{'  ' * (node.depth - 1)}* {label(node)}\n" for node in tree)


def render_page(
        node: FolderNode,
        tree: FolderTree,
        cfg: BuildConfig,
        variant: PageVariant,
) -> str:
    """
    Assemble the standalone page of one node.

    Layout: heading, optional breadcrumb, optional outline, optional
    navigation, then the node's content blocks.

    Args:
        node: Folder being rendered.
        tree: Whole tree, for outline and navigation.
        cfg: Build settings.
        variant: Renderer-specific switches.

    Returns:
        str: The markdown page.
    """
    blocks: List[str] = [f"# {node.name}"]

    if variant.include_breadcrumb and not node.is_root:
        blocks.append(f"`{breadcrumb(node)}`")

    if variant.include_toc:
        blocks.append(_table_of_contents(node, tree, variant) + f"\n{RULE}")

    if variant.include_nav:
        blocks.extend(_navigation(node, tree, variant))

    blocks.extend(node_blocks(node, cfg, variant))
    return BLOCK_SEPARATOR.join(blocks)


def index_by_path(tree: FolderTree) -> Dict[str, FolderNode]:
    return {node.path: node for node in tree}

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _table_of_contents(current: FolderNode, tree: FolderTree, variant: PageVariant) -> str:
    def label(node: FolderNode) -> str:
        text = f"**{node.name}**" if node.path == current.path else node.name
        return f"[{text}]({page_link(current, node.rel_parts, variant.page_file_name)})"

    return outline(tree, label)


def _navigation(node: FolderNode, tree: FolderTree, variant: PageVariant) -> List[str]:
    """Up link, descendants list and closing rule."""
    blocks: List[str] = []

    parent = index_by_path(tree).get(node.parent_path) if node.parent_path else None
    if parent is not None:
        link = page_link(node, parent.rel_parts, variant.page_file_name)
        blocks.append(f"[{parent.name} (up)]({link})")

    for child in node.child_names:
        link = page_link(node, node.rel_parts + [child], variant.page_file_name)
        blocks.append(f"- [{child}]({link})")

    blocks.append(RULE)
    return blocks
