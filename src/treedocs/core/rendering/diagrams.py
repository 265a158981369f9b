from __future__ import annotations

"""
Diagram Resolver.

Computes where a diagram's image lives, either a pre-rendered local file or
a remote rendering-service URL carrying the compressed diagram source, and
offers it as both an inline image and a textual link. Nothing is rendered or
cached here: resolution is a pure function of the diagram and the settings.
"""

import os
import posixpath
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from treedocs.core.analysis.naming import encode_uri_path
from treedocs.domain.config import BuildConfig
from treedocs.domain.constants import PLANTUML_ALPHABET
from treedocs.domain.tree_models import DiagramRef, DiagramSource, FolderNode

# -----------------------------------------------------------------------------
# RESOLUTION VARIANTS
# -----------------------------------------------------------------------------

class LinkStyle(Enum):
    """How a local image path is expressed, depending on where the page sits."""

    # Page is written inside the diagram's own output folder
    FOLDER_LOCAL = "folder_local"
    # Document is written at the output root ("a/b/flow.svg")
    DOCUMENT_ROOT = "document_root"
    # Path prefixed with the output root, resolved from the working directory
    OUTPUT_ROOT = "output_root"


class MarkupPolicy(Enum):
    """Which of the two markups a renderer inserts."""

    EMBED = "embed"
    # Link when include_link_to_diagram is set
    LINK_IF_REQUESTED = "link_if_requested"
    # As above, but local images are always embedded
    LINK_IF_REMOTE = "link_if_remote"


@dataclass(frozen=True)
class DiagramMarkup:
    """Resolved URL of a diagram with both markdown renditions."""
    url: str
    embed: str
    link: str

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def encode_plantuml(source: str) -> str:
    """
    Encode diagram source using PlantUML-specific encoding.

    The text is deflated (raw stream, no zlib header or checksum) and written
    with PlantUML's own base64 alphabet.

    Args:
        source: The PlantUML diagram source.

    Returns:
        str: PlantUML-encoded string for rendering-service URLs.
    """
    compressed = zlib.compress(source.encode("utf-8"), level=9)[2:-4]
    result = []

    for i in range(0, len(compressed), 3):
        chunk = compressed[i: i + 3]
        if len(chunk) == 3:
            b1, b2, b3 = chunk
            result.append(PLANTUML_ALPHABET[b1 >> 2])
            result.append(PLANTUML_ALPHABET[((b1 & 0x3) << 4) | (b2 >> 4)])
            result.append(PLANTUML_ALPHABET[((b2 & 0xF) << 2) | (b3 >> 6)])
            result.append(PLANTUML_ALPHABET[b3 & 0x3F])
        elif len(chunk) == 2:
            b1, b2 = chunk
            result.append(PLANTUML_ALPHABET[b1 >> 2])
            result.append(PLANTUML_ALPHABET[((b1 & 0x3) << 4) | (b2 >> 4)])
            result.append(PLANTUML_ALPHABET[(b2 & 0xF) << 2])
        elif len(chunk) == 1:
            b1 = chunk[0]
            result.append(PLANTUML_ALPHABET[b1 >> 2])
            result.append(PLANTUML_ALPHABET[(b1 & 0x3) << 4])

    return "".join(result)


def remote_diagram_url(source: str, server_url: str, image_format: str) -> str:
    """Rendering-service URL of the first diagram page of a source."""
    return f"{server_url.rstrip('/')}/{image_format}/0/{encode_plantuml(source)}"


def local_diagram_path(ref: DiagramRef, cfg: BuildConfig, style: LinkStyle) -> str:
    """
    Expected location of a pre-rendered image, relative to the referencing page.

    The image itself is produced by the image stage; this only computes its path.

    Args:
        ref: Diagram to locate.
        cfg: Build settings (output root).
        style: Where the referencing page sits.

    Returns:
        str: URL-encoded relative path ending in the image format extension.
    """
    file_name = ref.image_file_name
    if style is LinkStyle.FOLDER_LOCAL:
        return encode_uri_path(file_name)

    parts = ref.folder.rel_parts
    if style is LinkStyle.DOCUMENT_ROOT:
        return encode_uri_path(posixpath.normpath(posixpath.join(".", *parts, file_name)), sep="/")

    dist = cfg.dist_folder.replace(os.sep, "/")
    return encode_uri_path(posixpath.normpath(posixpath.join(dist, *parts, file_name)), sep="/")


def resolve_diagram(
        ref: DiagramRef,
        cfg: BuildConfig,
        style: LinkStyle,
        remote_format: Optional[str] = None,
) -> DiagramMarkup:
    """
    Resolve a diagram to its URL and both markdown renditions.

    Args:
        ref: Diagram to resolve.
        cfg: Build settings (local image mode, service URL, formats).
        style: Local path style used when local images are enabled.
        remote_format: Service endpoint format. Defaults to the diagram format.

    Returns:
        DiagramMarkup: URL, inline image and textual link.
    """
    if cfg.generate_local_images:
        url = local_diagram_path(ref, cfg, style)
    else:
        url = remote_diagram_url(
            ref.diagram.content,
            cfg.plantuml_server_url,
            remote_format or cfg.diagram_format,
        )

    return DiagramMarkup(
        url=url,
        embed=f"![diagram]({url})",
        link=f"[Go to {ref.diagram.base_name} diagram]({url})",
    )


def select_markup(markup: DiagramMarkup, policy: MarkupPolicy, cfg: BuildConfig) -> str:
    """Pick the embed or the link according to a renderer's policy."""
    if policy is MarkupPolicy.EMBED or not cfg.include_link_to_diagram:
        return markup.embed
    if policy is MarkupPolicy.LINK_IF_REMOTE and cfg.generate_local_images:
        return markup.embed
    return markup.link


def diagram_ref(node: FolderNode, diagram: DiagramSource, cfg: BuildConfig) -> DiagramRef:
    return DiagramRef(folder=node, diagram=diagram, image_format=cfg.diagram_format)
