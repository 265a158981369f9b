from __future__ import annotations

"""
Configuration Domain Management.

Defines the default build settings, the JSON persistence of per-project
settings, and the immutable BuildConfig value handed to every component of
the build.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from treedocs.domain.constants import (
    CONFIG_FILE_NAME,
    CURRENT_CONFIG_VERSION,
    DEFAULT_DIAGRAM_EXTENSION,
    DEFAULT_EXCLUDE_PREFIX,
    DEFAULT_FRAGMENT_EXTENSION,
    DEFAULT_PLANTUML_SERVER,
)
from treedocs.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BuildConfig:
    """
    Immutable build settings shared by the tree builder, renderers and engine.

    Attributes:
        root_folder: Source directory holding fragments and diagrams.
        dist_folder: Output directory, cleared and recreated on each build.
        project_name: Title of aggregated documents and of the site.
        repo_url: Repository link shown by the site shell.
        homepage_name: Display name used for the source root folder.
        md_file_name: Base name of per-folder markdown/PDF pages.
        web_file_name: Base name of site pages.
        web_theme: Stylesheet reference for the site shell.
        generate_md: Emit one markdown page per folder.
        generate_pdf: Emit one PDF per folder.
        generate_website: Emit the navigable site.
        generate_complete_md: Emit the aggregated markdown document.
        generate_complete_pdf: Emit the aggregated PDF document.
        generate_local_images: Pre-render diagrams to image files.
        include_navigation: Per-folder pages carry up/descendant links.
        include_breadcrumbs: Pages carry the folder path below the heading.
        include_table_of_contents: Per-folder pages carry the global outline.
        include_link_to_diagram: Diagrams are linked instead of embedded.
        diagrams_on_top: Diagrams precede text fragments.
        diagram_format: Image format for local images and remote URLs.
        pdf_diagram_format: Remote image format used by per-folder PDFs.
        pdf_css: Stylesheet for PDF conversion (empty means bundled).
        pdf_paper_format: Paper size handed to the PDF converter.
        pdf_engine: Engine used by the PDF converter.
        plantuml_server_url: Base URL of the remote rendering service.
        rasterizer: Local image backend ("server" or "command").
        plantuml_command: Executable used by the command rasterizer.
        max_workers: Concurrency bound for per-node work.
        exclude_prefix: Entries starting with this marker are skipped.
        fragment_extension: Extension of markdown fragments.
        diagram_extension: Extension of diagram sources.
    """
    root_folder: str = "src"
    dist_folder: str = "docs"
    project_name: str = "My Project"
    repo_url: str = ""
    homepage_name: str = "Overview"
    md_file_name: str = "README"
    web_file_name: str = "HOME"
    web_theme: str = "//unpkg.com/docsify/lib/themes/vue.css"

    generate_md: bool = False
    generate_pdf: bool = False
    generate_website: bool = True
    generate_complete_md: bool = True
    generate_complete_pdf: bool = False
    generate_local_images: bool = False

    include_navigation: bool = False
    include_breadcrumbs: bool = True
    include_table_of_contents: bool = True
    include_link_to_diagram: bool = False
    diagrams_on_top: bool = True

    diagram_format: str = "svg"
    pdf_diagram_format: str = "png"
    pdf_css: str = ""
    pdf_paper_format: str = "A4"
    pdf_engine: str = "weasyprint"
    plantuml_server_url: str = DEFAULT_PLANTUML_SERVER
    rasterizer: str = "server"
    plantuml_command: str = "plantuml"
    max_workers: int = 4

    exclude_prefix: str = DEFAULT_EXCLUDE_PREFIX
    fragment_extension: str = DEFAULT_FRAGMENT_EXTENSION
    diagram_extension: str = DEFAULT_DIAGRAM_EXTENSION

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> BuildConfig:
        """Build a config from a (validated) dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def needs_output_tree(self) -> bool:
        """True when some stage writes files inside mirrored sub-directories."""
        return (
            self.generate_website
            or self.generate_md
            or self.generate_pdf
            or self.generate_local_images
        )


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default build configuration as a plain dictionary.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return BuildConfig().to_dict()


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def default_config_path(base_dir: Optional[str] = None) -> str:
    """Project settings live next to the sources, in the working directory."""
    return os.path.join(base_dir or os.getcwd(), CONFIG_FILE_NAME)


def load_config(path: Optional[str] = None, *, required: bool = False) -> Dict[str, Any]:
    """
    Load project settings from disk, merged over the defaults.

    Args:
        path: JSON file to read. Defaults to ./treedocs.json.
        required: If True, a missing or unreadable file is an error.

    Returns:
        Dict[str, Any]: The merged configuration dictionary.

    Raises:
        ConfigurationError: If the file is required but missing, or is not
                            a JSON object.
    """
    config_path = path or default_config_path()
    merged = get_default_config()

    if not os.path.exists(config_path):
        if required:
            raise ConfigurationError(f"Config file not found: {config_path}")
        logger.debug("Config file not found. Using defaults.")
        return merged

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read config file '{config_path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file '{config_path}' must hold a JSON object.")

    data.pop("version", None)
    merged.update(data)
    logger.debug(f"Configuration loaded from {config_path}")
    return merged


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> str:
    """
    Persist the configuration as the project's settings file.

    Args:
        config: Configuration dictionary to save.
        path: Target JSON file. Defaults to ./treedocs.json.

    Returns:
        str: The path written.
    """
    config_path = path or default_config_path()
    state = dict(config)
    state["version"] = CURRENT_CONFIG_VERSION
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(state, f, ensure_ascii=False, indent=4)
    logger.info(f"Configuration saved to {config_path}")
    return config_path
