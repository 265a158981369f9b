from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides. Every override defaults to None so that only the
options actually given on the command line replace file or default values.
"""

import argparse
from typing import Any, Dict, List, Tuple

from treedocs.domain.constants import SUPPORTED_DIAGRAM_FORMATS, SUPPORTED_RASTERIZERS

DEFAULT_SERVE_PORT = 3000

# (flag stem, config key, help)
TOGGLES: List[Tuple[str, str, str]] = [
    ("md", "generate_md", "one markdown page per folder"),
    ("pdf", "generate_pdf", "one PDF per folder"),
    ("website", "generate_website", "the docsify website"),
    ("complete-md", "generate_complete_md", "the single aggregated markdown document"),
    ("complete-pdf", "generate_complete_pdf", "the single aggregated PDF document"),
    ("local-images", "generate_local_images", "pre-rendered diagram images instead of remote URLs"),
    ("navigation", "include_navigation", "parent/child navigation on folder pages"),
    ("breadcrumbs", "include_breadcrumbs", "the folder path below each heading"),
    ("toc", "include_table_of_contents", "the whole-tree table of contents on folder pages"),
    ("diagram-links", "include_link_to_diagram", "links to diagrams instead of embedded images"),
    ("diagrams-on-top", "diagrams_on_top", "diagrams before the text of each folder"),
]

# (dest, config key)
VALUE_OPTIONS: List[Tuple[str, str]] = [
    ("root_folder", "root_folder"),
    ("dist_folder", "dist_folder"),
    ("project_name", "project_name"),
    ("homepage_name", "homepage_name"),
    ("repo_url", "repo_url"),
    ("diagram_format", "diagram_format"),
    ("rasterizer", "rasterizer"),
    ("plantuml_server_url", "plantuml_server_url"),
    ("pdf_css", "pdf_css"),
    ("max_workers", "max_workers"),
]

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the treedocs CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="treedocs",
        description="Build markdown, PDF and website documentation from a tree "
                    "of markdown fragments and PlantUML diagrams.",
    )

    # --- Paths & Naming ---
    p.add_argument("-i", "--root", dest="root_folder", default=None,
                   help="Source folder holding the documentation tree.")
    p.add_argument("-o", "--dist", dest="dist_folder", default=None,
                   help="Output folder (cleared on every build).")
    p.add_argument("--project-name", dest="project_name", default=None,
                   help="Project title used by aggregated documents and the site.")
    p.add_argument("--homepage-name", dest="homepage_name", default=None,
                   help="Display name of the source root folder.")
    p.add_argument("--repo-url", dest="repo_url", default=None,
                   help="Repository link shown by the website.")

    # --- Output Selection ---
    for stem, key, text in TOGGLES:
        group = p.add_mutually_exclusive_group()
        group.add_argument(f"--{stem}", dest=key, action="store_const", const=True, default=None,
                           help=f"Generate {text}." if key.startswith("generate_") else f"Include {text}.")
        group.add_argument(f"--no-{stem}", dest=key, action="store_const", const=False, default=None,
                           help=argparse.SUPPRESS)

    # --- Diagram Rendering ---
    p.add_argument("--diagram-format", dest="diagram_format", choices=SUPPORTED_DIAGRAM_FORMATS,
                   default=None, help="Image format of rendered diagrams.")
    p.add_argument("--rasterizer", dest="rasterizer", choices=SUPPORTED_RASTERIZERS,
                   default=None, help="Backend used to pre-render local images.")
    p.add_argument("--plantuml-server", dest="plantuml_server_url", default=None,
                   help="Base URL of the PlantUML server.")
    p.add_argument("--pdf-css", dest="pdf_css", default=None,
                   help="Stylesheet applied to generated PDFs.")
    p.add_argument("--max-workers", dest="max_workers", type=int, default=None,
                   help="Maximum number of concurrent renders and conversions.")

    # --- Configuration ---
    p.add_argument("--config", dest="config_path", default=None,
                   help="Settings file to load (default: ./treedocs.json if present).")
    p.add_argument("--use-defaults", action="store_true",
                   help="Ignore any settings file and start from built-in defaults.")
    p.add_argument("--dump-config", action="store_true",
                   help="Print the effective configuration as JSON and exit.")
    p.add_argument("--save-config", action="store_true",
                   help="Persist the effective configuration before building.")

    # --- Runtime ---
    p.add_argument("-y", "--yes", dest="assume_yes", action="store_true",
                   help="Clear a non-empty output folder without asking.")
    p.add_argument("--serve", nargs="?", type=int, const=DEFAULT_SERVE_PORT, default=None,
                   metavar="PORT", help=f"Serve the output folder after the build (default port {DEFAULT_SERVE_PORT}).")
    p.add_argument("--debug", action="store_true",
                   help="Elevate logging verbosity to DEBUG.")
    p.add_argument("-q", "--quiet", action="store_true",
                   help="Only log warnings and errors.")
    p.add_argument("--log-file", dest="log_file", default=None,
                   help="Also write logs to this rotating file.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Collect the configuration values given on the command line.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Overrides, restricted to options that were set.
    """
    overrides: Dict[str, Any] = {}

    for dest, key in VALUE_OPTIONS:
        value = getattr(args, dest, None)
        if value is not None:
            overrides[key] = value

    for _, key, _ in TOGGLES:
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    return overrides
