from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the fixed names, file extensions and remote endpoints shared by
the tree builder, the renderers and the configuration layer.
"""

from typing import Tuple

CURRENT_CONFIG_VERSION = "1.0.0"
CONFIG_FILE_NAME = "treedocs.json"

# -----------------------------------------------------------------------------
# SOURCE TREE CONVENTIONS
# -----------------------------------------------------------------------------
DEFAULT_EXCLUDE_PREFIX = "_"
DEFAULT_FRAGMENT_EXTENSION = ".md"
DEFAULT_DIAGRAM_EXTENSION = ".puml"

# -----------------------------------------------------------------------------
# OUTPUT ARTIFACTS
# -----------------------------------------------------------------------------
SITE_ENTRY_FILE = "index.html"
SITE_SIDEBAR_FILE = "_sidebar.md"
HOSTING_MARKER_FILE = ".nojekyll"
TEMP_SUFFIX = "_TEMP"

# -----------------------------------------------------------------------------
# DIAGRAM RENDERING
# -----------------------------------------------------------------------------
DEFAULT_PLANTUML_SERVER = "https://www.plantuml.com/plantuml"
SUPPORTED_DIAGRAM_FORMATS: Tuple[str, ...] = ("svg", "png")
SUPPORTED_RASTERIZERS: Tuple[str, ...] = ("server", "command")
PLANTUML_SKIN = "classic"

# PlantUML's custom base64 alphabet
PLANTUML_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"
