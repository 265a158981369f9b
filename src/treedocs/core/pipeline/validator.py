from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between untrusted configuration sources (JSON file,
command line) and the build. Handles type coercion, default injection and
enum checks, then freezes the result into a BuildConfig.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from treedocs.domain.config import BuildConfig, get_default_config
from treedocs.domain.constants import SUPPORTED_DIAGRAM_FORMATS, SUPPORTED_RASTERIZERS

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SCHEMA
# -----------------------------------------------------------------------------

STRING_FIELDS = [
    "root_folder", "dist_folder", "project_name", "homepage_name",
    "md_file_name", "web_file_name", "web_theme", "plantuml_server_url",
    "plantuml_command", "pdf_paper_format", "pdf_engine",
    "fragment_extension", "diagram_extension",
]

# Strings for which "" is a meaningful value
OPTIONAL_STRING_FIELDS = ["repo_url", "pdf_css", "exclude_prefix"]

BOOL_FIELDS = [
    "generate_md", "generate_pdf", "generate_website",
    "generate_complete_md", "generate_complete_pdf", "generate_local_images",
    "include_navigation", "include_breadcrumbs", "include_table_of_contents",
    "include_link_to_diagram", "diagrams_on_top",
]

CHOICE_FIELDS: Dict[str, Sequence[str]] = {
    "diagram_format": SUPPORTED_DIAGRAM_FORMATS,
    "pdf_diagram_format": SUPPORTED_DIAGRAM_FORMATS,
    "rasterizer": SUPPORTED_RASTERIZERS,
}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    unknown = sorted(k for k in config if k not in defaults and k != "version")
    if unknown:
        warnings.append(f"Unknown configuration keys ignored: {', '.join(unknown)}.")

    # 2. Field Processing & Normalization
    for field in STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in OPTIONAL_STRING_FIELDS:
        merged[field] = _as_str(
            merged.get(field), defaults[field], field, warnings, strict, allow_empty=True
        )

    for field in BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field, choices in CHOICE_FIELDS.items():
        merged[field] = _as_choice(merged.get(field), defaults[field], choices, field, warnings, strict)

    merged["max_workers"] = _as_positive_int(
        merged.get("max_workers"), defaults["max_workers"], "max_workers", warnings, strict
    )

    # 3. Domain-Specific Normalization
    for field in ("fragment_extension", "diagram_extension"):
        merged[field] = _normalize_extension(merged[field], field, warnings, strict)

    return merged, warnings


def build_config(config: Any, *, strict: bool = False) -> Tuple[BuildConfig, List[str]]:
    """Validate raw settings and freeze them into a BuildConfig."""
    clean, warnings = validate_config(config, strict=strict)
    return BuildConfig.from_dict(clean), warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(
        value: Any,
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        allow_empty: bool = False,
) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if (v or allow_empty) else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Accept ints (and numeric strings when lenient), clamped to >= 1."""
    if value is None:
        return fallback
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, str) and not strict and value.strip().isdigit():
        number = int(value.strip())
    else:
        number = None

    if number is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if number < 1:
        warnings.append(f"Field '{field}' raised from {number} to 1.")
        return 1
    return number


def _as_choice(
        value: Any,
        fallback: str,
        choices: Sequence[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Restrict a string field to a fixed set of values."""
    v = _as_str(value, fallback, field, warnings, strict).lower()
    if v in choices:
        return v

    msg = f"Invalid field '{field}': '{value}' is not one of {', '.join(choices)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extension(ext: str, field: str, warnings: List[str], strict: bool) -> str:
    """Ensure the file extension is prefixed with a dot."""
    if ext.startswith("."):
        return ext
    if strict:
        raise ValueError(f"Invalid extension '{ext}' in '{field}': must start with '.'.")
    warnings.append(f"Extension '{ext}' corrected to '.{ext}'.")
    return "." + ext
