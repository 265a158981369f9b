"""Custom exceptions for treedocs."""


class TreedocsError(Exception):
    """Base exception for treedocs operations."""


class ConfigurationError(TreedocsError):
    """Invalid build configuration or unusable source/output location."""


class ExternalToolError(TreedocsError):
    """An external rasterizer or document converter failed."""
