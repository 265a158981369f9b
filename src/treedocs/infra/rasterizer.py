from __future__ import annotations

"""
Diagram Rasterizer Backends.

Turns a diagram source file into image bytes through an external renderer:
either a PlantUML server reached over HTTP or a locally installed PlantUML
executable. Failures are raised as ExternalToolError and never retried.
"""

import logging
import subprocess
from abc import ABC, abstractmethod

import requests

from treedocs.core.rendering.diagrams import remote_diagram_url
from treedocs.domain.config import BuildConfig
from treedocs.domain.errors import ConfigurationError, ExternalToolError
from treedocs.infra.fs import read_text

logger = logging.getLogger(__name__)

USER_AGENT = "treedocs/1.0.0"
DEFAULT_TIMEOUT = 30


class DiagramRasterizer(ABC):
    """
    Abstract base class for diagram-to-image renderers.
    """

    @abstractmethod
    def render(self, source_path: str, image_format: str) -> bytes:
        """
        Render one diagram source file.

        Args:
            source_path: Path of the diagram-description file.
            image_format: Target image format ("svg", "png").

        Returns:
            bytes: The rendered image.
        """


class PlantUmlServerRasterizer(DiagramRasterizer):
    """Fetches images from a PlantUML server using the encoded-source URL."""

    def __init__(self, server_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.server_url = server_url
        self.timeout = timeout

    def render(self, source_path: str, image_format: str) -> bytes:
        url = remote_diagram_url(read_text(source_path), self.server_url, image_format)
        headers = {"User-Agent": USER_AGENT}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ExternalToolError(f"PlantUML server failed for '{source_path}': {e}") from e

        logger.debug(f"Rendered {source_path} via server ({len(response.content)} bytes)")
        return response.content


class PlantUmlCommandRasterizer(DiagramRasterizer):
    """Pipes the source through a local `plantuml -pipe` process."""

    def __init__(self, command: str = "plantuml") -> None:
        self.command = command

    def render(self, source_path: str, image_format: str) -> bytes:
        cmd = [self.command, f"-t{image_format}", "-pipe"]
        with open(source_path, "rb") as source:
            try:
                result = subprocess.run(cmd, stdin=source, capture_output=True, check=True)
            except subprocess.CalledProcessError as e:
                stderr = e.stderr.decode("utf-8", errors="replace").strip()
                raise ExternalToolError(f"PlantUML failed for '{source_path}': {stderr}") from e
            except FileNotFoundError as e:
                raise ExternalToolError(f"PlantUML executable not found: {self.command}") from e

        logger.debug(f"Rendered {source_path} via {self.command}")
        return result.stdout


def create_rasterizer(cfg: BuildConfig) -> DiagramRasterizer:
    """
    Instantiate the rasterizer selected by the configuration.

    Raises:
        ConfigurationError: If the backend name is unknown.
    """
    if cfg.rasterizer == "server":
        return PlantUmlServerRasterizer(cfg.plantuml_server_url)
    if cfg.rasterizer == "command":
        return PlantUmlCommandRasterizer(cfg.plantuml_command)
    raise ConfigurationError(f"Unknown rasterizer: {cfg.rasterizer}")
