from __future__ import annotations

"""
Markdown-to-PDF Conversion Backend.

Hands an intermediate markdown file to pandoc and waits for the PDF. The
converter runs from the working directory so that image paths prefixed with
the output root resolve.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from treedocs.domain.config import BuildConfig
from treedocs.domain.errors import ExternalToolError
from treedocs.infra.fs import RESOURCES_DIR

logger = logging.getLogger(__name__)

DEFAULT_PDF_CSS = os.path.join(RESOURCES_DIR, "pdf.css")

# Engines that render pandoc's HTML output; page size must come from CSS
HTML_PDF_ENGINES = ("weasyprint", "wkhtmltopdf", "prince", "pagedjs-cli")


class PdfConverter(ABC):
    """
    Abstract base class for document-to-PDF converters.
    """

    @abstractmethod
    def convert(self, markdown_path: str, pdf_path: str, paper_format: str, css_path: str) -> str:
        """
        Convert a markdown file into a PDF file.

        Args:
            markdown_path: Intermediate markdown document.
            pdf_path: Target PDF file.
            paper_format: Paper size name (e.g. "A4").
            css_path: Stylesheet applied to the document.

        Returns:
            str: The PDF path written.
        """


class PandocPdfConverter(PdfConverter):
    """Converts through `pandoc` with an HTML-based PDF engine."""

    def __init__(self, engine: str = "weasyprint", executable: str = "pandoc") -> None:
        self.engine = engine
        self.executable = executable

    def build_command(self, markdown_path: str, pdf_path: str, paper_format: str, css_path: str) -> List[str]:
        return [
            self.executable,
            markdown_path,
            "--from=gfm",
            f"--pdf-engine={self.engine}",
            f"--css={css_path}",
            *self.paper_size_args(paper_format),
            "-o", pdf_path,
        ]

    def paper_size_args(self, paper_format: str) -> List[str]:
        """Page size as a CSS @page rule for HTML engines, a template variable otherwise."""
        if self.engine in HTML_PDF_ENGINES:
            return ["-V", f"header-includes=<style>@page {{ size: {paper_format}; }}</style>"]
        return ["-V", f"papersize={paper_format.lower()}"]

    def convert(self, markdown_path: str, pdf_path: str, paper_format: str, css_path: str) -> str:
        cmd = self.build_command(markdown_path, pdf_path, paper_format, css_path)
        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise ExternalToolError(f"PDF conversion failed for '{markdown_path}': {e.stderr.strip()}") from e
        except FileNotFoundError as e:
            raise ExternalToolError(f"PDF converter not found: {self.executable}") from e

        logger.debug(f"Converted {markdown_path} -> {pdf_path}")
        return pdf_path


def resolve_pdf_css(cfg: BuildConfig) -> str:
    """Configured stylesheet, or the bundled one."""
    return cfg.pdf_css or DEFAULT_PDF_CSS


def create_pdf_converter(cfg: Optional[BuildConfig] = None) -> PdfConverter:
    engine = cfg.pdf_engine if cfg else "weasyprint"
    return PandocPdfConverter(engine=engine)
