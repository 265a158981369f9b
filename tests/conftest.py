from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A sample documentation source tree built under tmp_path.
3. Config factories and fakes for the external rasterizer and converter.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from treedocs.domain.config import BuildConfig  # noqa: E402
from treedocs.infra.pdf import PdfConverter  # noqa: E402
from treedocs.infra.rasterizer import DiagramRasterizer  # noqa: E402

FLOW_DIAGRAM = "@startuml\nAlice -> Bob: hello\n@enduml\n"


# -----------------------------------------------------------------------------
# Source Tree Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_source(tmp_path: Path) -> Path:
    """
    Create a documentation source tree.

    Structure:
    /src
      README.md          "Hello"
      _draft.md          (excluded)
      /_hidden
        README.md        "Skip" (excluded)
      /child
        README.md        "World"
        flow.puml
        /grand
          notes.md       "Deep"
    """
    root = tmp_path / "src"
    (root / "_hidden").mkdir(parents=True)
    (root / "child" / "grand").mkdir(parents=True)

    (root / "README.md").write_text("Hello", encoding="utf-8")
    (root / "_draft.md").write_text("Draft", encoding="utf-8")
    (root / "_hidden" / "README.md").write_text("Skip", encoding="utf-8")
    (root / "child" / "README.md").write_text("World", encoding="utf-8")
    (root / "child" / "flow.puml").write_text(FLOW_DIAGRAM, encoding="utf-8")
    (root / "child" / "grand" / "notes.md").write_text("Deep", encoding="utf-8")
    return root


@pytest.fixture
def make_cfg(tmp_path: Path, sample_source: Path) -> Callable[..., BuildConfig]:
    """Factory for a BuildConfig pointed at the sample tree, all outputs off."""
    def factory(**overrides: Any) -> BuildConfig:
        values: Dict[str, Any] = {
            "root_folder": str(sample_source),
            "dist_folder": str(tmp_path / "docs"),
            "generate_website": False,
            "generate_complete_md": False,
        }
        values.update(overrides)
        return BuildConfig(**values)

    return factory


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return BuildConfig(
        root_folder="/tmp/test_src",
        dist_folder="/tmp/test_docs",
        project_name="Test Project",
        generate_md=True,
    ).to_dict()


# -----------------------------------------------------------------------------
# External Tool Fakes
# -----------------------------------------------------------------------------
class FakeRasterizer(DiagramRasterizer):
    """Returns a recognizable payload and records every call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []

    def render(self, source_path: str, image_format: str) -> bytes:
        self.calls.append((source_path, image_format))
        return f"<{image_format}:{os.path.basename(source_path)}>".encode("utf-8")


class FakeConverter(PdfConverter):
    """Copies the markdown it receives into the PDF path."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, str, str]] = []
        self.sources: Dict[str, str] = {}

    def convert(self, markdown_path: str, pdf_path: str, paper_format: str, css_path: str) -> str:
        self.calls.append((markdown_path, pdf_path, paper_format, css_path))
        with open(markdown_path, "r", encoding="utf-8") as f:
            text = f.read()
        self.sources[pdf_path] = text
        with open(pdf_path, "w", encoding="utf-8") as f:
            f.write("%PDF " + text)
        return pdf_path


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    return FakeRasterizer()


@pytest.fixture
def fake_converter() -> FakeConverter:
    return FakeConverter()
