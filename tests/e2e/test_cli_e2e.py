from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr), and file system side effects.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "treedocs" / "main.py"


def run_cli(args: List[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH to ensure the package
    is resolvable without being installed in site-packages.

    Args:
        args: List of command line arguments (excluding 'python' and script path).
        cwd: Working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: The result object containing returncode, stdout, and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    return subprocess.run(
        [sys.executable, str(ENTRY_POINT)] + args,
        cwd=cwd,
        env=env,
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def test_cli_default_build(tmp_path: Path, sample_source: Path) -> None:
    """TC-01: Default settings produce the website and the complete markdown."""
    result = run_cli(["-i", "src", "-o", "docs", "--project-name", "E2E"], cwd=tmp_path)

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"

    docs = tmp_path / "docs"
    for rel in ["index.html", ".nojekyll", "_sidebar.md", "HOME.md", "child/HOME.md", "E2E.md"]:
        assert (docs / rel).exists(), f"Artifact {rel} missing."
    assert not (docs / "README.md").exists()
    assert "built in" in result.stderr


def test_cli_markdown_pages(tmp_path: Path, sample_source: Path) -> None:
    """TC-02: Per-folder pages with navigation."""
    result = run_cli(["-i", "src", "-o", "docs", "--md", "--navigation", "--no-website"], cwd=tmp_path)
    assert result.returncode == 0, result.stderr

    child_page = (tmp_path / "docs" / "child" / "README.md").read_text(encoding="utf-8")
    assert "[Overview (up)](../README.md)" in child_page
    assert "md: processed 3/3 pages" in result.stdout


def test_cli_handles_missing_input(tmp_path: Path) -> None:
    """TC-03: A missing source folder is a configuration error (exit 2)."""
    result = run_cli(["-i", "nowhere", "-o", "docs"], cwd=tmp_path)

    assert result.returncode == 2
    assert "Source folder not found" in result.stderr


def test_cli_dump_config(tmp_path: Path) -> None:
    """TC-04: --dump-config prints the merged configuration and builds nothing."""
    (tmp_path / "treedocs.json").write_text(json.dumps({"project_name": "From File"}), encoding="utf-8")

    result = run_cli(["--dump-config", "--max-workers", "2"], cwd=tmp_path)

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["project_name"] == "From File"
    assert data["max_workers"] == 2
    assert not (tmp_path / "docs").exists()
