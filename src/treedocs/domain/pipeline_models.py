from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result structures exchanged between the build engine and the
interface layer.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

# Progress callback: (stage name, completed, total)
ProgressCallback = Callable[[str, int, int], None]
# Per-stage counter callback: (completed, total)
CounterCallback = Callable[[int, int], None]

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class StageReport:
    """
    Outcome of one build stage.

    Attributes:
        name: Stage identifier (e.g. "images", "site").
        outputs: Paths written by the stage, in no guaranteed order.
        elapsed_seconds: Wall time spent in the stage.
    """
    name: str
    outputs: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


@dataclass(frozen=True)
class BuildResult:
    """
    Summary of a complete build.

    Attributes:
        root_folder: Source directory that was scanned.
        dist_folder: Output directory that was produced.
        folder_count: Number of tree nodes after exclusion filtering.
        diagram_count: Number of diagram sources across all nodes.
        stages: Reports for the stages that ran, in execution order.
        elapsed_seconds: Total build time.
    """
    root_folder: str
    dist_folder: str
    folder_count: int
    diagram_count: int
    stages: List[StageReport] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def stage(self, name: str) -> Optional[StageReport]:
        for s in self.stages:
            if s.name == name:
                return s
        return None
