"""Write the build artifacts (screens.json, graph.mmd, coverage.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from screenbook.analysis.coverage import CoverageData
from screenbook.output.mermaid import generate_mermaid_graph
from screenbook.screens.loader import dump_catalog
from screenbook.screens.types import Screen

SCREENS_FILE = "screens.json"
GRAPH_FILE = "graph.mmd"
COVERAGE_FILE = "coverage.json"


@dataclass(frozen=True)
class BuildArtifacts:
    screens: Path
    graph: Path
    coverage: Path


def write_artifacts(out_dir: Path, screens: list[Screen], coverage: CoverageData) -> BuildArtifacts:
    """Write all artifacts into ``out_dir`` (created if missing)."""
    out_dir.mkdir(parents=True, exist_ok=True)
    artifacts = BuildArtifacts(
        screens=out_dir / SCREENS_FILE,
        graph=out_dir / GRAPH_FILE,
        coverage=out_dir / COVERAGE_FILE,
    )
    dump_catalog(screens, artifacts.screens)
    artifacts.graph.write_text(generate_mermaid_graph(screens) + "\n")
    artifacts.coverage.write_text(json.dumps(coverage.to_dict(), indent=2) + "\n")
    return artifacts
