"""Build artifact rendering."""

from screenbook.output.mermaid import generate_mermaid_graph
from screenbook.output.writer import BuildArtifacts, write_artifacts

__all__ = ["BuildArtifacts", "generate_mermaid_graph", "write_artifacts"]
