"""Graph analysis over a screen snapshot.

All entry points are pure functions over a read-only list of screens (or a
``ScreenRegistry``). Defects in the navigation graph are reported in the
returned result objects; callers decide what is fatal.
"""

from screenbook.analysis.coverage import CoverageData, calculate_coverage
from screenbook.analysis.cycles import Cycle, CycleResult, detect_cycles
from screenbook.analysis.impact import ImpactResult, TransitiveDependency, analyze_impact
from screenbook.analysis.references import (
    ValidationError,
    ValidationResult,
    find_orphan_screens,
    validate_references,
)
from screenbook.analysis.suggestions import find_best_match, find_similar

__all__ = [
    "CoverageData",
    "Cycle",
    "CycleResult",
    "ImpactResult",
    "TransitiveDependency",
    "ValidationError",
    "ValidationResult",
    "analyze_impact",
    "calculate_coverage",
    "detect_cycles",
    "find_best_match",
    "find_orphan_screens",
    "find_similar",
    "validate_references",
]
