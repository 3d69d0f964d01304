"""Divergence detector: classifies problem/solution space mapping elements.

Public API:
  - classify: single-entry classification into a Finding or None
  - DivergenceDetector / detect_divergences: driving loop over a mapping source
  - Finding, UnusedVariableFinding, UndefinedVariableFinding: finding kinds
  - describe, HEADER: report rendering helpers
"""

from pssdiv.divergences.detector import DivergenceDetector, classify, detect_divergences
from pssdiv.divergences.findings import (
    FINDING_TYPES,
    HEADER,
    Finding,
    UndefinedVariableFinding,
    UnusedVariableFinding,
    describe,
)

__all__ = [
    "DivergenceDetector",
    "FINDING_TYPES",
    "Finding",
    "HEADER",
    "UndefinedVariableFinding",
    "UnusedVariableFinding",
    "classify",
    "describe",
    "detect_divergences",
]
