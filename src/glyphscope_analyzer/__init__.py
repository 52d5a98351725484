"""
GlyphScope Analyzer - explanations, intent, execution and estimation

This package provides:
- Human-readable explanations of a parsed pattern
- A conservative intent label with confidence and rationale
- Guarded execution over sample text with a per-line match map
- Heuristic false-positive / false-negative examples
- ``analyze``, which wires all of the above together
"""

from .estimator import FP_FN_LIMIT, estimate
from .executor import build_line_map, execute
from .explainer import explain
from .intent import infer_intent
from .models import (
    AnalysisResult,
    AnalyzerConfig,
    Capabilities,
    CaptureGroup,
    EstimatorGuard,
    ExampleCase,
    ExecGuard,
    ExecutionResult,
    Explanation,
    FalsePosNegReport,
    IntentResult,
    LineMapRow,
    LinePosition,
    MatchRecord,
)
from .pipeline import analyze

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "Capabilities",
    "CaptureGroup",
    "EstimatorGuard",
    "ExampleCase",
    "ExecGuard",
    "ExecutionResult",
    "Explanation",
    "FP_FN_LIMIT",
    "FalsePosNegReport",
    "IntentResult",
    "LineMapRow",
    "LinePosition",
    "MatchRecord",
    "analyze",
    "build_line_map",
    "estimate",
    "execute",
    "explain",
    "infer_intent",
]
