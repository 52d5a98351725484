"""
GlyphScope Risk - heuristic warnings for regular expression patterns
"""

from .engine import RiskEngine, detect_risks
from .models import (
    DetectionOptions,
    Evidence,
    ProbeSettings,
    RiskContext,
    RiskWarning,
    Severity,
    TextSpan,
)
from .probe import run_timing_probe
from .registry import RuleRegistry, registry
from .rules.base import BaseRule

__all__ = [
    "BaseRule",
    "DetectionOptions",
    "Evidence",
    "ProbeSettings",
    "RiskContext",
    "RiskEngine",
    "RiskWarning",
    "RuleRegistry",
    "Severity",
    "TextSpan",
    "detect_risks",
    "registry",
    "run_timing_probe",
]
