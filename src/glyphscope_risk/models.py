from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from glyphscope_ast import Flags, Pattern


class Severity(str, Enum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.INFO: 0, Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


@dataclass(frozen=True)
class TextSpan:
    start: int
    end: int


@dataclass
class Evidence:
    """Where a warning comes from: pattern spans and/or example strings"""

    pattern_spans: list[TextSpan] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)


@dataclass
class RiskWarning:
    """Internal representation of a risk warning"""

    id: str
    severity: Severity
    title: str
    message: str
    evidence: Optional[Evidence] = None


@dataclass(frozen=True)
class ProbeSettings:
    """Bounds of the optional backtracking timing probe"""

    enabled: bool = True
    threshold_ms: float = 40.0
    timeout_ms: int = 1000


@dataclass(frozen=True)
class DetectionOptions:
    """Optional inputs to risk detection; ``pattern`` enables the timing probe."""

    pattern: Optional[str] = None
    probe: ProbeSettings = field(default_factory=ProbeSettings)


@dataclass
class RiskContext:
    """State handed to every rule during one detection run"""

    tree: Pattern
    flags: Flags
    sample_text: Optional[str] = None
    options: DetectionOptions = field(default_factory=DetectionOptions)
    fired: set[str] = field(default_factory=set)

    @property
    def extraction_mode(self) -> bool:
        return self.flags.global_
