from dataclasses import dataclass, field
from typing import Optional

from glyphscope_ast import ParseError, ParseResult
from glyphscope_risk import ProbeSettings, RiskWarning


@dataclass
class Explanation:
    """Human-readable description of a pattern"""

    summary: list[str] = field(default_factory=list)
    components: list[str] = field(default_factory=list)
    constraints: list[str] = field(default_factory=list)


@dataclass
class IntentResult:
    """Best-guess label for what a pattern is meant to match"""

    label: str
    confidence: float
    rationale: list[str] = field(default_factory=list)


@dataclass
class ExampleCase:
    text: str
    reason: str


@dataclass
class FalsePosNegReport:
    """Heuristic examples of likely false positives and false negatives"""

    likely_false_positives: list[ExampleCase] = field(default_factory=list)
    likely_false_negatives: list[ExampleCase] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    attempts: int = 0  # variant tests actually run


@dataclass(frozen=True)
class CaptureGroup:
    index: int
    name: Optional[str]
    value: str  # empty when the group did not participate
    span: Optional[tuple[int, int]]


@dataclass(frozen=True)
class LinePosition:
    """Where a match sits in the sample: 1-based line, offsets of that line, 1-based columns"""

    number: int
    start: int
    end: int
    column_start: int
    column_end: int


@dataclass(frozen=True)
class MatchRecord:
    match_index: int
    span: tuple[int, int]
    text: str
    line: LinePosition
    groups: tuple[CaptureGroup, ...] = ()


@dataclass
class ExecutionResult:
    matches: list[MatchRecord] = field(default_factory=list)
    truncated_sample: bool = False
    capped_matches: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class LineMapRow:
    line_number: int
    match_count: int
    first_match_span: tuple[int, int]


@dataclass(frozen=True)
class ExecGuard:
    """Bounds on a single execution over sample text"""

    max_sample_chars: int = 50_000
    max_matches: int = 500
    require_global_for_many: bool = True


@dataclass(frozen=True)
class EstimatorGuard:
    """Work budget of the false-positive/negative estimator"""

    max_candidates: int = 250
    max_line_len: int = 500
    max_total_work: int = 2000


@dataclass(frozen=True)
class Capabilities:
    """Feature switches for the optional analyses"""

    risk_detection: bool = True
    false_positive_negative: bool = True


@dataclass
class AnalyzerConfig:
    """Everything an analysis run can be tuned with; built by the caller"""

    capabilities: Capabilities = field(default_factory=Capabilities)
    exec_guard: ExecGuard = field(default_factory=ExecGuard)
    estimator_guard: EstimatorGuard = field(default_factory=EstimatorGuard)
    probe: ProbeSettings = field(default_factory=ProbeSettings)
    select: Optional[list[str]] = None
    ignore: Optional[list[str]] = None


@dataclass
class AnalysisResult:
    """Every output of one analysis run; only ``parse`` is set when parsing failed"""

    pattern: str
    flags: str
    parse: ParseResult
    explanation: Optional[Explanation] = None
    intent: Optional[IntentResult] = None
    execution: Optional[ExecutionResult] = None
    line_map: list[LineMapRow] = field(default_factory=list)
    risks: list[RiskWarning] = field(default_factory=list)
    fp_fn: Optional[FalsePosNegReport] = None

    @property
    def ok(self) -> bool:
        return self.parse.ok

    @property
    def error(self) -> Optional[ParseError]:
        return self.parse.error
