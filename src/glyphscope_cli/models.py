from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


class ParseErrorReport(BaseModel):
    message: str
    index: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None


class RiskIssue(BaseModel):
    rule_id: str
    severity: Severity
    title: str
    message: str
    spans: list[tuple[int, int]] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)


class GroupReport(BaseModel):
    index: int
    name: Optional[str] = None
    value: str
    span: Optional[tuple[int, int]] = None


class MatchReport(BaseModel):
    index: int
    start: int
    end: int
    text: str
    line_number: int
    column: int
    groups: list[GroupReport] = Field(default_factory=list)


class LineMapEntry(BaseModel):
    line_number: int
    match_count: int
    first_match_start: int
    first_match_end: int


class IntentReport(BaseModel):
    label: str
    confidence: float = Field(ge=0.0, le=0.9)
    rationale: list[str] = Field(default_factory=list)


class ExplanationReport(BaseModel):
    summary: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)


class ExampleReport(BaseModel):
    text: str
    reason: str


class FalsePosNegSection(BaseModel):
    likely_false_positives: list[ExampleReport] = Field(default_factory=list)
    likely_false_negatives: list[ExampleReport] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    attempts: int = 0


class AnalysisReport(BaseModel):
    pattern: str
    flags: str
    ok: bool
    error: Optional[ParseErrorReport] = None
    explanation: Optional[ExplanationReport] = None
    intent: Optional[IntentReport] = None
    matches: list[MatchReport] = Field(default_factory=list)
    line_map: list[LineMapEntry] = Field(default_factory=list)
    risks: list[RiskIssue] = Field(default_factory=list)
    fp_fn: Optional[FalsePosNegSection] = None
