from glyphscope_analyzer import AnalysisResult, FalsePosNegReport, MatchRecord
from glyphscope_risk import RiskWarning

from .models import (
    AnalysisReport,
    ExampleReport,
    ExplanationReport,
    FalsePosNegSection,
    GroupReport,
    IntentReport,
    LineMapEntry,
    MatchReport,
    ParseErrorReport,
    RiskIssue,
)


def risk_warning_to_issue(warning: RiskWarning) -> RiskIssue:
    """Convert an internal dataclass warning to an external Pydantic issue"""
    evidence = warning.evidence
    return RiskIssue(
        rule_id=warning.id,
        severity=warning.severity.value.upper(),  # dataclass uses 'high', Pydantic uses 'HIGH'
        title=warning.title,
        message=warning.message,
        spans=[(s.start, s.end) for s in evidence.pattern_spans] if evidence else [],
        examples=list(evidence.examples) if evidence else [],
    )


def match_record_to_report(match: MatchRecord) -> MatchReport:
    return MatchReport(
        index=match.match_index,
        start=match.span[0],
        end=match.span[1],
        text=match.text,
        line_number=match.line.number,
        column=match.line.column_start,
        groups=[GroupReport(index=g.index, name=g.name, value=g.value, span=g.span) for g in match.groups],
    )


def fp_fn_to_section(report: FalsePosNegReport) -> FalsePosNegSection:
    return FalsePosNegSection(
        likely_false_positives=[ExampleReport(text=c.text, reason=c.reason) for c in report.likely_false_positives],
        likely_false_negatives=[ExampleReport(text=c.text, reason=c.reason) for c in report.likely_false_negatives],
        notes=list(report.notes),
        attempts=report.attempts,
    )


def analysis_to_report(result: AnalysisResult) -> AnalysisReport:
    report = AnalysisReport(pattern=result.pattern, flags=result.flags, ok=result.ok)
    if not result.ok:
        error = result.error
        report.error = ParseErrorReport(
            message=error.message, index=error.index, line=error.line, column=error.column
        )
        return report

    explanation = result.explanation
    report.explanation = ExplanationReport(
        summary=explanation.summary,
        components=explanation.components,
        constraints=explanation.constraints,
    )
    report.intent = IntentReport(
        label=result.intent.label,
        confidence=result.intent.confidence,
        rationale=result.intent.rationale,
    )
    if result.execution is not None:
        report.matches = [match_record_to_report(m) for m in result.execution.matches]
    report.line_map = [
        LineMapEntry(
            line_number=row.line_number,
            match_count=row.match_count,
            first_match_start=row.first_match_span[0],
            first_match_end=row.first_match_span[1],
        )
        for row in result.line_map
    ]
    report.risks = [risk_warning_to_issue(w) for w in result.risks]
    if result.fp_fn is not None:
        report.fp_fn = fp_fn_to_section(result.fp_fn)
    return report
