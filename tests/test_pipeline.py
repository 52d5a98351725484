import pytest
import glyphscope_analyzer.pipeline as pipeline_module
from glyphscope_analyzer import AnalyzerConfig, Capabilities, analyze
from glyphscope_analyzer.intent import EMAIL_LIKE, GENERAL, PHONE_LIKE, extract_features, score_candidates
from glyphscope_ast import parse_pattern
from glyphscope_risk import ProbeSettings, Severity

NO_PROBE = AnalyzerConfig(probe=ProbeSettings(enabled=False))


def test_literal_word():
    result = analyze("cat", "", "the cat sat")
    assert result.ok
    assert 'Literal "cat"' in result.explanation.components
    assert result.intent.label == GENERAL
    assert [m.span for m in result.execution.matches] == [(4, 7)]
    assert [(r.line_number, r.match_count) for r in result.line_map] == [(1, 1)]
    assert result.risks == []
    assert result.fp_fn is not None


def test_anchored_phone_number():
    result = analyze("^\\d{3}-\\d{3}-\\d{4}$", "", "123-456-7890")
    assert [m.text for m in result.execution.matches] == ["123-456-7890"]
    assert "RISK_UNANCHORED_MISMATCH" not in [w.id for w in result.risks]

    features = extract_features(result.parse.tree)
    phone = next(c for c in score_candidates(features) if c.label == PHONE_LIKE)
    assert phone.score > 0


def test_nested_quantifiers_without_sample():
    """The catastrophic sample is never executed here; the risks come from the tree alone"""
    result = analyze("(a+)+$", "", "", NO_PROBE)
    assert result.ok
    severities = {w.id: w.severity for w in result.risks}
    assert severities["RISK_NESTED_QUANTIFIERS"] is Severity.HIGH
    assert severities["RISK_POTENTIAL_BACKTRACKING"] is Severity.HIGH


def test_parse_failure_stops_the_pipeline(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("downstream analysis ran after a parse failure")

    for name in ("infer_intent", "explain", "execute", "detect_risks", "estimate"):
        monkeypatch.setattr(pipeline_module, name, fail)

    result = analyze("([a-z]", "", "abc")
    assert not result.ok
    assert result.error.message
    assert result.explanation is None
    assert result.intent is None
    assert result.execution is None
    assert result.risks == []
    assert result.fp_fn is None


def test_email():
    result = analyze("^[^\\s@]+@[^\\s@]+\\.[^\\s@]+$", "", "a.b+tag@example.com")
    assert [m.text for m in result.execution.matches] == ["a.b+tag@example.com"]
    assert result.intent.label == EMAIL_LIKE
    assert result.intent.confidence >= 0.6


def test_flags_are_normalized():
    result = analyze("a", "yusmig", "", NO_PROBE)
    assert result.flags == "gimsuy"


def test_bad_flags_fail_the_parse():
    result = analyze("a", "gg")
    assert not result.ok
    assert result.flags == ""
    assert "Duplicate flag" in result.error.message


def test_no_sample_skips_execution_and_estimation():
    result = analyze("\\d+", "", "")
    assert result.execution is None
    assert result.line_map == []
    assert result.fp_fn is None
    assert result.intent is not None


def test_capabilities_can_be_switched_off():
    config = AnalyzerConfig(capabilities=Capabilities(risk_detection=False, false_positive_negative=False))
    result = analyze("^abc", "", "abc", config)
    assert result.execution.matches
    assert result.risks == []
    assert result.fp_fn is None


def test_select_and_ignore_reach_the_risk_engine():
    config = AnalyzerConfig(ignore=["RISK_UNANCHORED"], probe=ProbeSettings(enabled=False))
    assert analyze("^abc", "", "", config).risks == []


def test_dotall_warning_needs_sample_newlines():
    ids = [w.id for w in analyze("a.c", "", "abc\nxyz", NO_PROBE).risks]
    assert "RISK_DOTALL_EXPECTED" in ids


@pytest.mark.parametrize(
    "pattern",
    [
        "",
        "a|",
        "(?:)",
        "\\b",
        "[\\s\\S]*",
        "(?P<n>a)(?P=n)",
        "(?i)x",
        "\\N{BULLET}",
        "(a)?(?(1)b|c)",
        "(?x) a # comment",
        "(?<=a)b(?!c)",
        "[^]]",
    ],
)
def test_unusual_patterns_analyze_cleanly(pattern):
    assert parse_pattern(pattern).ok
    result = analyze(pattern, "g", "a\nb ab•", NO_PROBE)
    assert result.ok
    assert result.explanation.components
    assert 0.0 <= result.intent.confidence <= 0.9
    assert result.execution.error is None


@pytest.mark.parametrize("depth", [100, 300, 1000])
def test_deeply_nested_pattern_returns_a_result(depth):
    result = analyze("(?:" * depth + "a" + ")" * depth, "", "aaa", NO_PROBE)
    if result.ok:
        assert result.explanation.components
    else:
        assert result.parse.error.message
