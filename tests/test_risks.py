import re

import pytest
from glyphscope_ast import parse_pattern
from glyphscope_risk import (
    DetectionOptions,
    ProbeSettings,
    RiskEngine,
    RuleRegistry,
    Severity,
    TextSpan,
    detect_risks,
    registry,
)

NO_PROBE = DetectionOptions(probe=ProbeSettings(enabled=False))


def _risks(pattern: str, flags: str = "", sample=None, **kwargs):
    result = parse_pattern(pattern, flags)
    assert result.ok, result.error
    return detect_risks(result.tree, result.flags, sample, **kwargs)


def _ids(pattern: str, flags: str = "", sample=None, **kwargs) -> list[str]:
    return [w.id for w in _risks(pattern, flags, sample, **kwargs)]


def test_registry_order():
    assert [r.rule_id for r in registry.get_all_rules()] == [
        "RISK_NESTED_QUANTIFIERS",
        "RISK_POTENTIAL_BACKTRACKING",
        "RISK_AMBIGUOUS_WILDCARD",
        "RISK_UNANCHORED_MISMATCH",
        "RISK_DOTALL_EXPECTED",
        "RISK_MULTILINE_ANCHOR_CONFUSION",
        "RISK_EMPTY_ALTERNATION",
        "RISK_OVERBROAD_CLASS",
        "RISK_REDUNDANT_QUANTIFIERS",
        "RISK_LOOKAROUND_COMPLEXITY",
        "RISK_STICKY_WITH_GLOBAL",
        "RISK_UNICODE_FLAG_MISMATCH",
    ]


def test_registry_lookup_and_filtering():
    rules = RuleRegistry()
    assert rules.get_rule("RISK_EMPTY_ALTERNATION").name == "empty-alternation"
    assert rules.get_rule("overbroad-class").rule_id == "RISK_OVERBROAD_CLASS"
    assert rules.get_rule("RISK_UNKNOWN") is None

    selected = rules.get_enabled_rules(select=["RISK_NESTED", "redundant"])
    assert [r.rule_id for r in selected] == ["RISK_NESTED_QUANTIFIERS", "RISK_REDUNDANT_QUANTIFIERS"]

    remaining = rules.get_enabled_rules(ignore=["RISK_NESTED"])
    assert len(remaining) == 11

    rules.get_all_rules().clear()
    assert len(rules.get_all_rules()) == 12


def test_nested_quantifiers_escalate_backtracking():
    warnings = _risks("(a+)+$")
    assert [w.id for w in warnings] == [
        "RISK_NESTED_QUANTIFIERS",
        "RISK_POTENTIAL_BACKTRACKING",
        "RISK_UNANCHORED_MISMATCH",
    ]
    nested, backtracking, _ = warnings
    assert nested.severity is Severity.HIGH
    assert backtracking.severity is Severity.HIGH
    assert nested.evidence.pattern_spans == [TextSpan(0, 5)]


def test_backtracking_is_medium_without_nested_rule():
    warnings = _risks("(a+)+$", ignore=["RISK_NESTED"])
    assert warnings[0].id == "RISK_POTENTIAL_BACKTRACKING"
    assert warnings[0].severity is Severity.MEDIUM


def test_backtracking_around_wildcard():
    ids = _ids("(.*a)+")
    assert "RISK_POTENTIAL_BACKTRACKING" in ids
    assert "RISK_AMBIGUOUS_WILDCARD" in ids


def test_possessive_and_lazy_repetition_are_not_backtracking_risks():
    assert "RISK_POTENTIAL_BACKTRACKING" not in _ids("(a+)++")
    assert "RISK_POTENTIAL_BACKTRACKING" not in _ids("(a+)+?")


@pytest.mark.parametrize(
    "pattern, flags, sample, rule_id, severity",
    [
        (".*foo", "", None, "RISK_AMBIGUOUS_WILDCARD", Severity.MEDIUM),
        ("^abc", "", None, "RISK_UNANCHORED_MISMATCH", Severity.LOW),
        ("a.b", "", "x\ny", "RISK_DOTALL_EXPECTED", Severity.LOW),
        ("^a$", "m", None, "RISK_MULTILINE_ANCHOR_CONFUSION", Severity.INFO),
        ("a|", "", None, "RISK_EMPTY_ALTERNATION", Severity.MEDIUM),
        ("x(a|)", "", None, "RISK_EMPTY_ALTERNATION", Severity.MEDIUM),
        ("", "", None, "RISK_EMPTY_ALTERNATION", Severity.MEDIUM),
        ("(?:)", "", None, "RISK_EMPTY_ALTERNATION", Severity.MEDIUM),
        ("()", "", None, "RISK_EMPTY_ALTERNATION", Severity.MEDIUM),
        ("a(?:)b", "", None, "RISK_EMPTY_ALTERNATION", Severity.MEDIUM),
        ("[\\s\\S]", "", None, "RISK_OVERBROAD_CLASS", Severity.INFO),
        ("a{0,}", "", None, "RISK_REDUNDANT_QUANTIFIERS", Severity.INFO),
        ("a{1,}?", "", None, "RISK_REDUNDANT_QUANTIFIERS", Severity.INFO),
        ("(?=a)b", "", None, "RISK_LOOKAROUND_COMPLEXITY", Severity.INFO),
        ("a", "gy", None, "RISK_STICKY_WITH_GLOBAL", Severity.INFO),
        ("\\u00e9", "", None, "RISK_UNICODE_FLAG_MISMATCH", Severity.LOW),
    ],
)
def test_rule_fires(pattern, flags, sample, rule_id, severity):
    warnings = {w.id: w for w in _risks(pattern, flags, sample)}
    assert rule_id in warnings
    assert warnings[rule_id].severity is severity


@pytest.mark.parametrize(
    "pattern, flags, sample, rule_id",
    [
        (".*?foo", "", None, "RISK_AMBIGUOUS_WILDCARD"),
        ("^abc", "g", None, "RISK_UNANCHORED_MISMATCH"),
        ("^abc$", "", None, "RISK_UNANCHORED_MISMATCH"),
        ("a.b", "s", "x\ny", "RISK_DOTALL_EXPECTED"),
        ("a.b", "", "xy", "RISK_DOTALL_EXPECTED"),
        ("ab", "", "x\ny", "RISK_DOTALL_EXPECTED"),
        ("\\Aa\\Z", "m", None, "RISK_MULTILINE_ANCHOR_CONFUSION"),
        ("^a$", "", None, "RISK_MULTILINE_ANCHOR_CONFUSION"),
        ("a|b", "", None, "RISK_EMPTY_ALTERNATION"),
        ("(?:a)", "", None, "RISK_EMPTY_ALTERNATION"),
        ("[\\sa]", "", None, "RISK_OVERBROAD_CLASS"),
        ("a{2,}", "", None, "RISK_REDUNDANT_QUANTIFIERS"),
        ("a", "y", None, "RISK_STICKY_WITH_GLOBAL"),
        ("\\u00e9", "u", None, "RISK_UNICODE_FLAG_MISMATCH"),
        ("\\x41", "", None, "RISK_UNICODE_FLAG_MISMATCH"),
    ],
)
def test_rule_stays_quiet(pattern, flags, sample, rule_id):
    assert rule_id not in _ids(pattern, flags, sample)


def test_each_rule_reports_once():
    warnings = _risks("a{0,}b{1,}c{0,1}")
    assert [w.id for w in warnings] == ["RISK_REDUNDANT_QUANTIFIERS"]
    assert len(warnings[0].evidence.pattern_spans) == 3


def test_warnings_follow_registry_order():
    order = [r.rule_id for r in registry.get_all_rules()]
    ids = _ids("(a+)+.*[\\s\\S](?=x)|", "gmy", "one\ntwo")
    assert ids == sorted(ids, key=order.index)
    assert len(ids) == len(set(ids))


@pytest.mark.parametrize("rule", registry.get_all_rules(), ids=lambda r: r.rule_id)
def test_messages_are_hedged(rule):
    text = f"{rule.title} {rule.message}".lower()
    assert not re.search(r"\b(will|always|guarantee|guaranteed)\b", text)


def test_select_and_ignore():
    assert _ids("(a+)+$", select=["RISK_UNANCHORED"]) == ["RISK_UNANCHORED_MISMATCH"]
    assert "RISK_UNANCHORED_MISMATCH" not in _ids("(a+)+$", ignore=["unanchored"])


def test_engine_accepts_flag_string():
    tree = parse_pattern("a").tree
    warnings = RiskEngine().detect(tree, "gy")
    assert [w.id for w in warnings] == ["RISK_STICKY_WITH_GLOBAL"]
    assert warnings[0].evidence is None


def test_probe_skipped_without_pattern_text():
    warnings = _risks("(a+)+$", context=NO_PROBE)
    backtracking = warnings[1]
    assert backtracking.evidence.examples == []


def test_empty_group_points_at_its_empty_branch():
    (warning,) = [w for w in _risks("a(?:)b") if w.id == "RISK_EMPTY_ALTERNATION"]
    (span,) = warning.evidence.pattern_spans
    assert span.start == span.end
