import pytest
from glyphscope_analyzer import infer_intent
from glyphscope_analyzer.intent import (
    EMAIL_LIKE,
    GENERAL,
    HEX,
    IPV4,
    LOG_LEVEL,
    NO_SIGNAL_RATIONALE,
    SEMVER,
    TIME_24H,
    URL_LIKE,
    UUID,
    Candidate,
    extract_features,
    score_candidates,
    to_confidence,
)
from glyphscope_ast import parse_pattern


def _intent(pattern: str, flags: str = ""):
    result = parse_pattern(pattern, flags)
    assert result.ok, result.error
    return infer_intent(result.tree, result.flags)


def test_plain_literal_is_general():
    intent = _intent("cat")
    assert intent.label == GENERAL
    assert intent.confidence == pytest.approx(0.35)
    assert intent.rationale == [NO_SIGNAL_RATIONALE]


def test_weak_signal_falls_back_to_general():
    """A best score below the threshold is reported as General, capped at 0.55"""
    intent = _intent("^\\d{3}-\\d{3}-\\d{4}$")
    assert intent.label == GENERAL
    assert intent.confidence == pytest.approx(0.55)


def test_email():
    intent = _intent("^[\\w.+-]+@[\\w-]+\\.[\\w.-]+$")
    assert intent.label == EMAIL_LIKE
    assert intent.confidence == pytest.approx(0.77)
    assert intent.rationale == [
        "Contains '@'",
        "Uses '.' (likely domain separator)",
        "Anchored to whole string",
    ]


def test_uuid_confidence_is_capped():
    hex4 = "[0-9a-fA-F]{4}"
    intent = _intent(f"^[0-9a-fA-F]{{8}}-{hex4}-{hex4}-{hex4}-[0-9a-fA-F]{{12}}$")
    assert intent.label == UUID
    assert intent.confidence == pytest.approx(0.9)


def test_uuid_literal_value():
    assert _intent("123e4567-e89b-12d3-a456-426614174000").label == UUID


@pytest.mark.parametrize(
    "pattern, label, confidence",
    [
        ("^(INFO|WARN|ERROR)$", LOG_LEVEL, 0.8),
        ("^(?:\\d{1,3}\\.){3}\\d{1,3}$", IPV4, 0.8),
        ("^\\d+\\.\\d+\\.\\d+$", SEMVER, 0.77),
        ("^\\d{2}:\\d{2}$", TIME_24H, 0.71),
        ("^[0-9a-fA-F]{64}$", HEX, 0.77),
    ],
)
def test_recognized_intents(pattern, label, confidence):
    intent = _intent(pattern)
    assert intent.label == label
    assert intent.confidence == pytest.approx(confidence)
    assert 1 <= len(intent.rationale) <= 3


def test_url_like():
    intent = _intent("^https?://[\\w.-]+\\.[a-z]+/", "i")
    assert intent.label == URL_LIKE
    assert intent.confidence >= 0.6


def test_confidence_mapping():
    assert to_confidence(0) == pytest.approx(0.35)
    assert to_confidence(50) == pytest.approx(0.65)
    assert to_confidence(100) == pytest.approx(0.9)


def test_confidence_stays_in_range():
    for pattern in ["", "a|b", "(?=x)", "^$", "[0-9a-f]{32}", "a@b\\.c"]:
        intent = _intent(pattern)
        assert 0.0 <= intent.confidence <= 0.9


def test_scores_are_clamped():
    features = extract_features(parse_pattern("(a|b)").tree)
    email = score_candidates(features)[0]
    assert email.label == EMAIL_LIKE
    assert email.score == 0


def test_ties_keep_declaration_order():
    """Equal scores resolve to the label declared first"""
    candidates = score_candidates(extract_features(parse_pattern("cat").tree))
    best = sorted(candidates, key=lambda c: c.score, reverse=True)[0]
    assert best.label == EMAIL_LIKE


def test_slash_and_colon_read_as_url():
    intent = _intent("a/b:c")
    assert intent.label == URL_LIKE
    assert intent.confidence == pytest.approx(0.65)


def test_candidate_add():
    candidate = Candidate("x")
    candidate.add(True, 10, "yes")
    candidate.add(False, 50, "no")
    assert candidate.score == 10
    assert candidate.rationale == ["yes"]


def test_features():
    f = extract_features(parse_pattern("^(?P<y>\\d{4})-(?:x|y)\\b(?=z)$").tree)
    assert f.fully_anchored
    assert f.has_word_boundary
    assert f.has_lookaround
    assert f.has_alternation
    assert f.group_count == 1 and f.named_group_count == 1
    assert f.uses_brace_quantifier
    assert f.exact_counts == {4}
