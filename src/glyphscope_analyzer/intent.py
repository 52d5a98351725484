"""Conservative guess at what a pattern is meant to match.

Signals come from one walk over the tree plus a few checks against the raw
pattern text. The raw-text shape hints (UUID chunking, semver triples, IPv4
dots, log-level words) are textual heuristics, not proofs of meaning.
"""

import logging
import re
from dataclasses import dataclass, field

from glyphscope_ast import (
    Assertion,
    AssertionKind,
    ASTWalker,
    Conditional,
    Flags,
    Group,
    Pattern,
    PatternShapes,
    Quantifier,
    coerce_flags,
)

from .models import IntentResult

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.6
FALLBACK_CONFIDENCE_CAP = 0.55
MAX_CONFIDENCE = 0.9
MAX_RATIONALE = 3

GENERAL = "General pattern"
EMAIL_LIKE = "Email-like identifier"
URL_LIKE = "URL-like string"
UUID = "UUID / GUID"
IPV4 = "IPv4 address"
IPV6 = "IPv6 address"
ISO_DATE = "ISO 8601 date"
TIME_24H = "24-hour time"
TIMESTAMP = "Timestamp (date + time)"
SEMVER = "Semantic version (SemVer-like)"
HEX = "Hex string"
ALPHANUM_ID = "Alphanumeric identifier"
LOG_LEVEL = "Log level token (INFO/WARN/ERROR...)"
FILE_PATH = "File path (basic)"
PHONE_LIKE = "Phone-like number (basic)"

NO_SIGNAL_RATIONALE = "No strong intent signals were detected."
FILLER_RATIONALE = "Matched common structural signals for this intent."

# Shape hints checked against the whole pattern text. Each shape is recognized
# either as a literal value written into the pattern or as its usual spelling.
_UUID_SHAPES = (
    re.compile(
        r"[0-9a-fA-F]{8}(-|\\-)[0-9a-fA-F]{4}(-|\\-)[0-9a-fA-F]{4}(-|\\-)[0-9a-fA-F]{4}(-|\\-)[0-9a-fA-F]{12}"
    ),
    re.compile(r"\{8\}\\?-.*\{4\}\\?-.*\{4\}\\?-.*\{4\}\\?-.*\{12\}"),
)
_SEMVER_SHAPES = (
    re.compile(r"\d+\\?\.\d+\\?\.\d+"),
    re.compile(r"(?:\\d|\[0-9\])[+*]\\\.(?:\\d|\[0-9\])[+*]\\\.(?:\\d|\[0-9\])[+*]"),
)
_IPV4_SHAPE = re.compile(r"\d\{1,3\}.*\\\..*\\\..*\\\.")
_IPV4_OCTET = re.compile(r"(?:\\d|\[0-9\])\{1,3\}")
_HEX_CLASS = re.compile(r"\[0-9a-fA-F\]")
_LOG_LEVEL_WORDS = re.compile(r"\b(INFO|WARN|WARNING|ERROR|DEBUG|TRACE|FATAL)\b")
_CODE_POINT_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|N\{)")

_CONTAINERS = (Pattern, Group, Assertion, Conditional)


@dataclass
class IntentFeatures:
    """Signals gathered from one walk of the tree"""

    has_start_anchor: bool = False
    has_end_anchor: bool = False
    has_word_boundary: bool = False
    has_alternation: bool = False
    has_lookaround: bool = False
    group_count: int = 0
    named_group_count: int = 0

    uses_at_sign: bool = False
    uses_colon: bool = False
    uses_slash: bool = False
    uses_dot_literal: bool = False
    uses_hyphen: bool = False
    uses_underscore: bool = False
    uses_plus: bool = False
    uses_question: bool = False

    uses_digit_class: bool = False
    uses_hex_class: bool = False
    uses_brace_quantifier: bool = False
    exact_counts: set[int] = field(default_factory=set)

    uuid_shape: bool = False
    semver_shape: bool = False
    ipv4_shape: bool = False
    ipv6_shape: bool = False
    code_point_escapes: bool = False
    log_level_words: bool = False

    @property
    def fully_anchored(self) -> bool:
        return self.has_start_anchor and self.has_end_anchor


@dataclass
class Candidate:
    label: str
    score: int = 0
    rationale: list[str] = field(default_factory=list)

    def add(self, condition: bool, points: int, reason: str):
        if condition:
            self.score += points
            self.rationale.append(reason)


def extract_features(tree: Pattern) -> IntentFeatures:
    f = IntentFeatures()

    for node in ASTWalker.iter_nodes(tree):
        if PatternShapes.is_anchor(node, AssertionKind.START):
            f.has_start_anchor = True
        elif PatternShapes.is_anchor(node, AssertionKind.END):
            f.has_end_anchor = True
        elif PatternShapes.is_anchor(node, AssertionKind.WORD_BOUNDARY):
            f.has_word_boundary = True
        elif PatternShapes.is_lookaround(node):
            f.has_lookaround = True

        if isinstance(node, _CONTAINERS) and len(node.alternatives) > 1:
            f.has_alternation = True

        if isinstance(node, Group) and node.capturing:
            f.group_count += 1
            if node.name:
                f.named_group_count += 1

        raw = node.raw
        f.uses_at_sign |= "@" in raw
        f.uses_colon |= ":" in raw
        f.uses_slash |= "/" in raw
        f.uses_dot_literal |= "\\." in raw
        f.uses_hyphen |= "-" in raw
        f.uses_underscore |= "_" in raw
        f.uses_plus |= "+" in raw
        f.uses_question |= "?" in raw
        f.uses_digit_class |= "\\d" in raw or "[0-9]" in raw
        f.uses_hex_class |= _HEX_CLASS.search(raw) is not None

        if isinstance(node, Quantifier):
            if node.raw[len(node.element.raw) :].lstrip().startswith("{"):
                f.uses_brace_quantifier = True
            if node.max is not None and node.min == node.max:
                f.exact_counts.add(node.min)

    raw = tree.raw
    f.uuid_shape = any(shape.search(raw) for shape in _UUID_SHAPES)
    f.semver_shape = any(shape.search(raw) for shape in _SEMVER_SHAPES)
    f.ipv4_shape = "\\." in raw and (
        _IPV4_SHAPE.search(raw) is not None
        or (_IPV4_OCTET.search(raw) is not None and (raw.count("\\.") >= 3 or "\\.){3}" in raw))
    )
    f.ipv6_shape = raw.count(":") >= 2
    f.code_point_escapes = _CODE_POINT_ESCAPE.search(raw) is not None
    f.log_level_words = _LOG_LEVEL_WORDS.search(raw) is not None
    return f


def score_candidates(f: IntentFeatures, flags: "Flags | str | None" = "") -> list[Candidate]:
    """Score every named label; the list order is the tie-break order."""
    flags = coerce_flags(flags)
    counts = f.exact_counts

    email = Candidate(EMAIL_LIKE)
    email.add(f.uses_at_sign, 45, "Contains '@'")
    email.add(f.uses_dot_literal, 15, "Uses '.' (likely domain separator)")
    email.add(f.fully_anchored, 10, "Anchored to whole string")
    email.add(f.has_word_boundary, 5, "Uses word boundary")
    email.add(f.has_alternation, -5, "Alternation reduces certainty")

    url = Candidate(URL_LIKE)
    url.add(f.uses_slash, 25, "Contains '/'")
    url.add(f.uses_colon, 25, "Contains ':' (likely scheme/port)")
    url.add(f.uses_dot_literal, 10, "Uses '.' (likely host/domain)")
    url.add(f.has_start_anchor, 5, "Has start anchor")
    url.add(flags.ignore_case, 3, "Case-insensitive flag often used for URLs")

    uuid = Candidate(UUID)
    uuid.add(f.uuid_shape, 70, "Matches UUID hyphen chunk structure")
    uuid.add(f.uses_hex_class, 20, "Uses hex character class")
    uuid.add(8 in counts and 12 in counts, 10, "Has exact chunk lengths common to UUIDs")

    ipv4 = Candidate(IPV4)
    ipv4.add(f.ipv4_shape, 60, "Has repeated dot-separated numeric structure")
    ipv4.add(f.uses_digit_class, 10, "Uses digit class")
    ipv4.add(f.uses_brace_quantifier, 5, "Uses numeric length quantifiers")

    ipv6 = Candidate(IPV6)
    ipv6.add(f.ipv6_shape, 55, "Contains multiple ':' separators")
    ipv6.add(f.uses_hex_class, 15, "Uses hex character class")

    iso_date = Candidate(ISO_DATE)
    iso_date.add(f.uses_digit_class, 15, "Uses digit class")
    iso_date.add(f.uses_hyphen, 20, "Uses '-' separators")
    iso_date.add(4 in counts and 2 in counts, 25, "Uses 4 and 2 digit chunk lengths")
    iso_date.add(f.fully_anchored, 5, "Anchored to whole string")

    time_24h = Candidate(TIME_24H)
    time_24h.add(f.uses_colon, 30, "Uses ':' separators")
    time_24h.add(2 in counts, 20, "Uses 2-digit chunks")
    time_24h.add(f.uses_digit_class, 10, "Uses digit class")

    timestamp = Candidate(TIMESTAMP)
    timestamp.add(f.uses_hyphen, 15, "Has '-' separators (date-like)")
    timestamp.add(f.uses_colon, 15, "Has ':' separators (time-like)")
    timestamp.add(4 in counts and 2 in counts, 10, "Has common date/time chunk lengths")

    semver = Candidate(SEMVER)
    semver.add(f.semver_shape, 65, "Contains digit-dot-digit-dot-digit structure")
    semver.add(f.fully_anchored, 5, "Anchored to whole string")

    hex_string = Candidate(HEX)
    hex_string.add(f.uses_hex_class, 55, "Uses hex character class")
    hex_string.add(f.fully_anchored, 5, "Anchored to whole string")
    hex_string.add(bool(counts & {32, 40, 64}), 10, "Uses common hex digest lengths (32/40/64)")

    alphanum = Candidate(ALPHANUM_ID)
    alphanum.add(f.fully_anchored, 15, "Anchored to whole string")
    alphanum.add(f.uses_underscore, 5, "Allows '_'")
    alphanum.add(f.uses_brace_quantifier, 10, "Has explicit length bounds")
    alphanum.add(f.has_word_boundary, 5, "Uses word boundary")

    log_level = Candidate(LOG_LEVEL)
    log_level.add(f.has_alternation, 15, "Uses alternation (token choices)")
    log_level.add(f.log_level_words, 60, "Contains common log level words")

    phone = Candidate(PHONE_LIKE)
    phone.add(f.uses_plus, 10, "Allows '+' prefix")
    phone.add(f.uses_digit_class, 15, "Uses digit class")
    phone.add(f.uses_hyphen, 10, "Allows '-' separators")

    file_path = Candidate(FILE_PATH)
    file_path.add(f.uses_slash, 25, "Contains '/' separators")
    file_path.add(f.uses_dot_literal, 5, "Uses '.' (extension-like)")

    candidates = [
        email,
        url,
        uuid,
        ipv4,
        ipv6,
        iso_date,
        time_24h,
        timestamp,
        semver,
        hex_string,
        alphanum,
        log_level,
        phone,
        file_path,
    ]
    for c in candidates:
        c.score = max(0, min(100, c.score))
    return candidates


def to_confidence(score: int) -> float:
    """Map a 0-100 score onto [0.35, 0.9]."""
    return max(0.0, min(0.35 + score / 100 * 0.6, MAX_CONFIDENCE))


def infer_intent(tree: Pattern, flags: "Flags | str | None" = "") -> IntentResult:
    candidates = score_candidates(extract_features(tree), flags)
    # sorted() is stable, so equal scores keep declaration order
    best = sorted(candidates, key=lambda c: c.score, reverse=True)[0]
    confidence = to_confidence(best.score)
    logger.debug("Best intent %r scored %d (confidence %.2f)", best.label, best.score, confidence)

    if confidence < CONFIDENCE_THRESHOLD:
        return IntentResult(
            label=GENERAL,
            confidence=min(FALLBACK_CONFIDENCE_CAP, confidence),
            rationale=[NO_SIGNAL_RATIONALE],
        )

    rationale = best.rationale[:MAX_RATIONALE] or [FILLER_RATIONALE]
    return IntentResult(label=best.label, confidence=confidence, rationale=rationale)
