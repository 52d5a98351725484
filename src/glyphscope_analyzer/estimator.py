"""Heuristic false-positive / false-negative examples.

Known matches are perturbed in fixed ways and re-tested against the pattern:
a variant that should still match but does not hints at a pattern that is too
strict; an obviously wrong variant that still matches hints at one that is too
broad. All work is bounded by ``EstimatorGuard``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from glyphscope_ast import (
    AssertionKind,
    ASTWalker,
    Flags,
    GlyphScopeError,
    Pattern,
    PatternShapes,
    coerce_flags,
    compile_pattern,
    pattern_matches,
)

from .models import EstimatorGuard, ExampleCase, FalsePosNegReport, MatchRecord

logger = logging.getLogger(__name__)

FP_FN_LIMIT = 6
MAX_SEEDS = 40
MAX_SEED_CHARS = 300
MAX_SAMPLE_LINES = 5000
MIN_GROUP_SEED_CHARS = 2
SHOULD_MATCH_VARIANTS = 8
SHOULD_NOT_MATCH_VARIANTS = 10

NOTE_NO_COMPILE = "Cannot estimate false positives/negatives because the regex did not compile."
NOTE_NO_MATCHES = (
    "No matches were found in the sample text, so the tool cannot infer likely false positives/negatives."
)
NOTE_TIP = "Tip: paste a sample that includes at least one expected match."
NOTE_HEURISTIC = "These are heuristic examples based on your sample text. Treat them as likely cases, not proof."
NOTE_CAPPED = "Estimation was capped to avoid slowdowns."

REASON_TOO_STRICT = "Small variation of a known match did not match (may be too strict)."
REASON_TOO_BROAD = "A suspicious-looking variation still matched (may be too broad)."

_COMPILE_ERRORS = (re.error, GlyphScopeError, ValueError, OverflowError, RecursionError)
_LINE_BREAK = re.compile(r"\r?\n")
_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"[0-9]")


@dataclass
class PerturbationFeatures:
    uses_digits: bool = False
    uses_word_chars: bool = False
    allows_whitespace: bool = False
    has_dot: bool = False
    has_hyphen: bool = False
    has_colon: bool = False
    anchored: bool = False


class _WorkBudget:
    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit


def extract_perturbation_features(tree: Pattern) -> PerturbationFeatures:
    f = PerturbationFeatures()
    for node in ASTWalker.iter_nodes(tree):
        raw = node.raw
        f.uses_digits |= "\\d" in raw or "[0-9]" in raw
        f.uses_word_chars |= "\\w" in raw
        f.allows_whitespace |= "\\s" in raw or "[ \\t]" in raw
        f.has_dot |= "\\." in raw
        f.has_hyphen |= "-" in raw
        f.has_colon |= ":" in raw
    has_start, has_end = PatternShapes.anchor_presence(tree)
    f.anchored = has_start and has_end
    return f


def _unique_limited(values: Iterable[str], limit: int) -> list[str]:
    out: list[str] = []
    for value in values:
        if value and value not in out:
            out.append(value)
            if len(out) >= limit:
                break
    return out


def should_still_match_variants(seed: str, f: PerturbationFeatures) -> list[str]:
    variants = []
    if f.allows_whitespace:
        variants += [" " + seed, seed + " ", seed.replace(" ", "  ")]
    if _LETTER.search(seed):
        variants += [seed.upper(), seed.lower(), seed.swapcase()]
    if f.has_hyphen:
        variants.append(seed.replace("-", "_"))
    if f.has_dot:
        variants.append(seed.replace(".", "-"))
    if f.has_colon:
        variants.append(seed.replace(":", "-"))
    if len(seed) >= 3:
        variants += [seed[:-1], seed + seed[-1]]
    return _unique_limited(variants, SHOULD_MATCH_VARIANTS)


def should_not_match_variants(seed: str, f: PerturbationFeatures) -> list[str]:
    variants = [seed + " ", seed + "\t", seed + "✅"]
    if f.uses_digits:
        variants += [_DIGIT.sub("A", seed, count=1), seed + "A"]
    if f.uses_word_chars:
        variants += [seed + "!", _LETTER.sub("!", seed, count=1)]
    if f.has_dot:
        variants.append(seed.replace(".", ".."))
    if f.has_hyphen:
        variants.append(seed.replace("-", "--"))
    if f.has_colon:
        variants.append(seed.replace(":", "::"))
    if not f.anchored:
        variants += ["xxx" + seed + "yyy", "{" + seed + "}"]
    return _unique_limited(variants, SHOULD_NOT_MATCH_VARIANTS)


def collect_seeds(matches: list[MatchRecord], guard: EstimatorGuard) -> tuple[list[str], bool]:
    """Return de-duplicated seeds and whether a cap cut them short."""
    seed_chars = min(MAX_SEED_CHARS, guard.max_line_len)
    capped = False
    raw_seeds: list[str] = []

    def push(text: str):
        nonlocal capped
        if not text:
            return
        if len(text) > guard.max_line_len:
            capped = True
        raw_seeds.append(text[:seed_chars])

    for match in matches:
        if len(raw_seeds) >= guard.max_candidates:
            capped = True
            break
        push(match.text)
        for group in match.groups:
            if len(raw_seeds) >= guard.max_candidates:
                capped = True
                break
            if len(group.value) >= MIN_GROUP_SEED_CHARS:
                push(group.value)

    seeds = list(dict.fromkeys(raw_seeds))
    limit = min(MAX_SEEDS, guard.max_candidates)
    if len(seeds) > limit:
        capped = True
    return seeds[:limit], capped


def sample_lines(sample_text: str, max_line_len: int) -> tuple[list[str], bool]:
    """Split the sample into lines, keeping at most ``MAX_SAMPLE_LINES`` and cutting each to
    ``max_line_len``; the flag reports whether anything was dropped or cut.
    """
    lines = _LINE_BREAK.split(sample_text)
    capped = len(lines) > MAX_SAMPLE_LINES
    lines = lines[:MAX_SAMPLE_LINES]
    if any(len(line) > max_line_len for line in lines):
        capped = True
    return [line[:max_line_len] for line in lines], capped


def matched_lines(lines: list[str], matches: list[MatchRecord]) -> list[str]:
    """Non-empty sample lines that hold at least one match, in line order."""
    numbers = {m.line.number for m in matches}
    return [line for number, line in enumerate(lines, start=1) if line and number in numbers]


def _safe_test(compiled: re.Pattern, text: str, sticky: bool) -> bool:
    try:
        return pattern_matches(compiled, text, sticky=sticky)
    except Exception as e:
        logger.debug("Variant test failed for %r: %s", text, e)
        return False


def _dedupe(cases: list[ExampleCase]) -> list[ExampleCase]:
    seen: set[str] = set()
    out = []
    for case in cases:
        if case.text not in seen:
            seen.add(case.text)
            out.append(case)
    return out[:FP_FN_LIMIT]


def estimate(
    tree: Pattern,
    pattern: str,
    flags: "Flags | str | None",
    sample_text: str,
    matches: list[MatchRecord],
    guard: Optional[EstimatorGuard] = None,
) -> FalsePosNegReport:
    """Propose likely false positives and negatives from ``matches`` found in ``sample_text``.

    Seeds come from match and capture text; when every match is empty the
    matched sample lines are used instead. Sample lines beyond
    ``MAX_SAMPLE_LINES`` or longer than ``guard.max_line_len`` are cut, which
    adds the capped note.
    """
    guard = guard or EstimatorGuard()

    try:
        parsed = coerce_flags(flags).without_global()
        compiled = compile_pattern(pattern, parsed)
    except _COMPILE_ERRORS as e:
        logger.debug("Estimation skipped, pattern %r did not compile: %s", pattern, e)
        return FalsePosNegReport(notes=[NOTE_NO_COMPILE])

    if not matches:
        return FalsePosNegReport(notes=[NOTE_NO_MATCHES, NOTE_TIP])

    features = extract_perturbation_features(tree)
    lines, lines_capped = sample_lines(sample_text, guard.max_line_len)
    seeds, capped = collect_seeds(matches, guard)
    if not seeds:
        # Only empty matches; fall back to the lines they sit on
        fallback = dict.fromkeys(line[:MAX_SEED_CHARS] for line in matched_lines(lines, matches))
        seeds = list(fallback)[: min(MAX_SEEDS, guard.max_candidates)]
    capped = capped or lines_capped
    budget = _WorkBudget(guard.max_total_work)

    negatives: list[ExampleCase] = []
    for seed in seeds:
        if len(negatives) >= FP_FN_LIMIT or budget.exhausted:
            break
        for variant in should_still_match_variants(seed, features):
            if len(negatives) >= FP_FN_LIMIT or budget.exhausted:
                break
            budget.used += 1
            if not _safe_test(compiled, variant, parsed.sticky):
                negatives.append(ExampleCase(text=variant, reason=REASON_TOO_STRICT))

    positives: list[ExampleCase] = []
    for seed in seeds:
        if len(positives) >= FP_FN_LIMIT or budget.exhausted:
            break
        for variant in should_not_match_variants(seed, features):
            if len(positives) >= FP_FN_LIMIT or budget.exhausted:
                break
            budget.used += 1
            if _safe_test(compiled, variant, parsed.sticky):
                positives.append(ExampleCase(text=variant, reason=REASON_TOO_BROAD))

    notes = [NOTE_HEURISTIC]
    if capped or budget.exhausted:
        notes.append(NOTE_CAPPED)

    logger.debug("Estimator ran %d of %d test(s) over %d seed(s)", budget.used, budget.limit, len(seeds))
    return FalsePosNegReport(
        likely_false_positives=_dedupe(positives),
        likely_false_negatives=_dedupe(negatives),
        notes=notes,
        attempts=budget.used,
    )
