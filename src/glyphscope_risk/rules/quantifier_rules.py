import logging

from glyphscope_ast import ASTWalker, PatternShapes, Quantifier

from ..models import RiskContext, RiskWarning, Severity
from ..probe import run_timing_probe
from .base import BaseRule

logger = logging.getLogger(__name__)

NESTED_QUANTIFIERS = "RISK_NESTED_QUANTIFIERS"
POTENTIAL_BACKTRACKING = "RISK_POTENTIAL_BACKTRACKING"
AMBIGUOUS_WILDCARD = "RISK_AMBIGUOUS_WILDCARD"
REDUNDANT_QUANTIFIERS = "RISK_REDUNDANT_QUANTIFIERS"

# Explicit counting forms equivalent to *, + and ?
_REDUNDANT_FORMS = frozenset({"{0,}", "{,}", "{1,}", "{0,1}", "{,1}"})


class NestedQuantifiersRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return NESTED_QUANTIFIERS

    @property
    def name(self) -> str:
        return "nested-quantifiers"

    @property
    def severity(self) -> Severity:
        return Severity.HIGH

    @property
    def title(self) -> str:
        return "Nested quantifiers"

    @property
    def message(self) -> str:
        return (
            "A quantified group contains another quantifier (example: (a+)+). "
            "This is a common cause of catastrophic backtracking."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        offenders = [
            q
            for q in ASTWalker.find_all_by_type(context.tree, Quantifier)
            if ASTWalker.contains(q.element, PatternShapes.is_quantifier, include_root=True)
        ]
        if not offenders:
            return []
        return [self._create_warning(offenders)]


class PotentialBacktrackingRule(BaseRule):
    """Greedy unbounded repetition around a wildcard, or around a quantified group.

    Escalates to high when nested quantifiers were already reported.
    """

    @property
    def rule_id(self) -> str:
        return POTENTIAL_BACKTRACKING

    @property
    def name(self) -> str:
        return "potential-backtracking"

    @property
    def severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def title(self) -> str:
        return "Potential performance risk"

    @property
    def message(self) -> str:
        return (
            "This pattern can take a long time on certain inputs (especially long "
            "non-matching strings). Treat this as a potential risk, not a certainty."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        shapes = [
            q
            for q in ASTWalker.find_all_by_type(context.tree, Quantifier)
            if q.greedy and not q.possessive and q.unbounded and self._risky_body(q)
        ]
        if not shapes:
            return []

        examples = []
        if context.options.pattern is not None:
            note = run_timing_probe(context.options.pattern, context.flags, context.options.probe)
            if note:
                examples.append(note)

        severity = Severity.HIGH if NESTED_QUANTIFIERS in context.fired else self.severity
        return [self._create_warning(shapes, examples=examples, severity=severity)]

    @staticmethod
    def _risky_body(quantifier: Quantifier) -> bool:
        inner = list(ASTWalker.iter_nodes(quantifier.element))
        if any(PatternShapes.is_greedy_dot_quantifier(n) for n in inner):
            return True
        return any(PatternShapes.is_branching(n) for n in inner) and any(
            PatternShapes.is_quantifier(n) for n in inner
        )


class AmbiguousWildcardRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return AMBIGUOUS_WILDCARD

    @property
    def name(self) -> str:
        return "ambiguous-wildcard"

    @property
    def severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def title(self) -> str:
        return "Greedy wildcard may be too broad"

    @property
    def message(self) -> str:
        return (
            "A greedy wildcard like .* or .+ can swallow more than intended. "
            "Consider anchoring or narrowing the match."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        wildcards = [n for n in ASTWalker.iter_nodes(context.tree) if PatternShapes.is_greedy_dot_quantifier(n)]
        if not wildcards:
            return []
        return [self._create_warning(wildcards)]


class RedundantQuantifierRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return REDUNDANT_QUANTIFIERS

    @property
    def name(self) -> str:
        return "redundant-quantifier"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    @property
    def title(self) -> str:
        return "Redundant quantifier"

    @property
    def message(self) -> str:
        return "Quantifiers like {0,} or {1,} are equivalent to * or +. This can reduce readability."

    def check(self, context: RiskContext) -> list[RiskWarning]:
        redundant = [
            q
            for q in ASTWalker.find_all_by_type(context.tree, Quantifier)
            if self._counting_form(q) in _REDUNDANT_FORMS
        ]
        if not redundant:
            return []
        return [self._create_warning(redundant)]

    @staticmethod
    def _counting_form(quantifier: Quantifier) -> str:
        text = quantifier.raw[len(quantifier.element.raw) :].strip()
        if not quantifier.greedy or quantifier.possessive:
            text = text[:-1]
        return text
