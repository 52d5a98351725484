from glyphscope_ast import Alternative, ASTWalker, CharacterClass, PatternShapes

from ..models import RiskContext, RiskWarning, Severity
from .base import BaseRule

EMPTY_ALTERNATION = "RISK_EMPTY_ALTERNATION"
OVERBROAD_CLASS = "RISK_OVERBROAD_CLASS"
LOOKAROUND_COMPLEXITY = "RISK_LOOKAROUND_COMPLEXITY"

# Class contents that together match every character
_EVERYTHING_PAIRS = ("\\s\\S", "\\d\\D", "\\w\\W")


class EmptyAlternationRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return EMPTY_ALTERNATION

    @property
    def name(self) -> str:
        return "empty-alternation"

    @property
    def severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def title(self) -> str:
        return "Empty alternative"

    @property
    def message(self) -> str:
        return "An alternation contains an empty branch (example: a|). This may match unexpectedly."

    def check(self, context: RiskContext) -> list[RiskWarning]:
        # Covers a lone empty branch too: "", (?:) and ()
        empty = [alt for alt in ASTWalker.find_all_by_type(context.tree, Alternative) if not alt.elements]
        if not empty:
            return []
        return [self._create_warning(empty)]


class OverbroadClassRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return OVERBROAD_CLASS

    @property
    def name(self) -> str:
        return "overbroad-class"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    @property
    def title(self) -> str:
        return "Over-broad character class"

    @property
    def message(self) -> str:
        return (
            "A character class like [\\s\\S] or [\\d\\D] matches almost everything. "
            "That can be correct, but it often hides mistakes."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        classes = [
            n
            for n in ASTWalker.find_all_by_type(context.tree, CharacterClass)
            if any(pair in n.raw for pair in _EVERYTHING_PAIRS)
        ]
        if not classes:
            return []
        return [self._create_warning(classes)]


class LookaroundComplexityRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return LOOKAROUND_COMPLEXITY

    @property
    def name(self) -> str:
        return "lookaround-complexity"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    @property
    def title(self) -> str:
        return "Lookarounds increase complexity"

    @property
    def message(self) -> str:
        return (
            "Lookaheads/lookbehinds can be correct, but they make the pattern harder "
            "to reason about. Double-check edge cases."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        lookarounds = [n for n in ASTWalker.iter_nodes(context.tree) if PatternShapes.is_lookaround(n)]
        if not lookarounds:
            return []
        return [self._create_warning(lookarounds)]
