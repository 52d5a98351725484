from glyphscope_ast import Assertion, AssertionKind, ASTWalker, PatternShapes

from ..models import RiskContext, RiskWarning, Severity
from .base import BaseRule

UNANCHORED_MISMATCH = "RISK_UNANCHORED_MISMATCH"
MULTILINE_ANCHOR_CONFUSION = "RISK_MULTILINE_ANCHOR_CONFUSION"


class UnanchoredMismatchRule(BaseRule):
    """Only one of the start/end anchors is present (outside extraction mode)."""

    @property
    def rule_id(self) -> str:
        return UNANCHORED_MISMATCH

    @property
    def name(self) -> str:
        return "unanchored-mismatch"

    @property
    def severity(self) -> Severity:
        return Severity.LOW

    @property
    def title(self) -> str:
        return "Anchoring looks incomplete"

    @property
    def message(self) -> str:
        return (
            "This pattern has only one anchor (start or end). If you intended a "
            "full-string match, you usually want both."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        if context.extraction_mode:
            return []
        has_start, has_end = PatternShapes.anchor_presence(context.tree)
        if has_start == has_end:
            return []
        return [self._create_warning([context.tree])]


class MultilineAnchorConfusionRule(BaseRule):
    """With 'm', ``^`` and ``$`` match at line boundaries (``\\A`` and ``\\Z`` do not)."""

    @property
    def rule_id(self) -> str:
        return MULTILINE_ANCHOR_CONFUSION

    @property
    def name(self) -> str:
        return "multiline-anchor-confusion"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    @property
    def title(self) -> str:
        return "Multiline anchoring can surprise you"

    @property
    def message(self) -> str:
        return "With the 'm' flag, ^ and $ match line boundaries, not just the start/end of the whole text."

    def check(self, context: RiskContext) -> list[RiskWarning]:
        if not context.flags.multiline:
            return []
        anchors = [
            n
            for n in ASTWalker.find_all_by_type(context.tree, Assertion)
            if n.kind in (AssertionKind.START, AssertionKind.END) and n.raw in ("^", "$")
        ]
        if not anchors:
            return []
        return [self._create_warning(anchors)]
