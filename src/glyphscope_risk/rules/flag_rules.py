from glyphscope_ast import ASTWalker, Character, PatternShapes

from ..models import RiskContext, RiskWarning, Severity
from .base import BaseRule

DOTALL_EXPECTED = "RISK_DOTALL_EXPECTED"
STICKY_WITH_GLOBAL = "RISK_STICKY_WITH_GLOBAL"
UNICODE_FLAG_MISMATCH = "RISK_UNICODE_FLAG_MISMATCH"

# Escapes that name a code point directly
_CODE_POINT_PREFIXES = ("\\u", "\\U", "\\N{")


class DotallExpectedRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return DOTALL_EXPECTED

    @property
    def name(self) -> str:
        return "dotall-expected"

    @property
    def severity(self) -> Severity:
        return Severity.LOW

    @property
    def title(self) -> str:
        return "Dot does not match newlines"

    @property
    def message(self) -> str:
        return "Your sample contains newlines, but '.' stops at a newline unless the 's' flag is set."

    def check(self, context: RiskContext) -> list[RiskWarning]:
        if context.flags.dot_all or not context.sample_text or "\n" not in context.sample_text:
            return []
        dots = [n for n in ASTWalker.iter_nodes(context.tree) if PatternShapes.is_dot(n)]
        if not dots:
            return []
        return [self._create_warning(dots)]


class StickyWithGlobalRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return STICKY_WITH_GLOBAL

    @property
    def name(self) -> str:
        return "sticky-with-global"

    @property
    def severity(self) -> Severity:
        return Severity.INFO

    @property
    def title(self) -> str:
        return "Sticky + global flags"

    @property
    def message(self) -> str:
        return (
            "Using both 'y' (sticky) and 'g' (global) is unusual. "
            "Make sure you intended sticky matching behavior."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        if context.flags.sticky and context.flags.global_:
            return [self._create_warning()]
        return []


class UnicodeFlagMismatchRule(BaseRule):
    """Code-point escapes in a pattern compiled in ASCII mode (no 'u')."""

    @property
    def rule_id(self) -> str:
        return UNICODE_FLAG_MISMATCH

    @property
    def name(self) -> str:
        return "unicode-flag-mismatch"

    @property
    def severity(self) -> Severity:
        return Severity.LOW

    @property
    def title(self) -> str:
        return "Unicode-related behavior"

    @property
    def message(self) -> str:
        return (
            "Unicode escapes can behave differently depending on the 'u' flag "
            "(without it, \\w, \\d, \\s and case-folding are ASCII-only). "
            "Verify the flag matches your intent."
        )

    def check(self, context: RiskContext) -> list[RiskWarning]:
        if context.flags.unicode:
            return []
        escapes = [
            n
            for n in ASTWalker.find_all_by_type(context.tree, Character)
            if n.raw.startswith(_CODE_POINT_PREFIXES)
        ]
        if not escapes:
            return []
        return [self._create_warning(escapes)]
