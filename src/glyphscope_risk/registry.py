from typing import Optional

from .rules.base import BaseRule


class RuleRegistry:
    """Registry for managing and loading risk rules"""

    def __init__(self):
        self._rules: list[BaseRule] = []
        self._load_builtin_rules()

    def register(self, rule: BaseRule):
        self._rules.append(rule)

    def get_all_rules(self) -> list[BaseRule]:
        return list(self._rules)

    def get_rule(self, rule_id: str) -> Optional[BaseRule]:
        for rule in self._rules:
            if rule.rule_id == rule_id or rule.name == rule_id:
                return rule
        return None

    def get_enabled_rules(
        self, select: Optional[list[str]] = None, ignore: Optional[list[str]] = None
    ) -> list[BaseRule]:
        """Filter rules by id prefix; ``select`` narrows first, then ``ignore`` removes."""
        rules = self._rules
        if select:
            rules = [r for r in rules if _matches_any(r, select)]
        if ignore:
            rules = [r for r in rules if not _matches_any(r, ignore)]
        return list(rules)

    def _load_builtin_rules(self):
        # Order matters: backtracking severity depends on nested quantifiers running first
        from .rules.anchor_rules import MultilineAnchorConfusionRule, UnanchoredMismatchRule
        from .rules.flag_rules import DotallExpectedRule, StickyWithGlobalRule, UnicodeFlagMismatchRule
        from .rules.quantifier_rules import (
            AmbiguousWildcardRule,
            NestedQuantifiersRule,
            PotentialBacktrackingRule,
            RedundantQuantifierRule,
        )
        from .rules.structure_rules import EmptyAlternationRule, LookaroundComplexityRule, OverbroadClassRule

        self.register(NestedQuantifiersRule())
        self.register(PotentialBacktrackingRule())
        self.register(AmbiguousWildcardRule())
        self.register(UnanchoredMismatchRule())
        self.register(DotallExpectedRule())
        self.register(MultilineAnchorConfusionRule())
        self.register(EmptyAlternationRule())
        self.register(OverbroadClassRule())
        self.register(RedundantQuantifierRule())
        self.register(LookaroundComplexityRule())
        self.register(StickyWithGlobalRule())
        self.register(UnicodeFlagMismatchRule())


def _matches_any(rule: BaseRule, prefixes: list[str]) -> bool:
    return any(rule.rule_id.startswith(p) or rule.name.startswith(p) for p in prefixes)


registry = RuleRegistry()
