import logging
from typing import Optional

from glyphscope_ast import Flags, Pattern, coerce_flags

from .models import DetectionOptions, RiskContext, RiskWarning
from .registry import RuleRegistry, registry

logger = logging.getLogger(__name__)


class RiskEngine:
    """Runs the enabled rules over one parsed pattern"""

    def __init__(
        self,
        rule_registry: Optional[RuleRegistry] = None,
        select: Optional[list[str]] = None,
        ignore: Optional[list[str]] = None,
    ):
        self.registry = rule_registry or registry
        self.rules = self.registry.get_enabled_rules(select=select, ignore=ignore)

    def detect(
        self,
        tree: Pattern,
        flags: "Flags | str | None",
        sample_text: Optional[str] = None,
        options: Optional[DetectionOptions] = None,
    ) -> list[RiskWarning]:
        """Run every enabled rule in registry order; each contributes at most one warning."""
        context = RiskContext(
            tree=tree,
            flags=coerce_flags(flags),
            sample_text=sample_text,
            options=options or DetectionOptions(),
        )

        warnings: list[RiskWarning] = []
        for rule in self.rules:
            found = rule.check(context)
            if found:
                context.fired.add(rule.rule_id)
                warnings.extend(found[:1])

        logger.debug("Risk rules fired: %s", ", ".join(w.id for w in warnings) or "none")
        return warnings


def detect_risks(
    tree: Pattern,
    flags: "Flags | str | None",
    sample_text: Optional[str] = None,
    context: Optional[DetectionOptions] = None,
    select: Optional[list[str]] = None,
    ignore: Optional[list[str]] = None,
) -> list[RiskWarning]:
    """Detect risks in a parsed pattern; pass ``context.pattern`` to enable the timing probe."""
    return RiskEngine(select=select, ignore=ignore).detect(tree, flags, sample_text, context)
