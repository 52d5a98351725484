from abc import ABC, abstractmethod
from typing import Iterable, Optional

from glyphscope_ast import Node

from ..models import Evidence, RiskContext, RiskWarning, Severity, TextSpan


class BaseRule(ABC):
    """Abstract base class for all risk rules."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Stable identifier (e.g., 'RISK_NESTED_QUANTIFIERS')."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name (e.g., 'nested-quantifiers')."""
        pass

    @property
    @abstractmethod
    def severity(self) -> Severity:
        """Default severity for this rule."""
        pass

    @property
    @abstractmethod
    def title(self) -> str:
        pass

    @property
    @abstractmethod
    def message(self) -> str:
        """Fixed, hedged explanation shown to the user."""
        pass

    @abstractmethod
    def check(self, context: RiskContext) -> list[RiskWarning]:
        """Run the check and return at most one warning."""
        pass

    # Helper method for consistent warning creation
    def _create_warning(
        self,
        nodes: Iterable[Node] = (),
        examples: Iterable[str] = (),
        severity: Optional[Severity] = None,
    ) -> RiskWarning:
        """Helper to create a warning with rule defaults."""
        spans = [TextSpan(n.start, n.end) for n in nodes]
        examples = list(examples)
        evidence = Evidence(pattern_spans=spans, examples=examples) if spans or examples else None
        return RiskWarning(
            id=self.rule_id,
            severity=severity or self.severity,
            title=self.title,
            message=self.message,
            evidence=evidence,
        )
