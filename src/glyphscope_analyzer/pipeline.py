import logging
from typing import Optional

from glyphscope_ast import Flags, parse_pattern
from glyphscope_risk import DetectionOptions, detect_risks

from .estimator import estimate
from .executor import build_line_map, execute
from .explainer import explain
from .intent import infer_intent
from .models import AnalysisResult, AnalyzerConfig

logger = logging.getLogger(__name__)


def analyze(
    pattern: str,
    flags: "Flags | str | None" = "",
    sample_text: Optional[str] = "",
    config: Optional[AnalyzerConfig] = None,
) -> AnalysisResult:
    """Run every analysis over one pattern.

    A pattern that fails to parse yields a result carrying only the parse
    error; nothing downstream runs.
    """
    config = config or AnalyzerConfig()
    sample_text = sample_text or ""
    parsed = parse_pattern(pattern, flags)
    result = AnalysisResult(pattern=pattern, flags=parsed.normalized_flags, parse=parsed)
    if not parsed.ok:
        logger.debug("Analysis stopped at parse: %s", parsed.error.message)
        return result

    tree, parsed_flags = parsed.tree, parsed.flags
    result.intent = infer_intent(tree, parsed_flags)
    result.explanation = explain(tree, parsed_flags)

    matches = []
    if sample_text:
        result.execution = execute(pattern, parsed_flags, sample_text, config.exec_guard)
        matches = result.execution.matches
        result.line_map = build_line_map(matches)

    if config.capabilities.risk_detection:
        result.risks = detect_risks(
            tree,
            parsed_flags,
            sample_text or None,
            context=DetectionOptions(pattern=pattern, probe=config.probe),
            select=config.select,
            ignore=config.ignore,
        )

    if config.capabilities.false_positive_negative and matches:
        result.fp_fn = estimate(
            tree,
            pattern,
            parsed_flags,
            sample_text,
            matches,
            guard=config.estimator_guard,
        )

    logger.debug(
        "Analyzed %r: intent=%r, %d match(es), %d risk(s)",
        pattern,
        result.intent.label,
        len(matches),
        len(result.risks),
    )
    return result
