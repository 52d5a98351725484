"""Runs a compiled pattern over sample text and records each match."""

import bisect
import logging
import re
from typing import Optional

from glyphscope_ast import Flags, GlyphScopeError, coerce_flags, compile_pattern

from .models import (
    CaptureGroup,
    ExecGuard,
    ExecutionResult,
    LineMapRow,
    LinePosition,
    MatchRecord,
)

logger = logging.getLogger(__name__)

_COMPILE_ERRORS = (re.error, GlyphScopeError, ValueError, OverflowError, RecursionError)


class LineIndex:
    """Maps text offsets to 1-based line numbers"""

    def __init__(self, text: str):
        self.text = text
        self.starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self.starts.append(i + 1)

    def position(self, start: int, end: int) -> LinePosition:
        number = bisect.bisect_right(self.starts, start)
        line_start = self.starts[number - 1]
        if number < len(self.starts):
            line_end = self.starts[number] - 1
        else:
            line_end = len(self.text)
        if line_end > line_start and self.text[line_end - 1] == "\r":
            line_end -= 1
        return LinePosition(
            number=number,
            start=line_start,
            end=line_end,
            column_start=start - line_start + 1,
            column_end=end - line_start + 1,
        )


def execute(
    pattern: str,
    flags: "Flags | str | None",
    text: str,
    guard: Optional[ExecGuard] = None,
) -> ExecutionResult:
    """Run ``pattern`` over ``text`` within ``guard``.

    Without the 'g' flag only the first match is kept (unless the guard allows
    many). Sticky mode requires each match to start where the previous ended.
    """
    guard = guard or ExecGuard()
    result = ExecutionResult()
    if not text:
        return result

    try:
        parsed = coerce_flags(flags)
        compiled = compile_pattern(pattern, parsed)
    except _COMPILE_ERRORS as e:
        logger.debug("Execution skipped, pattern %r did not compile: %s", pattern, e)
        result.error = str(e)
        return result

    if len(text) > guard.max_sample_chars:
        text = text[: guard.max_sample_chars]
        result.truncated_sample = True

    many = parsed.global_ or not guard.require_global_for_many
    names = {index: name for name, index in compiled.groupindex.items()}
    lines = LineIndex(text)

    pos = 0
    while pos <= len(text):
        m = compiled.match(text, pos) if parsed.sticky else compiled.search(text, pos)
        if m is None:
            break
        result.matches.append(_to_record(m, len(result.matches), names, lines))
        if not many:
            break
        if len(result.matches) >= guard.max_matches:
            result.capped_matches = True
            break
        # Step past zero-width matches
        pos = m.end() if m.end() > m.start() else m.end() + 1

    logger.debug("Pattern %r produced %d match(es)", pattern, len(result.matches))
    return result


def _to_record(m: re.Match, index: int, names: dict[int, str], lines: LineIndex) -> MatchRecord:
    groups = []
    for number in range(1, (m.re.groups or 0) + 1):
        participated = m.start(number) != -1
        groups.append(
            CaptureGroup(
                index=number,
                name=names.get(number),
                value=m.group(number) if participated else "",
                span=m.span(number) if participated else None,
            )
        )
    return MatchRecord(
        match_index=index,
        span=m.span(),
        text=m.group(0),
        line=lines.position(m.start(), m.end()),
        groups=tuple(groups),
    )


def build_line_map(matches: list[MatchRecord]) -> list[LineMapRow]:
    """Summarize matches per line, for lines that hold at least one match."""
    rows: dict[int, LineMapRow] = {}
    for match in matches:
        number = match.line.number
        row = rows.get(number)
        if row is None:
            rows[number] = LineMapRow(line_number=number, match_count=1, first_match_span=match.span)
        else:
            rows[number] = LineMapRow(
                line_number=number,
                match_count=row.match_count + 1,
                first_match_span=row.first_match_span,
            )
    return [rows[n] for n in sorted(rows)]
