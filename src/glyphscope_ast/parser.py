"""Pattern parsing: the ``re`` engine validates, ``PatternParser`` builds the tree."""

import logging
import re
import unicodedata
import warnings
from typing import Optional

from .errors import FlagError
from .flags import Flags, coerce_flags
from .node_types import (
    Alternative,
    Assertion,
    AssertionKind,
    Backreference,
    Character,
    CharacterClass,
    CharacterClassRange,
    CharacterSet,
    Conditional,
    Group,
    Node,
    ParseError,
    ParseResult,
    Pattern,
    Quantifier,
    SetKind,
)

logger = logging.getLogger(__name__)

DIGITS = "0123456789"
OCTDIGITS = "01234567"
HEXDIGITS = "0123456789abcdefABCDEF"
WHITESPACE = " \t\n\r\v\f"
INLINE_FLAG_LETTERS = "aiLmsux"

CONTROL_ESCAPES = {"a": 7, "f": 12, "n": 10, "r": 13, "t": 9, "v": 11}

SET_ESCAPES = {
    "d": (SetKind.DIGIT, False),
    "D": (SetKind.DIGIT, True),
    "w": (SetKind.WORD, False),
    "W": (SetKind.WORD, True),
    "s": (SetKind.SPACE, False),
    "S": (SetKind.SPACE, True),
}

ANCHOR_ESCAPES = {
    "A": AssertionKind.START,
    "Z": AssertionKind.END,
    "z": AssertionKind.END,
    "b": AssertionKind.WORD_BOUNDARY,
    "B": AssertionKind.NON_WORD_BOUNDARY,
}

# Hex digits expected after \x, \u and \U
CODE_POINT_WIDTHS = {"x": 2, "u": 4, "U": 8}

# Errors ``re.compile`` raises for a rejected pattern besides ``re.error``
_COMPILE_ERRORS = (re.error, OverflowError, RecursionError, ValueError)

NESTED_TOO_DEEPLY = "Pattern is nested too deeply"


def compile_pattern(body: str, flags: "Flags | str | None" = "") -> re.Pattern:
    """Compile ``body`` with the ``re`` engine under ``flags``.

    Raises ``re.error`` (or ``FlagError``) on failure. The 'g' and 'y' flags
    are execution modes and do not change the compiled object.
    """
    parsed = coerce_flags(flags)
    with warnings.catch_warnings():
        # Nested-set and similar FutureWarnings are not compile failures
        warnings.simplefilter("ignore")
        return re.compile(body, parsed.compile_flags())


def pattern_matches(compiled: re.Pattern, text: str, sticky: bool = False) -> bool:
    """Boolean test with search semantics; sticky patterns must match at position 0."""
    if sticky:
        return compiled.match(text) is not None
    return compiled.search(text) is not None


def parse_pattern(body: str, flags: "Flags | str | None" = "") -> ParseResult:
    """Compile and parse a pattern body.

    Returns a failed ``ParseResult`` for anything the engine rejects, or that
    nests deeper than the parser can follow, and a tree for everything else;
    nothing is raised past this function.
    """
    body = "" if body is None else str(body)

    try:
        parsed_flags = coerce_flags(flags)
    except FlagError as e:
        logger.debug("Rejected flags %r: %s", flags, e)
        return ParseResult(ok=False, error=ParseError(message=str(e), index=e.index))

    try:
        compile_pattern(body, parsed_flags)
    except _COMPILE_ERRORS as e:
        logger.debug("Pattern %r failed to compile: %s", body, e)
        return ParseResult(ok=False, error=_to_parse_error(e))

    try:
        tree = PatternParser(body).parse()
    except RecursionError:
        # The engine nests deeper than the recursive-descent parser can follow
        logger.debug("Pattern %r is nested too deeply to parse", body)
        return ParseResult(ok=False, error=ParseError(message=NESTED_TOO_DEEPLY))

    logger.debug("Parsed pattern %r with flags %r", body, parsed_flags.to_string())
    return ParseResult(
        ok=True,
        tree=tree,
        flags=parsed_flags,
        normalized_flags=parsed_flags.to_string(),
    )


def _to_parse_error(error: Exception) -> ParseError:
    if isinstance(error, re.error):
        return ParseError(
            message=error.msg or "Invalid regular expression",
            index=error.pos,
            line=error.lineno,
            column=error.colno,
        )
    return ParseError(message=str(error) or "Invalid regular expression")


class PatternParser:
    """Recursive-descent parser producing the typed tree for an ``re`` pattern.

    Input is expected to have compiled already, so the parser never rejects
    text: anything unexpected is kept as a literal character.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.group_count = 0
        self.inline_flags = ""
        self._verbose = [False]

    def parse(self) -> Pattern:
        alternatives = self._parse_alternatives(nested=False)
        return Pattern(
            start=0,
            end=len(self.source),
            raw=self.source,
            alternatives=alternatives,
            inline_flags=self.inline_flags,
        )

    # -- sequences -------------------------------------------------------

    def _parse_alternatives(self, nested: bool) -> tuple[Alternative, ...]:
        alternatives = []
        alt_start = self.pos
        elements: list[Node] = []

        while not self._at_end():
            ch = self._peek()
            if nested and ch == ")":
                break
            if ch == "|":
                alternatives.append(self._alternative(alt_start, self.pos, elements))
                self.pos += 1
                alt_start = self.pos
                elements = []
                continue
            if self._skip_verbose():
                continue

            atom = self._parse_atom()
            if atom is None:
                continue
            elements.append(self._parse_quantifiers(atom))

        alternatives.append(self._alternative(alt_start, self.pos, elements))
        return tuple(alternatives)

    def _alternative(self, start: int, end: int, elements: list[Node]) -> Alternative:
        return Alternative(start=start, end=end, raw=self.source[start:end], elements=tuple(elements))

    def _parse_atom(self) -> Optional[Node]:
        start = self.pos
        ch = self._peek()

        if ch == "(":
            return self._parse_group()
        if ch == "[":
            return self._parse_class()
        if ch == "\\":
            return self._parse_escape()

        self.pos += 1
        if ch == ".":
            return CharacterSet(start=start, end=self.pos, raw=ch, kind=SetKind.ANY)
        if ch == "^":
            return Assertion(start=start, end=self.pos, raw=ch, kind=AssertionKind.START)
        if ch == "$":
            return Assertion(start=start, end=self.pos, raw=ch, kind=AssertionKind.END)
        return Character(start=start, end=self.pos, raw=ch, value=ord(ch))

    # -- quantifiers -----------------------------------------------------

    def _parse_quantifiers(self, atom: Node) -> Node:
        while True:
            before = self.pos
            self._skip_verbose_all()
            ch = self._peek()

            if ch == "*":
                self.pos += 1
                low, high = 0, None
            elif ch == "+":
                self.pos += 1
                low, high = 1, None
            elif ch == "?":
                self.pos += 1
                low, high = 0, 1
            elif ch == "{":
                bounds = self._parse_brace_bounds()
                if bounds is None:
                    self.pos = before
                    return atom
                low, high = bounds
            else:
                self.pos = before
                return atom

            greedy = True
            possessive = False
            if self._peek() == "?":
                greedy = False
                self.pos += 1
            elif self._peek() == "+":
                possessive = True
                self.pos += 1

            atom = Quantifier(
                start=atom.start,
                end=self.pos,
                raw=self.source[atom.start : self.pos],
                element=atom,
                min=low,
                max=high,
                greedy=greedy,
                possessive=possessive,
            )

    def _parse_brace_bounds(self) -> Optional[tuple[int, Optional[int]]]:
        """Parse ``{n}``, ``{n,}``, ``{,m}`` or ``{n,m}``; ``None`` means a literal brace."""
        src = self.source
        i = self.pos + 1
        if i < len(src) and src[i] == "}":
            return None

        lo_start = i
        while i < len(src) and src[i] in DIGITS:
            i += 1
        lo = src[lo_start:i]

        if i < len(src) and src[i] == ",":
            i += 1
            hi_start = i
            while i < len(src) and src[i] in DIGITS:
                i += 1
            hi = src[hi_start:i]
        else:
            hi = lo

        if i >= len(src) or src[i] != "}":
            return None

        self.pos = i + 1
        return (int(lo) if lo else 0, int(hi) if hi else None)

    # -- groups ----------------------------------------------------------

    def _parse_group(self) -> Optional[Node]:
        start = self.pos
        self.pos += 1  # (

        if self._peek() != "?":
            self.group_count += 1
            return self._finish_group(start, capturing=True, index=self.group_count)

        self.pos += 1  # ?
        ch = self._peek()

        if ch == ":":
            self.pos += 1
            return self._finish_group(start)
        if ch == ">":
            self.pos += 1
            return self._finish_group(start, atomic=True)
        if ch == "#":
            close = self.source.find(")", self.pos)
            self.pos = len(self.source) if close == -1 else close + 1
            return None
        if ch in ("=", "!"):
            self.pos += 1
            kind = AssertionKind.LOOKAHEAD if ch == "=" else AssertionKind.NEGATIVE_LOOKAHEAD
            return self._finish_lookaround(start, kind)
        if ch == "<" and self._peek(1) in ("=", "!"):
            kind = AssertionKind.LOOKBEHIND if self._peek(1) == "=" else AssertionKind.NEGATIVE_LOOKBEHIND
            self.pos += 2
            return self._finish_lookaround(start, kind)
        if ch == "P" and self._peek(1) == "<":
            self.pos += 2
            name = self._read_until(">")
            self.group_count += 1
            return self._finish_group(start, capturing=True, name=name, index=self.group_count)
        if ch == "P" and self._peek(1) == "=":
            self.pos += 2
            name = self._read_until(")")
            return Backreference(start=start, end=self.pos, raw=self.source[start : self.pos], ref=name)
        if ch == "(":
            return self._parse_conditional(start)

        return self._parse_inline_flags(start)

    def _finish_group(self, start: int, capturing: bool = False, **fields) -> Group:
        alternatives = self._parse_alternatives(nested=True)
        self._expect_close()
        return Group(
            start=start,
            end=self.pos,
            raw=self.source[start : self.pos],
            alternatives=alternatives,
            capturing=capturing,
            **fields,
        )

    def _finish_lookaround(self, start: int, kind: AssertionKind) -> Assertion:
        alternatives = self._parse_alternatives(nested=True)
        self._expect_close()
        return Assertion(
            start=start,
            end=self.pos,
            raw=self.source[start : self.pos],
            kind=kind,
            alternatives=alternatives,
        )

    def _parse_conditional(self, start: int) -> Conditional:
        self.pos += 1  # ( of the condition
        name = self._read_until(")")
        ref = int(name) if name.isdigit() else name

        alternatives = self._parse_alternatives(nested=True)
        self._expect_close()
        return Conditional(
            start=start,
            end=self.pos,
            raw=self.source[start : self.pos],
            ref=ref,
            yes=alternatives[0],
            no=alternatives[1] if len(alternatives) > 1 else None,
        )

    def _parse_inline_flags(self, start: int) -> Optional[Node]:
        """Handle ``(?aiLmsux)`` and ``(?aiLmsux-imsx:...)``."""
        on = self._read_letters(INLINE_FLAG_LETTERS)
        off = ""
        if self._peek() == "-":
            self.pos += 1
            off = self._read_letters(INLINE_FLAG_LETTERS)

        if self._peek() == ")":
            # Global flags apply to the whole pattern
            self.pos += 1
            self.inline_flags += on
            if "x" in on:
                self._verbose[0] = True
                self._verbose[-1] = True
            return None

        if self._peek() == ":":
            self.pos += 1
        verbose = self._verbose[-1]
        if "x" in on:
            verbose = True
        elif "x" in off:
            verbose = False

        self._verbose.append(verbose)
        try:
            group = self._finish_group(start, scoped_flags=f"{on}-{off}" if off else on)
        finally:
            self._verbose.pop()
        return group

    # -- character classes -----------------------------------------------

    def _parse_class(self) -> CharacterClass:
        start = self.pos
        self.pos += 1  # [
        negate = False
        if self._peek() == "^":
            negate = True
            self.pos += 1

        elements = []
        while not self._at_end():
            if self._peek() == "]" and elements:
                self.pos += 1
                break

            item = self._parse_class_atom()
            if isinstance(item, Character) and self._peek() == "-" and self._peek(1) not in ("]", ""):
                self.pos += 1  # -
                upper = self._parse_class_atom()
                if isinstance(upper, Character):
                    elements.append(
                        CharacterClassRange(
                            start=item.start,
                            end=upper.end,
                            raw=self.source[item.start : upper.end],
                            min=item,
                            max=upper,
                        )
                    )
                    continue
                dash = upper.start - 1
                elements.extend([item, Character(start=dash, end=dash + 1, raw="-", value=ord("-")), upper])
                continue
            elements.append(item)

        return CharacterClass(
            start=start,
            end=self.pos,
            raw=self.source[start : self.pos],
            elements=tuple(elements),
            negate=negate,
        )

    def _parse_class_atom(self) -> Node:
        start = self.pos
        ch = self._peek()
        if ch == "\\":
            return self._parse_class_escape()
        self.pos += 1
        return Character(start=start, end=self.pos, raw=ch, value=ord(ch))

    def _parse_class_escape(self) -> Node:
        start = self.pos
        self.pos += 1  # backslash
        if self._at_end():
            return self._char(start, ord("\\"))
        ch = self._next()

        if ch in SET_ESCAPES:
            kind, negate = SET_ESCAPES[ch]
            return CharacterSet(start=start, end=self.pos, raw=self.source[start : self.pos], kind=kind, negate=negate)
        if ch == "b":
            return self._char(start, 8)
        if ch in OCTDIGITS:
            digits = ch + self._read_letters(OCTDIGITS, limit=2)
            return self._char(start, int(digits, 8))
        return self._char(start, self._code_point_escape(ch))

    # -- escapes ---------------------------------------------------------

    def _parse_escape(self) -> Node:
        start = self.pos
        self.pos += 1  # backslash
        if self._at_end():
            return self._char(start, ord("\\"))
        ch = self._next()

        if ch in ANCHOR_ESCAPES:
            return Assertion(start=start, end=self.pos, raw=self.source[start : self.pos], kind=ANCHOR_ESCAPES[ch])
        if ch in SET_ESCAPES:
            kind, negate = SET_ESCAPES[ch]
            return CharacterSet(start=start, end=self.pos, raw=self.source[start : self.pos], kind=kind, negate=negate)

        if ch == "0":
            digits = self._read_letters(OCTDIGITS, limit=2)
            return self._char(start, int("0" + digits, 8))
        if ch in DIGITS:
            second = self._peek()
            if second and second in DIGITS:
                third = self._peek(1)
                if ch in OCTDIGITS and second in OCTDIGITS and third and third in OCTDIGITS:
                    self.pos += 2
                    return self._char(start, int(ch + second + third, 8))
                self.pos += 1
                ref = int(ch + second)
            else:
                ref = int(ch)
            return Backreference(start=start, end=self.pos, raw=self.source[start : self.pos], ref=ref)

        return self._char(start, self._code_point_escape(ch))

    def _code_point_escape(self, ch: str) -> int:
        """Value of an escape that denotes one character; ``ch`` was just consumed."""
        if ch in CONTROL_ESCAPES:
            return CONTROL_ESCAPES[ch]
        if ch in CODE_POINT_WIDTHS:
            digits = self._read_letters(HEXDIGITS, limit=CODE_POINT_WIDTHS[ch])
            if digits:
                return int(digits, 16)
        if ch == "N" and self._peek() == "{":
            self.pos += 1
            name = self._read_until("}")
            try:
                return ord(unicodedata.lookup(name))
            except KeyError:
                return ord("N")
        return ord(ch)

    # -- tokenizer helpers -----------------------------------------------

    def _char(self, start: int, value: int) -> Character:
        return Character(start=start, end=self.pos, raw=self.source[start : self.pos], value=value)

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.source[i] if i < len(self.source) else ""

    def _next(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _read_letters(self, allowed: str, limit: Optional[int] = None) -> str:
        start = self.pos
        while not self._at_end() and self.source[self.pos] in allowed:
            if limit is not None and self.pos - start >= limit:
                break
            self.pos += 1
        return self.source[start : self.pos]

    def _read_until(self, terminator: str) -> str:
        """Read up to ``terminator`` and consume it."""
        end = self.source.find(terminator, self.pos)
        if end == -1:
            end = len(self.source)
        text = self.source[self.pos : end]
        self.pos = min(end + 1, len(self.source))
        return text

    def _expect_close(self):
        if self._peek() == ")":
            self.pos += 1

    def _skip_verbose(self) -> bool:
        """Skip one whitespace run or comment in verbose mode."""
        if not self._verbose[-1]:
            return False
        ch = self._peek()
        if ch and ch in WHITESPACE:
            self.pos += 1
            return True
        if ch == "#":
            newline = self.source.find("\n", self.pos)
            self.pos = len(self.source) if newline == -1 else newline + 1
            return True
        return False

    def _skip_verbose_all(self):
        while self._skip_verbose():
            pass
