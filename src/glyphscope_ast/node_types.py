from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .flags import Flags


class AssertionKind(str, Enum):
    START = "start"
    END = "end"
    WORD_BOUNDARY = "word-boundary"
    NON_WORD_BOUNDARY = "non-word-boundary"
    LOOKAHEAD = "lookahead"
    NEGATIVE_LOOKAHEAD = "negative-lookahead"
    LOOKBEHIND = "lookbehind"
    NEGATIVE_LOOKBEHIND = "negative-lookbehind"

    @property
    def is_lookaround(self) -> bool:
        return self in LOOKAROUND_KINDS


LOOKAROUND_KINDS = frozenset(
    {
        AssertionKind.LOOKAHEAD,
        AssertionKind.NEGATIVE_LOOKAHEAD,
        AssertionKind.LOOKBEHIND,
        AssertionKind.NEGATIVE_LOOKBEHIND,
    }
)


class SetKind(str, Enum):
    """Built-in character sets (``\\d``, ``\\w``, ``\\s`` and ``.``)."""

    DIGIT = "digit"
    WORD = "word"
    SPACE = "space"
    ANY = "any"


@dataclass(frozen=True)
class Node:
    """Base of every tree node: a span into the pattern text and its raw slice."""

    start: int
    end: int
    raw: str

    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)


@dataclass(frozen=True)
class Character(Node):
    """A single literal code point"""

    value: int


@dataclass(frozen=True)
class CharacterSet(Node):
    kind: SetKind
    negate: bool = False


@dataclass(frozen=True)
class CharacterClassRange(Node):
    min: Character
    max: Character

    def children(self) -> tuple[Node, ...]:
        return (self.min, self.max)


ClassElement = Union[Character, CharacterClassRange, CharacterSet]


@dataclass(frozen=True)
class CharacterClass(Node):
    """Bracket expression such as ``[a-z_\\d]``"""

    elements: tuple[ClassElement, ...]
    negate: bool = False

    def children(self) -> tuple[Node, ...]:
        return self.elements


@dataclass(frozen=True)
class Alternative(Node):
    """Ordered sequence of elements; one branch of an alternation."""

    elements: tuple[Node, ...]

    def children(self) -> tuple[Node, ...]:
        return self.elements


@dataclass(frozen=True)
class Group(Node):
    alternatives: tuple[Alternative, ...]
    capturing: bool = False
    name: Optional[str] = None
    index: Optional[int] = None  # 1-based, capturing groups only
    atomic: bool = False
    scoped_flags: str = ""  # e.g. "i" or "i-s" for (?i-s:...)

    def children(self) -> tuple[Node, ...]:
        return self.alternatives


@dataclass(frozen=True)
class Quantifier(Node):
    element: Node
    min: int
    max: Optional[int]  # None means unbounded
    greedy: bool = True
    possessive: bool = False

    @property
    def unbounded(self) -> bool:
        return self.max is None

    def children(self) -> tuple[Node, ...]:
        return (self.element,)


@dataclass(frozen=True)
class Assertion(Node):
    kind: AssertionKind
    alternatives: tuple[Alternative, ...] = ()  # lookaround body

    def children(self) -> tuple[Node, ...]:
        return self.alternatives


@dataclass(frozen=True)
class Backreference(Node):
    ref: Union[int, str]


@dataclass(frozen=True)
class Conditional(Node):
    """``(?(ref)yes|no)``"""

    ref: Union[int, str]
    yes: Alternative
    no: Optional[Alternative] = None

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        return (self.yes,) if self.no is None else (self.yes, self.no)

    def children(self) -> tuple[Node, ...]:
        return self.alternatives


@dataclass(frozen=True)
class Pattern(Node):
    """Root of a parsed pattern body"""

    alternatives: tuple[Alternative, ...]
    inline_flags: str = ""  # global inline flags such as (?ix)

    def children(self) -> tuple[Node, ...]:
        return self.alternatives


@dataclass(frozen=True)
class ParseError:
    """Structured compile failure"""

    message: str
    index: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass(frozen=True)
class ParseResult:
    """Result of compiling and parsing a pattern body"""

    ok: bool
    tree: Optional[Pattern] = None
    flags: Optional[Flags] = None
    normalized_flags: str = ""
    error: Optional[ParseError] = None
