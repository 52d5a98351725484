"""The six pattern flags and their mapping onto the ``re`` engine."""

import re
from dataclasses import dataclass, replace

from .errors import FlagError

# Canonical serialization order
FLAG_ORDER = "gimsuy"


@dataclass(frozen=True)
class Flags:
    """Fixed record of the six independent pattern flags."""

    global_: bool = False  # 'g' - extraction mode, find every match
    ignore_case: bool = False  # 'i'
    multiline: bool = False  # 'm'
    dot_all: bool = False  # 's'
    unicode: bool = False  # 'u'
    sticky: bool = False  # 'y' - every attempt starts at the current position

    @classmethod
    def from_string(cls, text: str | None) -> "Flags":
        """Parse a flag string such as ``"gi"``. Order does not matter."""
        seen: set[str] = set()
        for index, letter in enumerate(text or ""):
            if letter not in FLAG_ORDER:
                raise FlagError(f"Invalid flag '{letter}'", index=index)
            if letter in seen:
                raise FlagError(f"Duplicate flag '{letter}'", index=index)
            seen.add(letter)

        return cls(
            global_="g" in seen,
            ignore_case="i" in seen,
            multiline="m" in seen,
            dot_all="s" in seen,
            unicode="u" in seen,
            sticky="y" in seen,
        )

    def to_string(self) -> str:
        """Serialize in canonical ``gimsuy`` order."""
        states = (
            self.global_,
            self.ignore_case,
            self.multiline,
            self.dot_all,
            self.unicode,
            self.sticky,
        )
        return "".join(letter for letter, on in zip(FLAG_ORDER, states) if on)

    def compile_flags(self) -> int:
        """Return the ``re`` flag value for compiling a pattern under these flags.

        Without 'u' the pattern is compiled in ASCII mode, so ``\\w``, ``\\d``,
        ``\\s``, ``\\b`` and case folding only consider ASCII characters.
        """
        value = 0
        if self.ignore_case:
            value |= re.IGNORECASE
        if self.multiline:
            value |= re.MULTILINE
        if self.dot_all:
            value |= re.DOTALL
        value |= re.UNICODE if self.unicode else re.ASCII
        return value

    def without_global(self) -> "Flags":
        return replace(self, global_=False)

    def __str__(self) -> str:
        return self.to_string()


def normalize_flags(text: str | None) -> str:
    """Validate a flag string and return it in canonical order."""
    return Flags.from_string(text).to_string()


def coerce_flags(flags: "Flags | str | None") -> Flags:
    """Accept either a ``Flags`` record or a flag string."""
    if isinstance(flags, Flags):
        return flags
    return Flags.from_string(flags)
