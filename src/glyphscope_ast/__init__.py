"""
GlyphScope AST - typed pattern tree for Python ``re`` patterns

This package provides:
- The six-flag record and its mapping onto ``re`` flags
- A compile-checked parser producing an immutable tree with source spans
- A depth-first walker shared by every analysis
"""

from .ast_walker import ASTWalker
from .errors import ConfigError, FlagError, GlyphScopeError
from .flags import FLAG_ORDER, Flags, coerce_flags, normalize_flags
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
from .parser import PatternParser, compile_pattern, parse_pattern, pattern_matches
from .shapes import PatternShapes

__all__ = [
    "ASTWalker",
    "Alternative",
    "Assertion",
    "AssertionKind",
    "Backreference",
    "Character",
    "CharacterClass",
    "CharacterClassRange",
    "CharacterSet",
    "Conditional",
    "ConfigError",
    "FLAG_ORDER",
    "FlagError",
    "Flags",
    "GlyphScopeError",
    "Group",
    "Node",
    "ParseError",
    "ParseResult",
    "Pattern",
    "PatternParser",
    "PatternShapes",
    "Quantifier",
    "SetKind",
    "coerce_flags",
    "compile_pattern",
    "normalize_flags",
    "parse_pattern",
    "pattern_matches",
]
