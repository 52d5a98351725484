"""Turns a parsed pattern into summary, component and constraint lines."""

from typing import Callable

from glyphscope_ast import (
    Alternative,
    Assertion,
    AssertionKind,
    Backreference,
    Character,
    CharacterClass,
    CharacterClassRange,
    CharacterSet,
    Conditional,
    Flags,
    Group,
    Node,
    Pattern,
    Quantifier,
    SetKind,
    coerce_flags,
)

from .models import Explanation

FLAG_CONSTRAINTS = (
    ("global_", "Global: matches all occurrences, not just the first."),
    ("ignore_case", "Case-insensitive: ignores case differences."),
    ("multiline", "Multi-line: ^ and $ match start/end of lines."),
    ("dot_all", "Dot-all: . matches newlines."),
    ("unicode", "Unicode: \\w, \\d, \\s, \\b and case folding use full Unicode rules."),
    ("sticky", "Sticky: matches only at the current position, without skipping ahead."),
)

ANCHORED_BOTH = "Anchored: needs a full string (or line) match."
ANCHORED_START = "Start-anchored: must match from the start."
ANCHORED_END = "End-anchored: must match at the end."

CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\f": "\\f", "\v": "\\v", "\0": "\\0"}

SET_PHRASES = {
    SetKind.DIGIT: ("Any digit (0-9)", "Any non-digit"),
    SetKind.WORD: ("Any word character (a-z, A-Z, 0-9, _)", "Any non-word character"),
    SetKind.SPACE: ("Any whitespace (space, tab, newline)", "Any non-whitespace"),
    SetKind.ANY: ("Any character (except newline unless 's' flag)", "Any character"),
}

LOOKAROUND_PHRASES = {
    AssertionKind.LOOKAHEAD: "Positive lookahead (needs {} to follow)",
    AssertionKind.LOOKBEHIND: "Positive lookbehind (needs {} to precede)",
    AssertionKind.NEGATIVE_LOOKAHEAD: "Negative lookahead (ensures {} does NOT follow)",
    AssertionKind.NEGATIVE_LOOKBEHIND: "Negative lookbehind (ensures {} does NOT precede)",
}

# Group contents beyond this many items are elided
GROUP_PREVIEW_ITEMS = 3

# Groups nested deeper than this are described as "..."
MAX_DESCRIBE_DEPTH = 32


def explain(tree: Pattern, flags: "Flags | str | None" = "") -> Explanation:
    """Explain a parsed pattern under ``flags`` (a ``Flags`` record or a flag string)."""
    parsed = coerce_flags(flags)
    alternatives = tree.alternatives
    return Explanation(
        summary=_summary(alternatives, parsed),
        components=describe_alternatives(alternatives),
        constraints=_constraints(tree, parsed),
    )


def _constraints(tree: Pattern, flags: Flags) -> list[str]:
    lines = [text for attr, text in FLAG_CONSTRAINTS if getattr(flags, attr)]

    if tree.alternatives and tree.alternatives[0].elements:
        elements = tree.alternatives[0].elements
        starts = _is_assertion(elements[0], AssertionKind.START)
        ends = _is_assertion(elements[-1], AssertionKind.END)
        if starts and ends:
            lines.append(ANCHORED_BOTH)
        elif starts:
            lines.append(ANCHORED_START)
        elif ends:
            lines.append(ANCHORED_END)

    if tree.inline_flags:
        lines.append(f"Inline flags: (?{tree.inline_flags}) apply to the whole pattern.")
    return lines


def _summary(alternatives: tuple[Alternative, ...], flags: Flags) -> list[str]:
    if len(alternatives) > 1:
        lines = [f"Matches any one of {len(alternatives)} alternative patterns."]
    else:
        lines = ["Matches a specific sequence of characters."]
    if flags.ignore_case:
        lines.append("The match is case-insensitive.")
    if flags.global_:
        lines.append("Finds all matches in the text (Global).")
    return lines


def _is_assertion(node: Node, kind: AssertionKind) -> bool:
    return isinstance(node, Assertion) and node.kind is kind


def describe_alternatives(alternatives: tuple[Alternative, ...], depth: int = 0) -> list[str]:
    if not alternatives:
        return ["Empty pattern"]
    if len(alternatives) == 1:
        lines = describe_elements(alternatives[0].elements, depth)
        return lines or ["Empty pattern"]

    lines = [f"Matches one of {len(alternatives)} alternatives:"]
    for number, alternative in enumerate(alternatives, start=1):
        text = ", ".join(describe_elements(alternative.elements, depth))
        lines.append(f"  {number}. {text or 'Empty string'}")
    return lines


def describe_elements(elements: tuple[Node, ...], depth: int = 0) -> list[str]:
    """Describe a sequence; adjacent literal characters share one line."""
    lines = []
    run: list[str] = []
    for node in elements:
        if isinstance(node, Character):
            run.append(format_char(node.value))
            continue
        if run:
            lines.append(_literal("".join(run)))
            run = []
        text = describe_node(node, depth)
        if text:
            lines.append(text)
    if run:
        lines.append(_literal("".join(run)))
    return lines


def describe_node(node: Node, depth: int = 0) -> str:
    """Describe one node; raises ``TypeError`` for a node class with no description.

    ``depth`` counts enclosing groups; content nested past ``MAX_DESCRIBE_DEPTH``
    is elided.
    """
    describer = _DESCRIBERS.get(type(node))
    if describer is None:
        raise TypeError(f"No description for node type {type(node).__name__}")
    return describer(node, depth)


def format_char(value: int) -> str:
    text = chr(value)
    return CONTROL_ESCAPES.get(text, text)


def _literal(text: str) -> str:
    return f'Literal "{text}"'


def _describe_character(node: Character, depth: int) -> str:
    return _literal(format_char(node.value))


def _describe_set(node: CharacterSet, depth: int) -> str:
    positive, negative = SET_PHRASES[node.kind]
    return negative if node.negate else positive


def _describe_class_range(node: CharacterClassRange, depth: int) -> str:
    return f"{format_char(node.min.value)}-{format_char(node.max.value)}"


def _describe_class(node: CharacterClass, depth: int) -> str:
    parts = []
    for element in node.elements:
        if isinstance(element, Character):
            parts.append(format_char(element.value))
        else:
            parts.append(describe_node(element, depth))
    content = ", ".join(parts)
    if node.negate:
        return f"Any character EXCEPT: [{content}]"
    return f"One of the characters: [{content}]"


def _preview(alternatives: tuple[Alternative, ...], depth: int) -> str:
    if not any(alt.elements for alt in alternatives):
        return "empty"
    if depth >= MAX_DESCRIBE_DEPTH:
        return "..."
    content = describe_alternatives(alternatives, depth + 1)
    if len(content) > GROUP_PREVIEW_ITEMS:
        return ", ".join(content[:GROUP_PREVIEW_ITEMS]) + ", ..."
    return ", ".join(content)


def _describe_group(node: Group, depth: int) -> str:
    content = _preview(node.alternatives, depth)
    if node.capturing:
        label = f"'{node.name}'" if node.name else f"#{node.index}"
        return f"Capturing Group {label}: matches {content}"
    if node.atomic:
        return f"Atomic group (no backtracking into it): matches {content}"
    if node.scoped_flags:
        return f"Group with flags '{node.scoped_flags}': matches {content}"
    return f"Non-capturing group: matches {content}"


def _quantity(node: Quantifier) -> str:
    low, high = node.min, node.max
    if low == 0 and high == 1:
        return "optionally (0 or 1 time)"
    if low == 0 and high is None:
        return "zero or more times"
    if low == 1 and high is None:
        return "one or more times"
    if low == high:
        return f"exactly {low} time{'' if low == 1 else 's'}"
    return f"between {low} and {'unlimited' if high is None else high} times"


def _describe_quantifier(node: Quantifier, depth: int) -> str:
    suffix = ""
    if node.possessive:
        suffix = " (possessive)"
    elif not node.greedy:
        suffix = " (lazy)"
    return f"{describe_node(node.element, depth)}, matches {_quantity(node)}{suffix}"


def _ref_label(ref) -> str:
    return f"'{ref}'" if isinstance(ref, str) else f"#{ref}"


def _describe_backreference(node: Backreference, depth: int) -> str:
    return f"Backreference: matches the same text as Capturing Group {_ref_label(node.ref)}"


def _lookaround_shape(node: Assertion) -> str:
    """Shallow shape of a lookaround body."""
    if not node.alternatives:
        return "nothing"
    elements = node.alternatives[0].elements
    if len(elements) > 1:
        return "sequence"
    if len(elements) == 1:
        first = elements[0]
        if isinstance(first, Character):
            return "literal"
        if isinstance(first, (CharacterSet, CharacterClass)):
            return "character set"
        if isinstance(first, Group):
            return "group"
    return "pattern"


def _describe_assertion(node: Assertion, depth: int) -> str:
    if node.kind is AssertionKind.START:
        return "Start of string anchor" if node.raw == "\\A" else "Start of string/line anchor"
    if node.kind is AssertionKind.END:
        return "End of string anchor" if node.raw in ("\\Z", "\\z") else "End of string/line anchor"
    if node.kind is AssertionKind.WORD_BOUNDARY:
        return "Word boundary"
    if node.kind is AssertionKind.NON_WORD_BOUNDARY:
        return "Non-word boundary"
    return LOOKAROUND_PHRASES[node.kind].format(_lookaround_shape(node))


def _describe_conditional(node: Conditional, depth: int) -> str:
    yes = _branch(node.yes, depth)
    text = f"If group {_ref_label(node.ref)} matched: {yes}"
    if node.no is not None:
        text += f", otherwise: {_branch(node.no, depth)}"
    return text


def _branch(alternative: Alternative, depth: int) -> str:
    if alternative.elements and depth >= MAX_DESCRIBE_DEPTH:
        return "..."
    return ", ".join(describe_elements(alternative.elements, depth + 1)) or "empty"


def _describe_alternative(node: Alternative, depth: int) -> str:
    return ", ".join(describe_elements(node.elements, depth)) or "Empty string"


def _describe_pattern(node: Pattern, depth: int) -> str:
    return "; ".join(describe_alternatives(node.alternatives, depth))


_DESCRIBERS: dict[type, Callable[..., str]] = {
    Pattern: _describe_pattern,
    Alternative: _describe_alternative,
    Character: _describe_character,
    CharacterSet: _describe_set,
    CharacterClassRange: _describe_class_range,
    CharacterClass: _describe_class,
    Group: _describe_group,
    Quantifier: _describe_quantifier,
    Assertion: _describe_assertion,
    Backreference: _describe_backreference,
    Conditional: _describe_conditional,
}
