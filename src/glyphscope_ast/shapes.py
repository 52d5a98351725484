"""Recognition of common pattern shapes in the tree."""

from .ast_walker import ASTWalker
from .node_types import (
    Alternative,
    Assertion,
    AssertionKind,
    CharacterSet,
    Node,
    Quantifier,
    SetKind,
)


class PatternShapes:
    """Recognize recurring shapes such as wildcards, anchors and lookarounds."""

    @staticmethod
    def is_dot(node: Node) -> bool:
        return isinstance(node, CharacterSet) and node.kind is SetKind.ANY

    @staticmethod
    def is_quantifier(node: Node) -> bool:
        return isinstance(node, Quantifier)

    @staticmethod
    def is_greedy_dot_quantifier(node: Node) -> bool:
        """Check for ``.*``, ``.+``, ``.{2,9}`` and friends (not lazy, can expand)."""
        if not isinstance(node, Quantifier) or not PatternShapes.is_dot(node.element):
            return False
        expands = node.max is None or node.max > node.min
        return node.greedy and expands

    @staticmethod
    def is_anchor(node: Node, kind: AssertionKind) -> bool:
        return isinstance(node, Assertion) and node.kind is kind

    @staticmethod
    def is_lookaround(node: Node) -> bool:
        return isinstance(node, Assertion) and node.kind.is_lookaround

    @staticmethod
    def anchor_presence(root: Node) -> tuple[bool, bool]:
        """Return ``(has_start, has_end)`` for anchors at any depth."""
        has_start = has_end = False
        for node in ASTWalker.iter_nodes(root):
            if PatternShapes.is_anchor(node, AssertionKind.START):
                has_start = True
            elif PatternShapes.is_anchor(node, AssertionKind.END):
                has_end = True
        return has_start, has_end

    @staticmethod
    def is_branching(node: Node) -> bool:
        """Alternative nodes are group bodies and alternation branches."""
        return isinstance(node, Alternative)
