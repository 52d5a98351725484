from typing import Callable, Iterator

from .node_types import Node

# Fields that point back up the tree and must never be followed
_SKIPPED_FIELDS = frozenset({"parent"})


class ASTWalker:
    """Utilities for traversing and searching the pattern tree"""

    @staticmethod
    def iter_nodes(node: Node) -> Iterator[Node]:
        """Yield every node depth-first, pre-order, starting with ``node`` itself.

        Node identities already yielded are skipped, so shared sub-trees are
        visited once and a cycle cannot recurse forever.
        """
        seen: set[int] = set()
        stack = [node]
        while stack:
            current = stack.pop()
            if current is None or id(current) in seen:
                continue
            seen.add(id(current))
            yield current
            # Reverse so the leftmost child is visited first
            stack.extend(reversed(ASTWalker._children_of(current)))

    @staticmethod
    def walk(node: Node, callback: Callable[[Node], None]):
        """Perform a depth-first traversal of the tree"""
        for current in ASTWalker.iter_nodes(node):
            callback(current)

    @staticmethod
    def find_all_by_type(node: Node, *types: type) -> list[Node]:
        """Find all nodes (including ``node``) that are instances of ``types``"""
        return [n for n in ASTWalker.iter_nodes(node) if isinstance(n, types)]

    @staticmethod
    def contains(node: Node, predicate: Callable[[Node], bool], include_root: bool = False) -> bool:
        """Check whether any node of the sub-tree satisfies ``predicate``"""
        for current in ASTWalker.iter_nodes(node):
            if current is node and not include_root:
                continue
            if predicate(current):
                return True
        return False

    @staticmethod
    def _children_of(node: Node) -> tuple[Node, ...]:
        skipped = [getattr(node, name) for name in _SKIPPED_FIELDS if getattr(node, name, None) is not None]
        if not skipped:
            return node.children()
        return tuple(c for c in node.children() if not any(c is s for s in skipped))
