from dataclasses import dataclass
from typing import Optional

from glyphscope_ast import (
    Alternative,
    ASTWalker,
    Character,
    CharacterSet,
    Node,
    Pattern,
    Quantifier,
    parse_pattern,
)


def _char(ch: str, pos: int = 0) -> Character:
    return Character(start=pos, end=pos + 1, raw=ch, value=ord(ch))


def test_iter_nodes_pre_order():
    tree = parse_pattern("ab").tree
    nodes = list(ASTWalker.iter_nodes(tree))
    assert [type(n) for n in nodes] == [Pattern, Alternative, Character, Character]
    assert [n.raw for n in nodes[2:]] == ["a", "b"]


def test_iter_nodes_visits_shared_node_once():
    shared = _char("a")
    alternative = Alternative(start=0, end=2, raw="aa", elements=(shared, shared))
    nodes = list(ASTWalker.iter_nodes(alternative))
    assert len(nodes) == 2


@dataclass(frozen=True)
class LinkedAlternative(Alternative):
    parent: Optional[Node] = None


def test_iter_nodes_skips_parent_field():
    owner = _char("p")
    child = _char("c")
    # The parent also shows up among the children and must not be followed
    node = LinkedAlternative(start=0, end=1, raw="c", elements=(child, owner), parent=owner)
    nodes = list(ASTWalker.iter_nodes(node))
    assert all(n is not owner for n in nodes)
    assert [n.raw for n in nodes] == ["c", "c"]


def test_walk_applies_callback_to_every_node():
    tree = parse_pattern("a|b").tree
    seen = []
    ASTWalker.walk(tree, seen.append)
    assert len(seen) == 5
    assert seen[0] is tree


def test_find_all_by_type():
    tree = parse_pattern("a+.b*").tree
    quantifiers = ASTWalker.find_all_by_type(tree, Quantifier)
    assert [q.raw for q in quantifiers] == ["a+", "b*"]
    assert len(ASTWalker.find_all_by_type(tree, Quantifier, CharacterSet)) == 3


def test_contains_excludes_root_by_default():
    (quantifier,) = parse_pattern("a+").tree.alternatives[0].elements
    is_quantifier = lambda n: isinstance(n, Quantifier)
    assert not ASTWalker.contains(quantifier, is_quantifier)
    assert ASTWalker.contains(quantifier, is_quantifier, include_root=True)


def test_traversals_are_independent():
    tree = parse_pattern("(a)(b)").tree
    first = list(ASTWalker.iter_nodes(tree))
    second = list(ASTWalker.iter_nodes(tree))
    assert first == second
