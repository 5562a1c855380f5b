"""Assertions on tree shape shared by loader tests."""

from doxytree.core.tree.navigation import iter_depth_first
from doxytree.models.node import Node


def assert_single_ownership(root: Node) -> None:
    """Every reachable node is listed exactly once, by the node its parent points at."""
    listings: dict[int, int] = {}
    for node in iter_depth_first(root, include_self=True):
        for child in node.children:
            assert child.parent is node, f"{child.refid} listed by {node.refid}, owned by {child.parent}"
            listings[id(child)] = listings.get(id(child), 0) + 1
    duplicated = [count for count in listings.values() if count != 1]
    assert not duplicated


def reachable_refids(root: Node) -> set[str]:
    return {node.refid for node in iter_depth_first(root) if node.refid is not None}


def child_refids(node: Node) -> list[str | None]:
    return [child.refid for child in node.children]
