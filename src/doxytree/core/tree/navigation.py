"""Tree navigation: depth-first walks, breadcrumbs, ancestry checks."""

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doxytree.models.node import Node


def iter_depth_first(node: "Node", *, include_self: bool = False) -> Iterator["Node"]:
    """Yield the subtree below node, each parent before its children.

    Children are visited in list order. A node listed twice is yielded once.
    """
    seen: set[int] = set()
    stack = [node] if include_self else list(reversed(node.children))
    if not include_self:
        seen.add(id(node))
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(reversed(current.children))


def iter_with_depth(node: "Node", *, max_depth: int | None = None) -> Iterator[tuple["Node", int]]:
    """Like iter_depth_first, but also yield the depth below node (children are 1)."""
    seen: set[int] = {id(node)}
    stack = [(child, 1) for child in reversed(node.children)]
    while stack:
        current, depth = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current, depth
        if max_depth is None or depth < max_depth:
            stack.extend((child, depth + 1) for child in reversed(current.children))


def breadcrumbs(node: "Node") -> tuple["Node", ...]:
    """Get the ancestors of node, from the top-level entity down to its parent.

    The synthetic root is excluded.
    """
    chain: list[Node] = []
    seen: set[int] = {id(node)}
    current = node.parent
    while current is not None and not current.is_root and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        current = current.parent
    return tuple(reversed(chain))


def is_ancestor(candidate: "Node", node: "Node") -> bool:
    """True if candidate is node itself or appears on node's parent chain."""
    seen: set[int] = set()
    current: Node | None = node
    while current is not None and id(current) not in seen:
        if current is candidate:
            return True
        seen.add(id(current))
        current = current.parent
    return False
