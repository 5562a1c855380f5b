"""Refid-keyed cache of materialized nodes."""

from collections.abc import Iterator

from loguru import logger

from doxytree.core.tree.navigation import iter_depth_first
from doxytree.errors import NodeNotFound
from doxytree.models.node import Node


class NodeCache:
    """Mapping from refid to the one Node instance materialized for it.

    A cache belongs to a single load; it is passed explicitly to every
    resolver call instead of living at module level.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}

    def __contains__(self, refid: object) -> bool:
        return refid in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def get(self, refid: str) -> Node | None:
        return self._nodes.get(refid)

    def find(self, refid: str) -> Node:
        """Return the node cached under refid.

        Raises:
            NodeNotFound: No node is cached under refid.
        """
        try:
            return self._nodes[refid]
        except KeyError:
            raise NodeNotFound(refid) from None

    def add(self, node: Node) -> None:
        """Register node under its refid; a second instance for a refid is rejected."""
        if node.refid is None:
            msg = f"Cannot cache a node without refid: {node!r}"
            raise ValueError(msg)
        existing = self._nodes.get(node.refid)
        if existing is not None and existing is not node:
            msg = f"Refid {node.refid!r} is already cached by another node"
            raise ValueError(msg)
        self._nodes[node.refid] = node

    def discard(self, refid: str) -> None:
        self._nodes.pop(refid, None)

    def clear(self) -> None:
        self._nodes.clear()

    def refids(self) -> set[str]:
        return set(self._nodes)

    def rebuild(self, root: Node) -> None:
        """Make the cache mirror exactly the nodes reachable from root."""
        self.clear()
        for node in iter_depth_first(root):
            if node.refid is None:
                continue
            existing = self._nodes.get(node.refid)
            if existing is not None and existing is not node:
                logger.warning("Duplicate node for refid {} in tree, keeping the first", node.refid)
                continue
            self._nodes[node.refid] = node
