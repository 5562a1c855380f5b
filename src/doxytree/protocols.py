"""Protocols for the collaborators the index loader depends on."""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from xml.etree.ElementTree import Element

if TYPE_CHECKING:
    from doxytree.models.cache import NodeCache
    from doxytree.models.node import Node


@runtime_checkable
class EntityResolver(Protocol):
    """Protocol for turning a refid into a materialized node subtree."""

    def resolve(self, cache: "NodeCache", input_dir: Path, refid: str, deep: bool) -> "Node":
        """Return the node for refid, registering every new node in cache.

        Must return the cached node unchanged on a cache hit and must leave
        the cache untouched when it raises.
        """
        ...


@runtime_checkable
class TextPrinter(Protocol):
    """Protocol for printing Doxygen description markup during finalize."""

    def print(self, element: Element | None, cache: "NodeCache") -> str:
        """Render a description element to text, resolving refs through cache."""
        ...
