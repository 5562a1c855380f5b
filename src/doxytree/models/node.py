"""Domain model for documentable entities."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element

from doxytree.core.render.links import node_url
from doxytree.core.render.markdown import plain_text
from doxytree.core.tree.navigation import breadcrumbs

if TYPE_CHECKING:
    from doxytree.config import Config
    from doxytree.models.cache import NodeCache
    from doxytree.protocols import TextPrinter

ROOT_KIND = "index"

# Kinds documented inside a compound page rather than on a page of their own.
MEMBER_KINDS: frozenset[str] = frozenset(
    {
        "function",
        "variable",
        "typedef",
        "enum",
        "enumvalue",
        "define",
        "friend",
        "signal",
        "slot",
        "property",
        "event",
    }
)


@dataclass(eq=False)
class Node:
    """A single entity in the documentation tree.

    Nodes compare by identity. `children` owns the subtree; `parent` is a
    back-reference for lookups and ownership checks only.
    """

    kind: str
    refid: str | None = None
    name: str = ""
    title: str = ""
    brief: str = ""
    details: str = ""
    url: str = ""
    source_path: Path | None = None
    parent: "Node | None" = field(default=None, repr=False)
    children: list["Node"] = field(default_factory=list, repr=False)
    declared_refids: list[str] = field(default_factory=list, repr=False)
    references: list["Node"] = field(default_factory=list, repr=False)
    brief_element: Element | None = field(default=None, repr=False)
    detail_element: Element | None = field(default=None, repr=False)
    brief_loaded: bool = False
    finalized: bool = False

    @classmethod
    def make_root(cls) -> "Node":
        """Create the synthetic, never-cached root of a tree."""
        return cls(kind=ROOT_KIND, name="index")

    @property
    def is_root(self) -> bool:
        return self.refid is None and self.kind == ROOT_KIND

    @property
    def is_member(self) -> bool:
        return self.kind in MEMBER_KINDS

    @property
    def display_name(self) -> str:
        return self.title or self.name

    def load_brief(self) -> None:
        """Load the brief description as plain text, once."""
        if self.brief_loaded:
            return
        if self.brief_element is not None:
            self.brief = plain_text(self.brief_element)
        self.brief_loaded = True

    def reference_refids(self) -> list[str]:
        """Refids of every <ref> in the descriptions, first occurrence order."""
        seen: dict[str, None] = {}
        for element in (self.brief_element, self.detail_element):
            if element is None:
                continue
            for ref in element.iter("ref"):
                refid = ref.get("refid")
                if refid:
                    seen.setdefault(refid, None)
        return list(seen)

    def finalize(self, config: "Config", printer: "TextPrinter", cache: "NodeCache") -> None:
        """Load full detail content and resolve cross-references.

        Raises NodeNotFound when a description references an unknown refid.
        """
        self.url = node_url(self, config)
        self.references = [cache.find(refid) for refid in self.reference_refids()]
        if self.brief_element is not None:
            self.brief = printer.print(self.brief_element, cache)
        self.details = printer.print(self.detail_element, cache)
        self.brief_loaded = True
        self.finalized = True

    def summary(self) -> dict[str, Any]:
        """Short description of this node, used for lists inside templates."""
        return {
            "refid": self.refid,
            "kind": self.kind,
            "name": self.name,
            "title": self.display_name,
            "brief": self.brief,
            "url": self.url,
        }

    def to_data(self) -> dict[str, Any]:
        """JSON-compatible view of this node for template rendering."""
        data = self.summary()
        data["details"] = self.details
        data["parent"] = (
            self.parent.summary() if self.parent is not None and not self.parent.is_root else None
        )
        data["breadcrumbs"] = [crumb.summary() for crumb in breadcrumbs(self)]
        data["children"] = [child.summary() for child in self.children]
        data["references"] = [ref.summary() for ref in self.references]
        return data
