"""Resolve refids into nodes by reading Doxygen compound XML files."""

import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from doxytree.config import CONTAINER_KINDS, GROUP_KINDS
from doxytree.core.tree.navigation import is_ancestor
from doxytree.errors import EntityResolutionFailed
from doxytree.models.cache import NodeCache
from doxytree.models.node import Node

# Child elements of <compounddef> that point at other compounds.
_INNER_TAGS = ("innernamespace", "innerclass", "innergroup", "innerdir", "innerfile")


def owner_rank(node: Node) -> int:
    """How authoritative node is as the owner of its children.

    Groups beat language entities, which beat directories and files.
    """
    if node.kind in GROUP_KINDS:
        return 2
    if node.kind in CONTAINER_KINDS:
        return 0
    return 1


def may_claim(parent: Node, child: Node) -> bool:
    """Decide whether parent takes ownership of an already-built child."""
    current = child.parent
    if current is None:
        return True
    if current is parent:
        return False
    if current.is_root:
        # Files and dirs only pick up stray files and dirs, not stray classes.
        return parent.kind not in CONTAINER_KINDS or child.kind in CONTAINER_KINDS
    # Equal rank keeps the first claim.
    return owner_rank(parent) > owner_rank(current)


class _Journal:
    """Undo log for a single top-level resolve call."""

    def __init__(self, cache: NodeCache) -> None:
        self.cache = cache
        self.created = 0
        # Refids whose compound is still being read further up the call stack.
        self.in_progress: set[str] = set()
        self._undo: list[Callable[[], None]] = []

    def register(self, node: Node) -> None:
        self.cache.add(node)
        self.created += 1
        refid = node.refid or ""
        self._undo.append(lambda: self.cache.discard(refid))

    def adopt(self, parent: Node, child: Node) -> None:
        previous = child.parent
        child.parent = parent
        parent.children.append(child)

        def undo() -> None:
            for i in range(len(parent.children) - 1, -1, -1):
                if parent.children[i] is child:
                    del parent.children[i]
                    break
            child.parent = previous

        self._undo.append(undo)

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()


def _read_compounddef(path: Path, refid: str) -> ET.Element:
    root = ET.parse(path).getroot()
    compounddefs = [root] if root.tag == "compounddef" else root.findall("compounddef")
    for compounddef in compounddefs:
        if compounddef.get("id") == refid:
            return compounddef
    if compounddefs:
        return compounddefs[0]
    msg = f"No <compounddef> element in file {path}"
    raise ValueError(msg)


class CompoundReader:
    """Default entity resolver for a Doxygen XML output directory.

    Each compound is read from `<input_dir>/<refid>.xml`. Inner compounds are
    resolved recursively and members become child nodes. Construction is
    all-or-nothing: when anything fails, every cache entry, parent change and
    child append made during the call is undone before the error is raised.
    """

    def resolve(self, cache: NodeCache, input_dir: Path, refid: str, deep: bool) -> Node:
        cached = cache.get(refid)
        if cached is not None:
            return cached

        journal = _Journal(cache)
        try:
            node = self._resolve(journal, Path(input_dir), refid, deep)
        except Exception as e:
            journal.rollback()
            raise EntityResolutionFailed(refid, e) from e

        logger.debug("Resolved {} ({}), {} new node(s)", refid, node.kind, journal.created)
        return node

    def _resolve(self, journal: _Journal, input_dir: Path, refid: str, deep: bool) -> Node:
        cached = journal.cache.get(refid)
        if cached is not None:
            if deep:
                cached.load_brief()
            return cached

        path = input_dir / f"{refid}.xml"
        compounddef = _read_compounddef(path, refid)
        kind = compounddef.get("kind")
        if not kind:
            msg = f"Compound {refid!r} in {path} has no kind"
            raise ValueError(msg)

        node = Node(
            kind=kind,
            refid=refid,
            name=compounddef.findtext("compoundname", "").strip(),
            title=compounddef.findtext("title", "").strip(),
            source_path=path,
            brief_element=compounddef.find("briefdescription"),
            detail_element=compounddef.find("detaileddescription"),
        )
        journal.register(node)
        if deep:
            node.load_brief()

        journal.in_progress.add(refid)
        try:
            for inner in compounddef:
                if inner.tag not in _INNER_TAGS:
                    continue
                child_refid = inner.get("refid")
                if not child_refid:
                    msg = f"<{inner.tag}> without refid in {path}"
                    raise ValueError(msg)
                child = self._resolve(journal, input_dir, child_refid, deep)
                self._claim(journal, node, child)

            for memberdef in compounddef.iterfind("sectiondef/memberdef"):
                member = self._member(journal, memberdef, path, deep)
                self._claim(journal, node, member)
        finally:
            journal.in_progress.discard(refid)

        return node

    def _member(self, journal: _Journal, element: ET.Element, path: Path, deep: bool) -> Node:
        refid = element.get("id")
        if not refid:
            msg = f"<{element.tag}> without id in {path}"
            raise ValueError(msg)

        cached = journal.cache.get(refid)
        if cached is not None:
            if deep:
                cached.load_brief()
            return cached

        member = Node(
            kind=element.get("kind") or element.tag,
            refid=refid,
            name=element.findtext("name", "").strip(),
            source_path=path,
            brief_element=element.find("briefdescription"),
            detail_element=element.find("detaileddescription"),
        )
        journal.register(member)
        if deep:
            member.load_brief()

        for value in element.findall("enumvalue"):
            self._claim(journal, member, self._member(journal, value, path, deep))
        return member

    def _claim(self, journal: _Journal, parent: Node, child: Node) -> None:
        if child is parent:
            return
        if child.refid is not None and child.refid not in parent.declared_refids:
            parent.declared_refids.append(child.refid)
        if child.refid in journal.in_progress:
            # child claims parent itself once its own resolve returns.
            logger.debug("Not adopting {} under {}: still being resolved", child.refid, parent.refid)
            return
        if not may_claim(parent, child):
            return
        if is_ancestor(child, parent):
            logger.debug("Not adopting {} under {}: would create a cycle", child.refid, parent.refid)
            return
        journal.adopt(parent, child)
