"""Load a Doxygen XML directory into a single-owner documentation tree."""

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from doxytree.config import CONTAINER_KINDS, GROUP_KINDS, LANGUAGE_KINDS, Config
from doxytree.core.importer.compound_reader import CompoundReader
from doxytree.core.importer.finalizer import FinalizeStats, finalize_tree
from doxytree.core.importer.index_reader import ManifestRecord, ReferenceMap, read_reference_map
from doxytree.core.render.markdown import MarkdownPrinter
from doxytree.core.tree.navigation import iter_depth_first
from doxytree.errors import FinalizeFailed
from doxytree.models.cache import NodeCache
from doxytree.models.node import Node
from doxytree.protocols import EntityResolver, TextPrinter


@dataclass(frozen=True)
class Stage:
    """One discovery pass: which compound kinds it handles and how deeply."""

    name: str
    kinds: frozenset[str]
    deep: bool


# Order matters: later stages may take ownership away from earlier ones.
STAGES: tuple[Stage, ...] = (
    Stage(name="language", kinds=LANGUAGE_KINDS, deep=False),
    Stage(name="group", kinds=GROUP_KINDS, deep=True),
    Stage(name="container", kinds=CONTAINER_KINDS, deep=True),
)
HANDLED_KINDS: frozenset[str] = frozenset().union(*(stage.kinds for stage in STAGES))


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one manifest record."""

    record: ManifestRecord
    node: Node | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.node is not None


@dataclass(frozen=True)
class StageReport:
    """Summary of one stage."""

    name: str
    resolved: int
    cached: int
    removed: int
    failures: tuple[Resolution, ...] = ()


@dataclass(frozen=True)
class LoadReport:
    """Summary of a full load."""

    stages: tuple[StageReport, ...]
    nodes_cached: int

    @property
    def resolved(self) -> int:
        return sum(stage.resolved for stage in self.stages)

    @property
    def cached(self) -> int:
        return sum(stage.cached for stage in self.stages)

    @property
    def failures(self) -> tuple[Resolution, ...]:
        return tuple(f for stage in self.stages for f in stage.failures)


class DoxygenIndex:
    """The documentation tree of one Doxygen XML directory.

    `load()` runs the language, group and container stages over the manifest,
    cleaning up stale ownership after each, then rebuilds the refid cache from
    the final tree. `finalize()` loads full content once the tree is complete.
    """

    def __init__(self, input_dir: str | Path, *, resolver: EntityResolver | None = None) -> None:
        self.input_dir = Path(input_dir)
        self.resolver: EntityResolver = resolver or CompoundReader()
        self.root = Node.make_root()
        self.cache = NodeCache()

    def load(self) -> LoadReport:
        """Build the tree.

        Raises:
            ManifestNotFound: index.xml cannot be read.
            ManifestMalformed: index.xml lacks its root or compound records.
        """
        reference_map = read_reference_map(self.input_dir)
        ignored = sorted(reference_map.kinds() - HANDLED_KINDS)
        if ignored:
            logger.debug("Ignoring compound kinds no stage handles: {}", ", ".join(ignored))

        stage_reports: list[StageReport] = []
        for stage in STAGES:
            resolutions, cached = self._run_stage(stage, reference_map)
            removed = self.cleanup()
            failures = tuple(r for r in resolutions if not r.ok)
            stage_reports.append(
                StageReport(
                    name=stage.name,
                    resolved=len(resolutions) - len(failures),
                    cached=cached,
                    removed=removed,
                    failures=failures,
                )
            )
            logger.debug(
                "Stage {}: {} resolved, {} cached, {} failed, {} stale listings removed",
                stage.name, len(resolutions) - len(failures), cached, len(failures), removed,
            )

        self.cache.rebuild(self.root)

        report = LoadReport(stages=tuple(stage_reports), nodes_cached=len(self.cache))
        logger.info(
            "Load complete: {} resolved, {} already cached, {} failed, {} nodes",
            report.resolved, report.cached, len(report.failures), report.nodes_cached,
        )
        return report

    def _run_stage(self, stage: Stage, reference_map: ReferenceMap) -> tuple[list[Resolution], int]:
        resolutions: list[Resolution] = []
        cached = 0

        for record in reference_map.select(stage.kinds.__contains__):
            if record.refid in self.cache:
                cached += 1
                continue

            resolution = self._resolve_entry(record, deep=stage.deep)
            resolutions.append(resolution)
            if resolution.node is None:
                logger.warning(
                    "Failed to parse member {} error: {}", record.refid, resolution.error
                )
                continue

            node = resolution.node
            if not any(child is node for child in self.root.children):
                self.root.children.append(node)
            if node.parent is None:
                node.parent = self.root

        return resolutions, cached

    def _resolve_entry(self, record: ManifestRecord, *, deep: bool) -> Resolution:
        try:
            node = self.resolver.resolve(self.cache, self.input_dir, record.refid, deep)
        except Exception as e:
            return Resolution(record=record, error=e)
        return Resolution(record=record, node=node)

    def cleanup(self) -> int:
        """Remove child listings whose parent pointer now points elsewhere.

        Starts at the root and descends into the children that stay, so a
        node taken over by a later stage is listed only by its new owner.

        Returns:
            Number of listings removed.
        """
        removed = 0
        for node in iter_depth_first(self.root, include_self=True):
            kept: list[Node] = []
            seen: set[int] = set()
            for child in node.children:
                if child.parent is node and id(child) not in seen:
                    seen.add(id(child))
                    kept.append(child)
            removed += len(node.children) - len(kept)
            node.children[:] = kept
        return removed

    def finalize(self, config: Config, printer: TextPrinter | None = None) -> FinalizeStats:
        """Load full detail for every node and resolve cross-references.

        Raises:
            FinalizeFailed: config.strict_references is set and any node failed.
        """
        stats = finalize_tree(self.root, config, printer or MarkdownPrinter(config), self.cache)
        if config.strict_references and stats.failures:
            raise FinalizeFailed(list(stats.failures))
        return stats

    def find(self, refid: str) -> Node:
        """Return the node for refid.

        Raises:
            NodeNotFound: refid is not part of the tree.
        """
        return self.cache.find(refid)


def load_index(input_dir: str | Path, *, resolver: EntityResolver | None = None) -> DoxygenIndex:
    """Create a DoxygenIndex for input_dir and load it."""
    index = DoxygenIndex(input_dir, resolver=resolver)
    index.load()
    return index
