"""Second pass over a loaded tree: load full detail and resolve cross-references."""

from dataclasses import dataclass

from loguru import logger

from doxytree.config import Config
from doxytree.core.tree.navigation import iter_depth_first
from doxytree.errors import NodeNotFound
from doxytree.models.cache import NodeCache
from doxytree.models.node import Node
from doxytree.protocols import TextPrinter


@dataclass(frozen=True)
class FinalizeFailure:
    """A node whose finalize raised, and why."""

    refid: str | None
    error: Exception


@dataclass(frozen=True)
class FinalizeStats:
    """Summary of a finalize walk."""

    nodes_finalized: int
    failures: tuple[FinalizeFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def finalize_tree(
    root: Node,
    config: Config,
    printer: TextPrinter,
    cache: NodeCache,
) -> FinalizeStats:
    """Finalize every node below root, parents before children.

    A node that fails is recorded and logged; its siblings and descendants are
    still finalized.

    Args:
        root: Root of the tree; it is not finalized itself.
        config: Options passed through to each node.
        printer: Description printer passed through to each node.
        cache: Lookup for cross-references.

    Returns:
        FinalizeStats with the number of successes and every failure.
    """
    finalized = 0
    failures: list[FinalizeFailure] = []

    for node in iter_depth_first(root):
        try:
            node.finalize(config, printer, cache)
        except NodeNotFound as e:
            logger.error("Broken reference in {}: {}", node.refid, e)
            failures.append(FinalizeFailure(refid=node.refid, error=e))
            continue
        except Exception as e:
            logger.warning("Failed to finalize {} error: {}", node.refid, e)
            failures.append(FinalizeFailure(refid=node.refid, error=e))
            continue
        finalized += 1

    logger.info("Finalize complete: {} finalized, {} failed", finalized, len(failures))
    return FinalizeStats(nodes_finalized=finalized, failures=tuple(failures))
