"""Read the Doxygen compound manifest (index.xml) into a reference map."""

import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from doxytree.config import INDEX_FILENAME
from doxytree.errors import ManifestMalformed, ManifestNotFound


@dataclass(frozen=True)
class ManifestRecord:
    """One declared compound: its kind, refid and display name."""

    kind: str
    refid: str
    name: str = ""


class ReferenceMap:
    """Multi-valued kind -> refid mapping that keeps declaration order.

    Duplicate records are kept; the loader decides which one materializes.
    """

    def __init__(self, entries: list[ManifestRecord]) -> None:
        self.entries = entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ManifestRecord]:
        return iter(self.entries)

    def kinds(self) -> set[str]:
        return {entry.kind for entry in self.entries}

    def select(self, predicate: Callable[[str], bool]) -> list[ManifestRecord]:
        """Records whose kind satisfies predicate, in declaration order."""
        return [entry for entry in self.entries if predicate(entry.kind)]


def parse_index_data(root: ET.Element, *, source: str) -> ReferenceMap:
    """Build a ReferenceMap from a parsed <doxygenindex> element.

    Args:
        root: Root element of the manifest.
        source: Where root came from, for messages.

    Returns:
        ReferenceMap with every well-formed compound record.
    """
    if root.tag != "doxygenindex":
        msg = f"Unable to find root element <doxygenindex> in file {source}"
        raise ManifestMalformed(msg)

    compounds = root.findall("compound")
    if not compounds:
        msg = f"No <compound> element in file {source}"
        raise ManifestMalformed(msg)

    entries: list[ManifestRecord] = []
    for position, compound in enumerate(compounds):
        kind = compound.get("kind")
        refid = compound.get("refid")
        if not kind or not refid:
            logger.warning(
                "compound error: record {} in {} is missing {}",
                position,
                source,
                "kind" if not kind else "refid",
            )
            continue
        entries.append(ManifestRecord(kind=kind, refid=refid, name=compound.findtext("name", "")))

    logger.debug("Read {} compound records from {}", len(entries), source)
    return ReferenceMap(entries)


def read_reference_map(input_dir: Path) -> ReferenceMap:
    """Read <input_dir>/index.xml.

    Raises:
        ManifestNotFound: The manifest cannot be read.
        ManifestMalformed: The manifest is not XML, or lacks its root or compounds.
    """
    index_path = Path(input_dir) / INDEX_FILENAME
    try:
        tree = ET.parse(index_path)
    except OSError as e:
        msg = f"Failed to read manifest {str(index_path)!r}: {e}"
        raise ManifestNotFound(msg) from e
    except ET.ParseError as e:
        msg = f"Failed to parse manifest {str(index_path)!r}: {e}"
        raise ManifestMalformed(msg) from e
    return parse_index_data(tree.getroot(), source=str(index_path))
