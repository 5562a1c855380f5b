"""Tests for the Doxygen compound XML resolver."""

from pathlib import Path

import pytest

from doxytree.core.importer.compound_reader import CompoundReader, may_claim, owner_rank
from doxytree.errors import EntityResolutionFailed
from doxytree.models.cache import NodeCache
from doxytree.models.node import Node
from tests.unit.tree_checks import child_refids
from tests.unit.xml_builders import member, write_compound


def test_resolve_builds_members_and_enum_values(sample_dir: Path) -> None:
    cache = NodeCache()
    widget = CompoundReader().resolve(cache, sample_dir, "classns_1_1Widget", False)

    assert widget.kind == "class"
    assert widget.name == "ns::Widget"
    assert widget.source_path == sample_dir / "classns_1_1Widget.xml"
    assert child_refids(widget) == ["classns_1_1Widget_1a01", "classns_1_1Widget_1a02"]

    mode = cache.find("classns_1_1Widget_1a02")
    assert mode.kind == "enum"
    assert mode.parent is widget
    fast = cache.find("classns_1_1Widget_1a03")
    assert fast.kind == "enumvalue"
    assert fast.name == "Fast"
    assert fast.parent is mode
    assert widget.parent is None


def test_shallow_resolve_leaves_brief_unloaded(sample_dir: Path) -> None:
    cache = NodeCache()
    widget = CompoundReader().resolve(cache, sample_dir, "classns_1_1Widget", False)
    assert widget.brief == ""
    assert widget.brief_loaded is False
    assert widget.brief_element is not None


def test_deep_resolve_loads_brief_as_plain_text(sample_dir: Path) -> None:
    cache = NodeCache()
    group = CompoundReader().resolve(cache, sample_dir, "group__core", True)

    assert group.brief == "Core pieces."
    assert group.title == "Core API"
    assert group.display_name == "Core API"
    assert cache.find("structns_1_1Helper").brief == "Helps."


def test_deep_resolve_loads_brief_of_cached_children(sample_dir: Path) -> None:
    cache = NodeCache()
    reader = CompoundReader()
    helper = reader.resolve(cache, sample_dir, "structns_1_1Helper", False)
    assert helper.brief == ""

    reader.resolve(cache, sample_dir, "group__core", True)

    assert helper.brief == "Helps."


def test_resolve_returns_cached_node_unchanged(sample_dir: Path) -> None:
    cache = NodeCache()
    existing = Node(kind="class", refid="classns_1_1Widget", name="preloaded")
    cache.add(existing)

    result = CompoundReader().resolve(cache, sample_dir, "classns_1_1Widget", True)

    assert result is existing
    assert result.children == []
    assert len(cache) == 1


def test_missing_file_raises_and_leaves_cache_untouched(tmp_path: Path) -> None:
    cache = NodeCache()
    with pytest.raises(EntityResolutionFailed) as info:
        CompoundReader().resolve(cache, tmp_path, "classMissing", False)
    assert info.value.refid == "classMissing"
    assert isinstance(info.value.cause, FileNotFoundError)
    assert len(cache) == 0


def test_partial_failure_undoes_claims_on_cached_nodes(tmp_path: Path) -> None:
    write_compound(tmp_path, "A", "class", "A")
    write_compound(
        tmp_path,
        "N",
        "namespace",
        "N",
        inner=[("innerclass", "A")],
        members=[member("function", "N_1f", "f"), "<memberdef kind='function'><name>x</name></memberdef>"],
    )
    cache = NodeCache()
    reader = CompoundReader()
    root = Node.make_root()
    a = reader.resolve(cache, tmp_path, "A", False)
    a.parent = root
    root.children.append(a)

    with pytest.raises(EntityResolutionFailed, match="without id"):
        reader.resolve(cache, tmp_path, "N", False)

    assert a.parent is root
    assert cache.refids() == {"A"}


def test_group_outranks_namespace_but_file_does_not() -> None:
    namespace = Node(kind="namespace", refid="ns")
    group = Node(kind="group", refid="g")
    header = Node(kind="file", refid="h")
    cls = Node(kind="class", refid="c", parent=namespace)

    assert owner_rank(group) > owner_rank(namespace) > owner_rank(header)
    assert may_claim(group, cls)
    assert not may_claim(header, cls)


def test_stray_nodes_are_claimable_except_classes_by_files() -> None:
    root = Node.make_root()
    stray_class = Node(kind="class", refid="c", parent=root)
    stray_file = Node(kind="file", refid="f", parent=root)
    directory = Node(kind="dir", refid="d")
    namespace = Node(kind="namespace", refid="ns")

    assert may_claim(namespace, stray_class)
    assert not may_claim(stray_file, stray_class)
    assert may_claim(directory, stray_file)
    assert may_claim(namespace, Node(kind="class", refid="fresh"))


def test_mutual_inner_classes_stay_under_the_first_resolved(tmp_path: Path) -> None:
    write_compound(tmp_path, "A", "class", "A", inner=[("innerclass", "B")])
    write_compound(tmp_path, "B", "class", "B", inner=[("innerclass", "A")])

    cache = NodeCache()
    a = CompoundReader().resolve(cache, tmp_path, "A", False)
    b = cache.find("B")

    assert b.parent is a
    assert a.parent is None
    assert a.children == [b]
    assert b.children == []
    assert b.declared_refids == ["A"]
