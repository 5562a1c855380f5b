"""Tests for tree navigation helpers."""

from doxytree.core.importer.loader import DoxygenIndex
from doxytree.core.tree.navigation import (
    breadcrumbs,
    is_ancestor,
    iter_depth_first,
    iter_with_depth,
)


def test_iter_depth_first_visits_parents_before_children(loaded_sample: DoxygenIndex) -> None:
    order = [n.refid for n in iter_depth_first(loaded_sample.root)]
    assert order == [
        "namespacens",
        "classns_1_1Widget",
        "classns_1_1Widget_1a01",
        "classns_1_1Widget_1a02",
        "classns_1_1Widget_1a03",
        "namespacens_1a10",
        "group__core",
        "structns_1_1Helper",
        "dir_src",
        "widget_8h",
    ]


def test_iter_with_depth_respects_max_depth(loaded_sample: DoxygenIndex) -> None:
    pairs = [(n.refid, d) for n, d in iter_with_depth(loaded_sample.root, max_depth=1)]
    assert pairs == [("namespacens", 1), ("group__core", 1), ("dir_src", 1)]


def test_breadcrumbs_exclude_root_and_node(loaded_sample: DoxygenIndex) -> None:
    fast = loaded_sample.find("classns_1_1Widget_1a03")
    assert [n.refid for n in breadcrumbs(fast)] == [
        "namespacens",
        "classns_1_1Widget",
        "classns_1_1Widget_1a02",
    ]
    assert breadcrumbs(loaded_sample.find("namespacens")) == ()


def test_is_ancestor(loaded_sample: DoxygenIndex) -> None:
    ns = loaded_sample.find("namespacens")
    draw = loaded_sample.find("classns_1_1Widget_1a01")
    assert is_ancestor(ns, draw)
    assert is_ancestor(draw, draw)
    assert not is_ancestor(draw, ns)
    assert is_ancestor(loaded_sample.root, draw)
