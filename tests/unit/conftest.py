"""Shared test fixtures."""

from pathlib import Path

import pytest

from doxytree.core.importer.loader import DoxygenIndex
from tests.unit.xml_builders import member, write_compound, write_index


@pytest.fixture
def scenario_dir(tmp_path: Path) -> Path:
    """C1 owns F1; group G1 claims C1."""
    write_index(tmp_path, [("class", "C1"), ("function", "F1"), ("group", "G1")])
    write_compound(
        tmp_path, "C1", "class", "C1", members=[member("function", "F1", "f1", brief="Does f.")]
    )
    write_compound(tmp_path, "G1", "group", "g1", title="Group One", inner=[("innerclass", "C1")])
    return tmp_path


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    """A namespace with two classes, a group, a header file and its directory.

    Classes are listed before their namespace, so they start out as stray
    root children.
    """
    write_index(
        tmp_path,
        [
            ("class", "classns_1_1Widget"),
            ("struct", "structns_1_1Helper"),
            ("namespace", "namespacens"),
            ("group", "group__core"),
            ("file", "widget_8h"),
            ("dir", "dir_src"),
        ],
    )
    write_compound(
        tmp_path,
        "classns_1_1Widget",
        "class",
        "ns::Widget",
        brief="A widget.",
        details='Uses <ref refid="structns_1_1Helper" kindref="compound">Helper</ref> to draw.',
        members=[
            member("function", "classns_1_1Widget_1a01", "draw", brief="Draws it."),
            member(
                "enum",
                "classns_1_1Widget_1a02",
                "Mode",
                enumvalues=[("classns_1_1Widget_1a03", "Fast")],
            ),
        ],
    )
    write_compound(tmp_path, "structns_1_1Helper", "struct", "ns::Helper", brief="Helps.")
    write_compound(
        tmp_path,
        "namespacens",
        "namespace",
        "ns",
        inner=[("innerclass", "classns_1_1Widget"), ("innerclass", "structns_1_1Helper")],
        members=[member("function", "namespacens_1a10", "make_widget", brief="Makes one.")],
    )
    write_compound(
        tmp_path,
        "group__core",
        "group",
        "core",
        title="Core API",
        brief="Core pieces.",
        inner=[("innerclass", "structns_1_1Helper")],
    )
    write_compound(
        tmp_path,
        "widget_8h",
        "file",
        "widget.h",
        inner=[("innerclass", "classns_1_1Widget"), ("innernamespace", "namespacens")],
    )
    write_compound(tmp_path, "dir_src", "dir", "src", inner=[("innerfile", "widget_8h")])
    return tmp_path


@pytest.fixture
def loaded_sample(sample_dir: Path) -> DoxygenIndex:
    """The sample directory, loaded but not finalized."""
    index = DoxygenIndex(sample_dir)
    index.load()
    return index
