"""Render a documentation tree as an indented markdown outline."""

import io

from doxytree.core.tree.navigation import iter_with_depth
from doxytree.models.node import Node


def render_tree_as_markdown(
    root: Node,
    *,
    max_depth: int | None = None,
    include_briefs: bool = True,
) -> str:
    """Render the descendants of root as a bullet-list hierarchy.

    Args:
        root: Node to start from; it is not printed itself.
        max_depth: Max levels below root to include (None = unlimited).
        include_briefs: Whether to print brief descriptions under entries.

    Returns:
        Markdown string, one bullet per node.
    """
    out = io.StringIO()
    for node, depth in iter_with_depth(root, max_depth=max_depth):
        indent = "    " * (depth - 1)
        out.write(f"{indent}- {node.kind} `{node.display_name}` ({node.refid})\n")

        if include_briefs and node.brief:
            for line in node.brief.split("\n"):
                out.write(f"{indent}  > {line}\n")

        # Truncation indicator when children are cut off by max_depth
        if max_depth is not None and depth == max_depth and node.children:
            child_indent = "    " * depth
            count = len(node.children)
            noun = "child" if count == 1 else "children"
            out.write(f"{child_indent}- ... ({count} more {noun}, refid={node.refid})\n")

    return out.getvalue()
