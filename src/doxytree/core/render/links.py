"""Build link targets for nodes."""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doxytree.config import Config
    from doxytree.models.node import Node

_ANCHOR_STRIP = re.compile(r"[^a-z0-9_\- ]")


def anchor(name: str) -> str:
    """Markdown-style heading anchor for a member name."""
    slug = _ANCHOR_STRIP.sub("", name.strip().lower())
    return slug.replace(" ", "-")


def page_url(refid: str, config: "Config") -> str:
    name = refid.lower() if config.link_lowercase else refid
    return f"{config.base_url}{name}{config.link_suffix}"


def node_url(node: "Node", config: "Config") -> str:
    """Link target of node.

    Members owned by a compound link to an anchor on the owner's page;
    everything else gets a page of its own.
    """
    if node.refid is None:
        return ""
    owner = node.parent
    if node.is_member and owner is not None and not owner.is_root:
        if owner.is_member:
            # Enum values live on the page of the enum's owner.
            return node_url(owner, config).split("#", 1)[0] + "#" + anchor(node.name)
        return node_url(owner, config) + "#" + anchor(node.name)
    return page_url(node.refid, config)
