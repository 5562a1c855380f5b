"""Load Doxygen XML output into a single-owner documentation tree."""

from doxytree.config import Config, load_config
from doxytree.core.importer.loader import DoxygenIndex, LoadReport, load_index
from doxytree.core.render.renderer import Renderer
from doxytree.models.cache import NodeCache
from doxytree.models.node import Node
from doxytree.protocols import EntityResolver, TextPrinter

__all__ = [
    "Config",
    "DoxygenIndex",
    "EntityResolver",
    "LoadReport",
    "Node",
    "NodeCache",
    "Renderer",
    "TextPrinter",
    "load_config",
    "load_index",
]
