"""doxytree command line: outline, inspect and render a Doxygen XML directory."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from pydantic import ValidationError

from doxytree.config import Config, load_config
from doxytree.core.importer.finalizer import FinalizeStats
from doxytree.core.importer.loader import DoxygenIndex
from doxytree.core.render.renderer import Renderer
from doxytree.core.tree.outline import render_tree_as_markdown
from doxytree.errors import (
    FinalizeFailed,
    ManifestMalformed,
    ManifestNotFound,
    NodeNotFound,
    RenderFailed,
    TemplateLoadFailed,
    TemplateNotFound,
)
from doxytree.logging_config import configure_logging
from doxytree.models.node import Node

app = typer.Typer(help="doxytree: load Doxygen XML output and render documentation pages.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _load(input_dir: Path) -> DoxygenIndex:
    """Load the index, exiting on fatal manifest errors."""
    index = DoxygenIndex(input_dir)
    try:
        index.load()
    except (ManifestNotFound, ManifestMalformed) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    return index


def _config(config_file: Path | None) -> Config:
    try:
        return load_config(config_file)
    except (OSError, ValueError, ValidationError) as e:
        logger.error("Invalid config: {}", e)
        raise typer.Exit(1) from e


def _finalize(index: DoxygenIndex, config: Config) -> FinalizeStats:
    try:
        stats = index.finalize(config)
    except FinalizeFailed as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    if not stats.ok:
        logger.warning("{} node(s) failed to finalize", len(stats.failures))
    return stats


def _exit_on_failures(stats: FinalizeStats) -> None:
    """Exit non-zero after the output was written when any node failed to finalize."""
    if not stats.ok:
        raise typer.Exit(1)


def _find(index: DoxygenIndex, refid: str) -> Node:
    try:
        return index.find(refid)
    except NodeNotFound as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _tree_json(node: Node, max_depth: int | None, depth: int = 0) -> dict[str, Any]:
    data: dict[str, Any] = {"refid": node.refid, "kind": node.kind, "name": node.display_name}
    if max_depth is None or depth < max_depth:
        data["children"] = [_tree_json(c, max_depth, depth + 1) for c in node.children]
    else:
        data["children_truncated"] = len(node.children)
    return data


@app.command()
def tree(
    input_dir: Path = typer.Argument(..., help="Doxygen XML output directory"),
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to print"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print who owns what after loading a Doxygen XML directory."""
    index = _load(input_dir)
    if output_json:
        typer.echo(json.dumps(_tree_json(index.root, max_depth), indent=2))
        return
    outline = render_tree_as_markdown(index.root, max_depth=max_depth)
    if not outline:
        typer.echo("(empty index)")
        return
    typer.echo(outline, nl=False)


@app.command()
def show(
    input_dir: Path = typer.Argument(..., help="Doxygen XML output directory"),
    refid: str = typer.Argument(..., help="Refid of the node to show"),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="JSON config file"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Load, finalize and print a single node."""
    config = _config(config_file)
    index = _load(input_dir)
    stats = _finalize(index, config)
    node = _find(index, refid)

    if output_json:
        typer.echo(json.dumps(node.to_data(), indent=2))
        _exit_on_failures(stats)
        return

    typer.echo(f"{node.kind} {node.display_name}  [refid={node.refid}]")
    if node.url:
        typer.echo(f"  url: {node.url}")
    if node.brief:
        typer.echo(f"\n{node.brief}")
    if node.details:
        typer.echo(f"\n{node.details}")
    if node.children:
        typer.echo(f"\n{len(node.children)} children:")
        for child in node.children:
            typer.echo(f"  {child.kind} {child.display_name}  [refid={child.refid}]")
    _exit_on_failures(stats)


@app.command(name="render")
def render_cmd(
    input_dir: Path = typer.Argument(..., help="Doxygen XML output directory"),
    refid: str = typer.Argument(..., help="Refid of the node to render"),
    templates: Path = typer.Option(..., "--templates", "-t", help="Template directory"),
    template: str = typer.Option(..., "--template", "-T", help="Template name to render"),
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="JSON config file"),
    ] = None,
) -> None:
    """Render one node through a named template."""
    config = _config(config_file)
    if output is not None:
        config = config.model_copy(update={"output_dir": output.parent})

    renderer = Renderer(config)
    try:
        renderer.load_templates(templates)
    except (ValueError, TemplateLoadFailed) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    index = _load(input_dir)
    stats = _finalize(index, config)
    node = _find(index, refid)

    try:
        if output is not None:
            path = renderer.render_to_file(template, output.name, node.to_data())
            typer.echo(f"Wrote {path}")
        else:
            typer.echo(renderer.render(template, node.to_data()), nl=False)
    except (TemplateNotFound, RenderFailed, ValueError) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    _exit_on_failures(stats)
