"""Presentation of resolved program graphs."""

from __future__ import annotations

import io
from typing import Any

import ujson as json
import yaml
from rich.console import Console, RenderableType
from rich.markup import escape
from rich.pretty import pretty_repr
from rich.tree import Tree

from .graph import Feature, ProgramGraph


def graph_to_dict(graph: ProgramGraph) -> dict[str, Any]:
    """Return the JSON-compatible, alias-keyed form of ``graph``."""
    return graph.model_dump(mode="json", by_alias=True)


def graph_to_json(graph: ProgramGraph, indent: int = 2) -> str:
    return json.dumps(graph_to_dict(graph), indent=indent, escape_forward_slashes=False)


def graph_to_yaml(graph: ProgramGraph) -> str:
    return yaml.safe_dump(graph_to_dict(graph), sort_keys=False)


def _feature_label(feature: Feature) -> str:
    return (
        f"[bold]{escape(feature.id)}[/] "
        f"[cyan]{escape(feature.status)}[/] "
        f"[magenta]{escape(feature.team)}[/] "
        f"[dim]{feature.start:%Y-%m-%d} → {feature.end:%Y-%m-%d}[/]"
    )


def _add_feature(parent: Tree, feature: Feature) -> None:
    branch = parent.add(_feature_label(feature))
    for child in feature.children:
        _add_feature(branch, child)


def graph_tree(graph: ProgramGraph) -> Tree:
    """Build a rich tree with one branch per program."""
    tree = Tree(f"[bold]Programs ({len(graph.programs)})[/]")
    for program in graph.programs:
        branch = tree.add(f"[bold green]{escape(program.id)}[/]")
        _add_feature(branch, program.root)
    return tree


def graph_debug(graph: ProgramGraph, max_width: int = 100) -> str:
    """Nested debug representation of the graph models."""
    return pretty_repr(graph, max_width=max_width)


def render_plain(renderable: RenderableType, width: int = 100) -> str:
    """Render a rich renderable to uncoloured text."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, highlight=False)
    console.print(renderable)
    return buffer.getvalue()


def dump_graph(graph: ProgramGraph, fmt: str = "json", indent: int = 2) -> str:
    """Serialise ``graph`` in one of the supported output formats."""
    if fmt == "json":
        return graph_to_json(graph, indent=indent)
    if fmt == "yaml":
        return graph_to_yaml(graph)
    if fmt == "tree":
        return render_plain(graph_tree(graph))
    if fmt == "debug":
        return graph_debug(graph)
    raise ValueError(f"Unknown output format: {fmt}")
