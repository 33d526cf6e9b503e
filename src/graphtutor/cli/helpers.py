from __future__ import annotations

import json
import pathlib
from typing import TYPE_CHECKING, Any

import click
import tabulate

from graphtutor import config
from graphtutor.types import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from graphtutor.graph import Edge, Graph
    from graphtutor.types import VertexID


def output_format_options[F: Callable[..., Any]](func: F) -> F:
    """Add the --json and --md flags, stored as ``output_format``."""
    func = click.option(
        "--md", "output_format", flag_value=OutputFormat.MD, help="Output as Markdown table"
    )(func)
    return click.option(
        "--json", "output_format", flag_value=OutputFormat.JSON, default=None, help="Output as JSON"
    )(func)


graph_file_argument = click.argument(
    "graph_file", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path)
)


def vertex_id(graph: Graph, label: str) -> VertexID:
    """Resolve a vertex label given on the command line."""
    return graph.vertex_by_label(label).id


def format_weight(value: float | None) -> str:
    """Format a weight with the configured significant digits, '-' for None."""
    if value is None:
        return "-"
    return f"{value:.{config.get_display_precision()}g}"


def format_table(
    rows: list[list[str]],
    headers: list[str],
    output_format: OutputFormat | None,
    empty_message: str,
) -> str:
    """Format rows as plain/markdown table."""
    if not rows:
        return empty_message

    tablefmt = "github" if output_format == OutputFormat.MD else "plain"
    return tabulate.tabulate(rows, headers=headers, tablefmt=tablefmt, disable_numparse=True)


def format_json(data: Mapping[str, Any] | list[Any]) -> str:
    """Format data as indented JSON string."""
    return json.dumps(data, indent=2)


def edge_rows(graph: Graph, edges: Iterable[Edge]) -> list[list[str]]:
    return [[graph.describe_edge(edge), format_weight(edge.weight)] for edge in edges]


def walk_labels(graph: Graph, start: VertexID, edges: Iterable[Edge]) -> list[str]:
    """Vertex labels visited by walking ``edges`` in order from ``start``."""
    labels = [graph.label(start)]
    current = start
    for edge in edges:
        nxt = edge.traverse(current)
        if nxt is None:
            raise ValueError(f"Edge {graph.describe_edge(edge)} does not continue the walk")
        current = nxt
        labels.append(graph.label(current))
    return labels
