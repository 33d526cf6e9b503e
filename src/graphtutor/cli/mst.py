from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtutor import autoplay, documents
from graphtutor.cli import decorators as cli_decorators
from graphtutor.cli import helpers as cli_helpers
from graphtutor.prim_table import PrimTable
from graphtutor.types import OutputFormat

if TYPE_CHECKING:
    import pathlib

    from graphtutor.graph import Graph


def _table_tree(graph: Graph, start: str | None) -> tuple[list[tuple[str, float]], bool, float]:
    table = PrimTable.from_graph(graph)
    row = 0
    if start is not None:
        row = table.labels.index(graph.vertex_by_label(start).label)
    autoplay.solve_prim_table(table, row)
    edges = [(f"{tree}-{new}", weight) for tree, new, weight in table.tree]
    return edges, table.is_complete(), table.current_weight()


@cli_decorators.graphtutor_command("mst")
@cli_helpers.graph_file_argument
@click.option(
    "--algorithm",
    type=click.Choice(["kruskal", "prim", "table"]),
    default="kruskal",
    show_default=True,
    help="Algorithm used to build the tree ('table' runs Prim on the distance table)",
)
@click.option("--start", help="Seed vertex label for Prim (default: first label)")
@cli_helpers.output_format_options
def mst(
    graph_file: pathlib.Path,
    algorithm: str,
    start: str | None,
    output_format: OutputFormat | None,
) -> None:
    """Build a minimum spanning tree of the graph in GRAPH_FILE.

    Edges are listed in the order the algorithm selects them.
    """
    graph = documents.load_graph(graph_file)
    if algorithm == "table":
        edges, complete, weight = _table_tree(graph, start)
    else:
        if algorithm == "prim":
            seed = cli_helpers.vertex_id(graph, start) if start is not None else None
            session = autoplay.solve_prim(graph, seed)
        else:
            if start is not None:
                raise click.UsageError("--start only applies to --algorithm prim or table")
            session = autoplay.solve_kruskal(graph)
        tree = session.subgraph.edges.values()
        edges = [(graph.describe_edge(edge), edge.weight) for edge in tree]
        complete, weight = session.is_complete(), session.current_weight()

    if output_format == OutputFormat.JSON:
        click.echo(
            cli_helpers.format_json(
                {
                    "algorithm": algorithm,
                    "complete": complete,
                    "weight": weight,
                    "edges": [name for name, _weight in edges],
                }
            )
        )
        return

    if not complete:
        click.echo("Graph is not connected; showing a spanning forest.", err=True)
    rows = [[name, cli_helpers.format_weight(edge_weight)] for name, edge_weight in edges]
    click.echo(cli_helpers.format_table(rows, ["Edge", "Weight"], output_format, "No edges."))
    click.echo(f"\nTotal weight: {cli_helpers.format_weight(weight)}")
