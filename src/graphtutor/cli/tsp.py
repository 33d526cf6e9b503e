from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtutor import autoplay, documents
from graphtutor.cli import decorators as cli_decorators
from graphtutor.cli import helpers as cli_helpers
from graphtutor.types import ErrorKind, OutputFormat

if TYPE_CHECKING:
    import pathlib


@cli_decorators.graphtutor_command("tsp")
@cli_helpers.graph_file_argument
@click.option("--start", help="Start vertex of the nearest-neighbour tour (default: first label)")
@click.option("--delete", help="Vertex deleted for the lower bound (default: first label)")
@cli_helpers.output_format_options
def tsp(
    graph_file: pathlib.Path,
    start: str | None,
    delete: str | None,
    output_format: OutputFormat | None,
) -> None:
    """Compute travelling salesman bounds for the graph in GRAPH_FILE.

    The graph must be complete and Euclidean.
    """
    graph = documents.load_graph(graph_file)
    start_id = cli_helpers.vertex_id(graph, start) if start is not None else None
    delete_id = cli_helpers.vertex_id(graph, delete) if delete is not None else None
    session = autoplay.solve_tsp(graph, start_id, delete_id)
    bounds = session.bounds()
    if bounds is None:
        raise click.ClickException(ErrorKind.NOT_COMPLETE_EUCLIDEAN.message)

    assert session.start_vertex is not None
    tour = cli_helpers.walk_labels(graph, session.start_vertex, session.tour)
    tree = session.spanning_tree
    tree_edges = list(tree.edges.values()) if tree is not None else []

    if output_format == OutputFormat.JSON:
        click.echo(
            cli_helpers.format_json(
                {
                    **bounds,
                    "tour": tour,
                    "spanning_tree": [graph.describe_edge(edge) for edge in tree_edges],
                    "added_back": [graph.describe_edge(edge) for edge in session.added_back],
                }
            )
        )
        return

    click.echo(f"Nearest-neighbour tour: {' -> '.join(tour)}")
    click.echo(f"Upper bound: {cli_helpers.format_weight(bounds['upper_bound'])}\n")
    rows = cli_helpers.edge_rows(graph, tree_edges) + [
        [f"{graph.describe_edge(edge)} (added back)", cli_helpers.format_weight(edge.weight)]
        for edge in session.added_back
    ]
    click.echo(f"Deleted vertex: {bounds['deleted_vertex']}")
    click.echo(cli_helpers.format_table(rows, ["Edge", "Weight"], output_format, "No edges."))
    click.echo(f"Lower bound: {cli_helpers.format_weight(bounds['lower_bound'])}")
