from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtutor import autoplay, documents
from graphtutor.cli import decorators as cli_decorators
from graphtutor.cli import helpers as cli_helpers
from graphtutor.types import ErrorKind, OutputFormat

if TYPE_CHECKING:
    import pathlib

    from graphtutor.graph import Graph
    from graphtutor.postman import Matching


def _pairs(graph: Graph, matching: Matching) -> list[str]:
    return sorted(graph.describe_edge(edge) for edge in matching.edges)


@cli_decorators.graphtutor_command("postman")
@cli_helpers.graph_file_argument
@click.option("--start", help="Start vertex label of the route (default: first label)")
@cli_helpers.output_format_options
def postman(
    graph_file: pathlib.Path,
    start: str | None,
    output_format: OutputFormat | None,
) -> None:
    """Solve the Chinese Postman problem for the graph in GRAPH_FILE.

    Lists the odd vertices, every minimum T-join (the pairs of odd vertices
    whose shortest trails are walked twice) and one optimal closed route.
    """
    graph = documents.load_graph(graph_file)
    origin = cli_helpers.vertex_id(graph, start) if start is not None else None
    session = autoplay.solve_postman(graph, origin)
    if not session.solver.feasible:
        raise click.ClickException(ErrorKind.NOT_CONNECTED.message)

    t_graph = session.solver.t_join_graph
    assert t_graph is not None and session.start_vertex is not None
    t_joins = session.candidate_t_joins()
    route = cli_helpers.walk_labels(graph, session.start_vertex, session.walk)

    if output_format == OutputFormat.JSON:
        click.echo(
            cli_helpers.format_json(
                {
                    "odd_vertices": [vertex.label for vertex in session.odd_vertices()],
                    "t_joins": [
                        {"pairs": _pairs(t_graph, t_join), "weight": t_join.weight}
                        for t_join in t_joins
                    ],
                    "route": route,
                    "route_weight": session.minimum_weight(),
                }
            )
        )
        return

    odd = ", ".join(vertex.label for vertex in session.odd_vertices()) or "none"
    click.echo(f"Odd vertices: {odd}\n")
    rows = [
        [", ".join(_pairs(t_graph, t_join)) or "-", cli_helpers.format_weight(t_join.weight)]
        for t_join in t_joins
    ]
    click.echo(cli_helpers.format_table(rows, ["T-join", "Weight"], output_format, ""))
    click.echo(f"\nRoute: {' -> '.join(route)}")
    click.echo(f"Route weight: {cli_helpers.format_weight(session.minimum_weight())}")
