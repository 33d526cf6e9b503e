from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtutor import documents
from graphtutor.cli import decorators as cli_decorators
from graphtutor.cli import helpers as cli_helpers
from graphtutor.graph import walk_weight
from graphtutor.paths import PathOracle
from graphtutor.types import OutputFormat

if TYPE_CHECKING:
    import pathlib


@cli_decorators.graphtutor_command("path")
@cli_helpers.graph_file_argument
@click.argument("source")
@click.argument("target")
@cli_helpers.output_format_options
def path_cmd(
    graph_file: pathlib.Path,
    source: str,
    target: str,
    output_format: OutputFormat | None,
) -> None:
    """Show the shortest distance from SOURCE to TARGET and every shortest trail."""
    graph = documents.load_graph(graph_file)
    a = cli_helpers.vertex_id(graph, source)
    b = cli_helpers.vertex_id(graph, target)

    oracle = PathOracle(graph)
    distance = oracle.shortest_distance(a, b)
    trails = oracle.shortest_trails(a, b)
    walks = [cli_helpers.walk_labels(graph, a, trail) for trail in trails]

    if output_format == OutputFormat.JSON:
        click.echo(
            cli_helpers.format_json(
                {"from": source, "to": target, "distance": distance, "trails": walks}
            )
        )
        return

    if distance is None:
        click.echo(f"No path between '{source}' and '{target}'.")
        return

    click.echo(f"Shortest distance {source} -> {target}: {cli_helpers.format_weight(distance)}")
    rows = [
        [" -> ".join(walk), cli_helpers.format_weight(walk_weight(trail))]
        for walk, trail in zip(walks, trails, strict=True)
    ]
    click.echo(cli_helpers.format_table(rows, ["Trail", "Weight"], output_format, ""))
