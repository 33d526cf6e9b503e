from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtutor import documents, predicates
from graphtutor.cli import decorators as cli_decorators
from graphtutor.cli import helpers as cli_helpers
from graphtutor.types import OutputFormat

if TYPE_CHECKING:
    import pathlib


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


@cli_decorators.graphtutor_command("inspect")
@cli_helpers.graph_file_argument
@cli_helpers.output_format_options
def inspect_cmd(graph_file: pathlib.Path, output_format: OutputFormat | None) -> None:
    """Show structural properties of the graph in GRAPH_FILE."""
    graph = documents.load_graph(graph_file)
    summary = predicates.summarize(graph)

    if output_format == OutputFormat.JSON:
        click.echo(cli_helpers.format_json(summary))
        return

    rows = [
        ["Vertices", str(summary["vertices"])],
        ["Edges", str(summary["edges"])],
        ["Total weight", cli_helpers.format_weight(summary["total_weight"])],
        ["Connected", _yes_no(summary["connected"])],
        ["Has cycle", _yes_no(summary["has_cycle"])],
        ["Is a cycle", _yes_no(summary["is_cycle"])],
        ["Complete", _yes_no(summary["complete"])],
        ["Eulerian", _yes_no(summary["eulerian"])],
        ["Euclidean", _yes_no(summary["euclidean"])],
        ["Odd vertices", ", ".join(summary["odd_vertices"]) or "-"],
    ]
    click.echo(cli_helpers.format_table(rows, ["Property", "Value"], output_format, ""))
