from __future__ import annotations

import importlib
import logging
from typing import TypedDict, override

import click

from graphtutor import config, exceptions, metrics

# Command categories for organized help output
COMMAND_CATEGORIES = {
    "Structure": ["inspect", "path"],
    "Algorithms": ["mst", "postman", "tsp"],
}

# Lazy command registry: command_name -> (module_path, attr_name, help_text)
_LAZY_COMMANDS: dict[str, tuple[str, str, str]] = {
    "inspect": ("graphtutor.cli.inspect", "inspect_cmd", "Show structural properties of a graph."),
    "path": ("graphtutor.cli.path", "path_cmd", "Show the shortest distance and trails."),
    "mst": ("graphtutor.cli.mst", "mst", "Build a minimum spanning tree."),
    "postman": ("graphtutor.cli.postman", "postman", "Solve the Chinese Postman problem."),
    "tsp": ("graphtutor.cli.tsp", "tsp", "Compute travelling salesman bounds."),
}


class CliContext(TypedDict):
    """Context object for CLI commands."""

    verbose: bool
    quiet: bool


class GraphTutorGroup(click.Group):
    """Custom Group with lazy command loading and categorized help."""

    @override
    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return all available command names."""
        return sorted(_LAZY_COMMANDS.keys())

    @override
    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Lazily load and return a command by name."""
        if cmd_name not in _LAZY_COMMANDS:
            return None

        module_path, attr_name, _help = _LAZY_COMMANDS[cmd_name]
        module = importlib.import_module(module_path)
        return getattr(module, attr_name)

    @override
    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format commands grouped by category using cached help strings."""
        for category, names in COMMAND_CATEGORIES.items():
            rows = [(name, _LAZY_COMMANDS[name][2]) for name in names if name in _LAZY_COMMANDS]
            if not rows:
                continue
            with formatter.section(f"{category} Commands"):
                formatter.write_dl(rows)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging for CLI output."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s", force=True)


@click.group(cls=GraphTutorGroup)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """Reference solutions for classic graph algorithms.

    Graphs are read from YAML or JSON documents listing vertices and
    weighted edges.
    """
    if verbose and quiet:
        raise click.UsageError("--verbose and --quiet are mutually exclusive")
    ctx.obj = CliContext(verbose=verbose, quiet=quiet)
    _setup_logging(verbose, quiet)
    try:
        if config.get_merged_config().metrics:
            metrics.enable()
    except exceptions.ConfigError as e:
        raise click.ClickException(e.format_user_message()) from e


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
