from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

import click

from graphtutor import exceptions, metrics

if TYPE_CHECKING:
    from collections.abc import Callable


def _handle_graphtutor_error(e: exceptions.GraphTutorError) -> click.ClickException:
    """Convert GraphTutorError to user-friendly ClickException."""
    message = e.format_user_message()
    if suggestion := e.get_suggestion():
        message = f"{message}\n\nTip: {suggestion}"
    return click.ClickException(message)


def with_error_handling[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Wrap function with graphtutor error handling.

    Use this decorator below @click.command() for commands that do not go
    through graphtutor_command:

        @click.command()
        @with_error_handling
        def cmd(...):
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except exceptions.GraphTutorError as e:
            raise _handle_graphtutor_error(e) from e
        except Exception as e:
            raise click.ClickException(repr(e)) from e

    return wrapper


def graphtutor_command(
    name: str | None = None,
    **attrs: Any,
) -> Callable[[Callable[..., Any]], click.Command]:
    """Create a Click command with error handling and a metrics summary.

    Combines @click.command() with automatic error handling that converts
    GraphTutorError to user-friendly messages with suggestions. When metrics
    are enabled, their summary is printed to stderr after the command.

    Args:
        name: Optional command name (defaults to function name)
        **attrs: Additional arguments passed to click.command()

    Returns:
        Decorator that creates a click.Command with error handling
    """

    def decorator(func: Callable[..., Any]) -> click.Command:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                with metrics.timed("cli.total"):
                    return func(*args, **kwargs)
            finally:
                if metrics.is_enabled():
                    _print_metrics_summary()

        return click.command(name=name, **attrs)(with_error_handling(wrapper))

    return decorator


def _print_metrics_summary() -> None:
    """Print metrics summary to stderr."""
    summary = metrics.summary()
    totals = metrics.counts()
    if not summary and not totals:
        return

    click.echo("\nMetrics:", err=True)
    for name, total in totals.items():
        click.echo(f"  {name}: {total}", err=True)
    for name, data in sorted(summary.items()):
        count = data["count"]
        total = data["total_ms"]
        avg = data["avg_ms"]
        if count == 1:
            click.echo(f"  {name}: {total:.1f}ms", err=True)
        else:
            click.echo(f"  {name}: {count}x, total={total:.1f}ms, avg={avg:.1f}ms", err=True)
