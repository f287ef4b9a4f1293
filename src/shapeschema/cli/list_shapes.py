from __future__ import annotations

import typer
from rich.console import Console

from shapeschema.cli.renderers import (
    ListShapesJsonRenderer,
    ListShapesPlainRenderer,
    ListShapesRichRenderer,
    run_events,
)
from shapeschema.core.list_shapes import list_shapes_events

console = Console()


def list_shapes(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable JSON report.",
    ),
) -> None:
    """List shapes registered under the shapeschema.shapes entry point group."""
    events = list_shapes_events()
    if json_output:
        renderer = ListShapesJsonRenderer(console)
    else:
        renderer = ListShapesRichRenderer(console) if console.is_terminal else ListShapesPlainRenderer(console)
    exit_code = run_events(events, renderer)
    raise typer.Exit(code=exit_code)
