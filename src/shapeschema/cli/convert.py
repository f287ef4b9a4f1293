from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from shapeschema.cli.renderers import (
    ConvertJsonRenderer,
    ConvertPlainRenderer,
    ConvertRichRenderer,
    run_events,
)
from shapeschema.core.convert import convert_events

console = Console()
err_console = Console(stderr=True)


def convert(
    config: Path = typer.Option(
        Path("shapeschema.yaml"),
        "--config",
        "-c",
        help="Path to shapeschema.yaml.",
    ),
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Base directory for relative paths.",
    ),
    out: Path | None = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the schema here instead of the configured output path.",
    ),
    dialect: str | None = typer.Option(
        None,
        "--dialect",
        help="Value for $schema, overriding the config.",
    ),
    unused_definitions: bool = typer.Option(
        False,
        "--unused-definitions",
        help="Render configured definitions even when nothing references them.",
    ),
    check_schema: bool = typer.Option(
        True,
        "--check-schema/--no-check-schema",
        help="Check the emitted document against its dialect meta-schema.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show stack traces for unexpected errors.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable JSON report.",
    ),
) -> None:
    """Convert shapes to a JSON Schema document."""
    events = convert_events(
        project,
        config_path=config,
        out=out,
        dialect=dialect,
        unused_definitions=True if unused_definitions else None,
        check_schema=None if check_schema else False,
    )
    if json_output:
        renderer = ConvertJsonRenderer(console)
    elif err_console.is_terminal:
        renderer = ConvertRichRenderer(err_console, console)
    else:
        renderer = ConvertPlainRenderer(err_console, console)

    try:
        exit_code = run_events(events, renderer)
    except Exception as exc:  # noqa: BLE001
        if debug:
            raise
        err_console.print(f"[red]Unexpected error:[/red] {exc}")
        raise typer.Exit(code=2)
    raise typer.Exit(code=exit_code)
