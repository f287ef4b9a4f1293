import typer
import rich_click  # noqa: F401
from .convert import convert
from .list_shapes import list_shapes
from shapeschema import __version__

app = typer.Typer(
    name="shapeschema",
    help="Convert validation shape graphs to JSON Schema",
    no_args_is_help=True,
)

@app.command("version")
def version() -> None:
    """Show the shapeschema version."""
    typer.echo(f"shapeschema v{__version__}")

app.command()(convert)
app.command("list-shapes")(list_shapes)
