"""goatdb CLI - Main entry point."""

from typing import Annotated

import typer

import goatdb
from goatdb.cli.context import CLIContext, get_database_url
from goatdb.core.types import StorageMode

app = typer.Typer(
    name="goatdb",
    help="goatdb CLI - object-graph persistence over a relational store",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            envvar="GOATDB_URL",
            help="Database URL (PostgreSQL or SQLite)",
        ),
    ] = None,
    storage_mode: Annotated[
        StorageMode,
        typer.Option(
            "--storage-mode",
            "-s",
            help="single_table (shared objects table) or multi_table (table per type)",
        ),
    ] = StorageMode.SINGLE_TABLE,
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements to console",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    ctx.obj = CLIContext(
        database_url=get_database_url(database),
        echo=echo,
        json_output=json_output,
        storage_mode=storage_mode,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"goatdb v{goatdb.__version__}")


from goatdb.cli.commands import admin, schema  # noqa: E402

app.command(name="init")(admin.init_command)
app.command(name="describe")(schema.describe_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
