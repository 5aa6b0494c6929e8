"""Schema description commands."""

from typing import Annotated

import typer

from goatdb.cli.context import CLIContext, load_types
from goatdb.cli.output import OutputFormatter


def describe_command(
    ctx: typer.Context,
    target: Annotated[
        str,
        typer.Argument(help="Entity types to describe, as module:attribute"),
    ],
) -> None:
    """Show tables, indexes, edges and rule chains of entity types.

    Examples:

        goatdb describe myapp.models:TYPES
        goatdb --json describe myapp.models:TodoItem
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db(load_types(target))
        formatter.print_schema(db.describe())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
