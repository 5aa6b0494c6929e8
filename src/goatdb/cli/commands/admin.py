"""Database setup commands."""

import asyncio
from typing import Annotated

import typer

import goatdb
from goatdb.cli.context import CLIContext, load_types
from goatdb.cli.output import OutputFormatter


async def _initialise(cli_ctx: CLIContext, target: str) -> dict[str, object]:
    types = load_types(target)
    db = cli_ctx.get_db(types)
    try:
        created = await db.initialise()
        return {
            "database": cli_ctx.database_url,
            "storage_mode": str(db.storage_mode),
            "types": [t.TYPE_NAME for t in types],
            "created_tables": created,
            "version": goatdb.__version__,
        }
    finally:
        await cli_ctx.close()


def init_command(
    ctx: typer.Context,
    target: Annotated[
        str,
        typer.Argument(help="Entity types to register, as module:attribute"),
    ],
) -> None:
    """Create the tables for a set of entity types.

    Existing tables are left untouched, so running init again after adding a
    type or an index only creates what is missing.

    Examples:

        goatdb init myapp.models:TYPES
        goatdb -d postgresql://localhost/mydb -s multi_table init myapp.models:TYPES
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        details = asyncio.run(_initialise(cli_ctx, target))
        formatter.print_success("Database initialized", details)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
