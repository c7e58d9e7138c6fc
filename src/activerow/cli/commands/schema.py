"""Schema inspection commands."""

from typing import Annotated

import typer

from activerow.cli.context import CLIContext
from activerow.cli.output import OutputFormatter

app = typer.Typer(help="Inspect table structure")


@app.command("describe")
def schema_describe(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
) -> None:
    """Show a table's columns as the entity engine sees them.

    Examples:

        activerow schema describe Widget
        activerow --json schema describe Widget
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        formatter.print_schema(db.schema(table_name))
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
