"""activerow CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import activerow
from activerow.cli.context import CLIContext, get_database_url

app = typer.Typer(
    name="activerow",
    help="activerow CLI - inspect tables and edit records through the entity engine",
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
            envvar="ACTIVEROW_URL",
            help="Database URL (SQLite, MySQL or PostgreSQL)",
        ),
    ] = None,
    echo: Annotated[
        bool,
        typer.Option("--echo", "-e", help="Echo SQL statements to console"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON (machine-readable)"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log statements and bound values to stderr"),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    ctx.obj = CLIContext(
        database_url=get_database_url(database),
        echo=echo,
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"activerow v{activerow.__version__}")


from activerow.cli.commands import record, schema  # noqa: E402

app.add_typer(schema.app, name="schema")
app.add_typer(record.app, name="record")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
