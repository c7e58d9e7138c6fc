"""Record commands: load, save and delete one row through an entity."""

from typing import Annotated, Any

import typer

from activerow import Entity
from activerow.cli.context import CLIContext
from activerow.cli.output import OutputFormatter
from activerow.cli.parsing import parse_assignments, parse_value

app = typer.Typer(help="Load, save and delete single records")

CriterionArg = Annotated[
    str | None,
    typer.Argument(help="Primary key value or predicate such as 'price > ?'"),
]
WhereOpt = Annotated[
    list[str] | None,
    typer.Option("--where", "-w", help="Match column=value (repeatable)"),
]
ValueOpt = Annotated[
    list[str] | None,
    typer.Option("--value", "-V", help="Value for a predicate placeholder (repeatable)"),
]
ModeOpt = Annotated[
    str | None,
    typer.Option(
        "--mode",
        "-m",
        help="Selection mode: by_primary_key, by_field_map or by_custom_predicate",
    ),
]


def _load_entity(
    cli_ctx: CLIContext,
    table_name: str,
    criterion: str | None,
    where: list[str] | None,
    values: list[str] | None,
    mode: str | None,
) -> Entity:
    """Build an entity for ``table_name`` from command line selection options."""
    if where and criterion is not None:
        raise typer.BadParameter("Use either CRITERION or --where, not both")

    target: Any
    if where:
        target = parse_assignments(where)
    elif criterion is not None:
        # "null" would otherwise mean "no criterion" and skip the lookup
        parsed = parse_value(criterion)
        target = criterion if parsed is None else parsed
    else:
        target = None

    parsed_values = [parse_value(v) for v in values] if values is not None else None

    db = cli_ctx.get_db()
    return db.load(db.model(table_name), target, parsed_values, mode=mode)


@app.command("get")
def record_get(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
    criterion: CriterionArg = None,
    where: WhereOpt = None,
    value: ValueOpt = None,
    mode: ModeOpt = None,
) -> None:
    """Load a record. Shows the table defaults when nothing matches.

    Examples:

        activerow record get Widget 5
        activerow record get Widget --where name=Bolt
        activerow record get Widget "price > ?" --value 10
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        entity = _load_entity(cli_ctx, table_name, criterion, where, value, mode)
        formatter.print_record(entity)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("save")
def record_save(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
    criterion: CriterionArg = None,
    assignments: Annotated[
        list[str] | None,
        typer.Option("--set", "-s", help="Assign column=value before saving (repeatable)"),
    ] = None,
    where: WhereOpt = None,
    value: ValueOpt = None,
    mode: ModeOpt = None,
) -> None:
    """Load a record, apply assignments and save it.

    Inserts when no row matched, updates the matched row otherwise.

    Examples:

        activerow record save Widget --set name=Bolt --set price=3
        activerow record save Widget 5 --set price=4
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        changes = parse_assignments(assignments)
        entity = _load_entity(cli_ctx, table_name, criterion, where, value, mode)
        was_bound = entity.is_bound
        for column, new_value in changes.items():
            entity[column] = new_value
        entity.update()
        formatter.print_success(
            "Updated record" if was_bound else "Inserted record",
            {"fields": entity.to_dict()},
        )
    except KeyError as e:
        formatter.print_error(Exception(f"Unknown column: {e.args[0]}"))
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("delete")
def record_delete(
    ctx: typer.Context,
    table_name: Annotated[str, typer.Argument(help="Table name")],
    criterion: CriterionArg = None,
    where: WhereOpt = None,
    value: ValueOpt = None,
    mode: ModeOpt = None,
) -> None:
    """Delete at most one matching record.

    Examples:

        activerow record delete Widget 5
        activerow record delete Widget --where name=Bolt
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        entity = _load_entity(cli_ctx, table_name, criterion, where, value, mode)
        if not entity.is_bound:
            formatter.print_error(Exception(f"No matching {table_name} record"))
            raise typer.Exit(code=1)
        deleted = entity.delete()
        formatter.print_success("Deleted record", {"deleted": deleted})
    except typer.Exit:
        raise
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
