"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from activerow import Entity, TableSchema
from activerow.exceptions import ActiveRowError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_schema(self, schema: TableSchema) -> None:
        """Print a table's columns.

        Args:
            schema: Introspected table schema
        """
        if self.json_mode:
            print(json.dumps(schema.model_dump(), default=str, indent=2))
            return

        table = Table(title=schema.table_name, show_header=True, header_style="bold magenta")
        table.add_column("Column")
        table.add_column("Default")
        table.add_column("Primary Key")
        table.add_column("Auto")
        for column in schema.columns:
            table.add_row(
                column.name,
                "" if column.default_value is None else str(column.default_value),
                "✓" if column.is_primary_key else "",
                "✓" if column.is_auto_generated else "",
            )
        console.print(table)

    def print_record(self, entity: Entity) -> None:
        """Print an entity's fields and how its row was located.

        Args:
            entity: Loaded entity
        """
        selection = entity.selection
        if self.json_mode:
            output = {
                "table": entity.table_name,
                "bound": entity.is_bound,
                "selection": selection.model_dump(),
                "fields": entity.to_dict(),
            }
            print(json.dumps(output, default=str, indent=2))
            return

        status = "[green]stored[/green]" if entity.is_bound else "[yellow]not stored[/yellow]"
        console.print(f"\n[bold]Table:[/bold] {entity.table_name} ({status})")
        if entity.is_bound:
            console.print(f"Where: {selection.resolved_predicate}  {selection.bound_values}")

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Field")
        table.add_column("Value")
        for name, value in entity.to_dict().items():
            table.add_row(name, "NULL" if value is None else str(value))
        console.print(table)

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            print(json.dumps(output, default=str, indent=2))
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, ActiveRowError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            if isinstance(error, ActiveRowError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
