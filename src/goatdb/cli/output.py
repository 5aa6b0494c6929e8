"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from goatdb.core.types import SchemaInfo, TypeInfo
from goatdb.exceptions import GoatDBError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_schema(self, schema: SchemaInfo) -> None:
        """Print every type in a schema description."""
        if self.json_mode:
            print(json.dumps(schema.model_dump(mode="json"), indent=2))
            return

        console.print(f"[bold]Storage mode:[/bold] {schema.storage_mode}")
        console.print(f"[bold]Types:[/bold] {schema.total_types}")
        for type_info in schema.types.values():
            self._print_type(type_info)

    def _print_type(self, type_info: TypeInfo) -> None:
        console.print(f"\n[bold]Type:[/bold] {type_info.name}")
        console.print(f"Table: {type_info.table_name}")

        if type_info.fields:
            fields_table = Table(show_header=True, header_style="bold cyan")
            fields_table.add_column("Field")
            fields_table.add_column("Validator")
            fields_table.add_column("Indexed")
            indexed = {index.field for index in type_info.indexes}
            for name in type_info.fields:
                fields_table.add_row(
                    name,
                    type_info.validators.get(name, ""),
                    "✓" if name in indexed else "",
                )
            console.print(fields_table)

        if type_info.edges:
            console.print(f"\n[bold]Edges ({len(type_info.edges)}):[/bold]")
            edge_table = Table(show_header=True, header_style="bold cyan")
            edge_table.add_column("Name")
            edge_table.add_column("To Type")
            edge_table.add_column("Kind")
            edge_table.add_column("Relationship")
            for edge in type_info.edges:
                if edge.connected_id_field:
                    kind = f"one-to-one (field {edge.connected_id_field})"
                elif edge.one_to_one:
                    kind = "one-to-one"
                elif edge.undirected:
                    kind = "undirected"
                else:
                    kind = "directed"
                edge_table.add_row(edge.name, edge.connected_type, kind, edge.relationship)
            console.print(edge_table)

        rules = ", ".join(f"{action}={count}" for action, count in type_info.rules.items())
        console.print(f"Rules: {rules}")

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
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
            if isinstance(error, GoatDBError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            if isinstance(error, GoatDBError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
