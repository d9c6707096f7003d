"""Output formatting utilities built on rich."""

import json
import sys
from typing import Any

from rich.console import Console
from rich.json import JSON
from rich.table import Table
from rich.text import Text

from protoforge.schemas.manifest import GeneratedFile


class OutputFormatter:
    """Formats CLI output with rich."""

    def __init__(self, force_color: bool | None = None):
        """Initialize formatter."""
        self.console = Console(force_terminal=force_color, file=sys.stdout, highlight=False)
        self.error_console = Console(
            force_terminal=force_color, file=sys.stderr, highlight=False
        )

    def print_json(self, data: Any, indent: int = 2) -> None:
        """Print JSON with syntax highlighting."""
        self.console.print(JSON(json.dumps(data, indent=indent, ensure_ascii=False)))

    def print_text(self, text: str) -> None:
        """Print text verbatim (no markup interpretation)."""
        self.console.print(Text(text), end="", soft_wrap=True)

    def print_stats(self, stats: dict[str, Any]) -> None:
        """Print statistics in a formatted table."""
        table = Table(title="Generation Statistics", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        for key, value in stats.items():
            table.add_row(key.replace("_", " ").title(), str(value))

        self.console.print(table)

    def print_files(self, files: list[GeneratedFile]) -> None:
        """Print the code files written for a project."""
        table = Table(title="Code Files", show_header=True, header_style="bold magenta")
        table.add_column("File", style="cyan")
        table.add_column("Language", style="green")
        for entry in files:
            table.add_row(Text(entry.name), Text(entry.language))
        self.console.print(table)

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.console.print(Text.assemble(("✓ ", "green"), message), soft_wrap=True)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.error_console.print(Text.assemble(("✗ ", "red"), message), soft_wrap=True)

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.console.print(Text.assemble(("⚠ ", "yellow"), message), soft_wrap=True)

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.console.print(Text.assemble(("ℹ ", "blue"), message), soft_wrap=True)
