"""Shared CLI output formatters."""

from __future__ import annotations

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from toolbridge.mcp.models import McpJsonMessage, ToolDescriptor  # noqa: TC001

console = Console()


def print_tools_table(tools: list[ToolDescriptor]) -> None:
    """Pretty-print advertised tools as a table, in declared order."""
    table = Table(title="MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for tool in tools:
        table.add_row(tool.name, _truncate(tool.description or ""))

    console.print(table)


def print_messages(messages: list[McpJsonMessage]) -> None:
    """Print a recorded request/response exchange."""
    styles = {"request": "green", "response": "blue", "error": "red"}
    for message in messages:
        console.print(f"[bold {styles[message.direction]}]{message.direction}[/]")
        console.print(Syntax(message.content, "json", word_wrap=True))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
