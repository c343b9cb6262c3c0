"""``toolbridge tools`` — list and call tools on an MCP server."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING

import click
from rich.markup import escape

from toolbridge.cli_commands._output import console, print_messages, print_tools_table
from toolbridge.errors import MCPError

if TYPE_CHECKING:
    from toolbridge.mcp.models import McpToolsResponse


@click.group()
def tools() -> None:
    """Discover and invoke tools."""


@tools.command("list")
@click.argument("server", required=False)
@click.option("--show-messages", is_flag=True, help="Print the JSON-RPC exchange.")
@click.option("--timeout", type=float, default=30.0, show_default=True, help="Read timeout in seconds.")
def list_tools(server: str | None, show_messages: bool, timeout: float) -> None:
    """List the tools advertised by an MCP server.

    SERVER is ``builtin``, ``npx <package>``, or a command line. It defaults to
    $MCP_SERVER_PATH, then ``builtin``.
    """
    from toolbridge.config import ServerConfig
    from toolbridge.mcp.client import MCPClient

    config = ServerConfig.from_server_path(server, record_transcript=True, read_timeout=timeout)

    async def _list() -> McpToolsResponse:
        async with MCPClient(config) as client:
            return await client.list_tools_with_transcript()

    try:
        response = asyncio.run(_list())
    except MCPError as exc:
        console.print(f"[red]MCP {exc.kind} error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if not response.tools:
        console.print("[yellow]No tools advertised.[/yellow]")
    else:
        print_tools_table(response.tools)
    if show_messages:
        print_messages(response.messages)


@tools.command("call")
@click.argument("server")
@click.argument("tool")
@click.option("--args", "args_json", default="{}", help="Tool arguments as a JSON object.")
@click.option("--timeout", type=float, default=30.0, show_default=True, help="Read timeout in seconds.")
def call_tool(server: str, tool: str, args_json: str, timeout: float) -> None:
    """Call TOOL on SERVER and print the text it returns."""
    from toolbridge.config import ServerConfig
    from toolbridge.mcp.client import MCPClient

    try:
        arguments = json.loads(args_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--args") from exc
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    config = ServerConfig.from_server_path(server, read_timeout=timeout)

    async def _call() -> str:
        async with MCPClient(config) as client:
            return await client.call_tool(tool, arguments)

    try:
        text = asyncio.run(_call())
    except MCPError as exc:
        console.print(f"[red]MCP {exc.kind} error:[/red] {escape(str(exc))}")
        sys.exit(1)

    click.echo(text)
