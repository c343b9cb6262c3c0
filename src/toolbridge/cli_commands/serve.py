"""``toolbridge serve`` — run the reference MCP server on stdio."""

from __future__ import annotations

import click


@click.command()
def serve() -> None:
    """Serve the reference tools over stdin/stdout."""
    from toolbridge.mcp.server import ReferenceServer

    ReferenceServer().serve()
