"""MCPClient — generic tool invocation over a stdio MCP session.

Implements tool discovery (``tools/list``) and execution (``tools/call``)
on top of a :class:`Session`. Typed capability façades are built on
:meth:`MCPClient.call_tool`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from toolbridge.mcp.decoder import decode_tools, extract_text
from toolbridge.mcp.models import McpToolsResponse, ToolDescriptor
from toolbridge.mcp.session import Session
from toolbridge.utils.telemetry import ATTR_SERVER_NAME, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    from toolbridge.config import ServerConfig

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class MCPClient:
    """Async context manager owning one MCP server process.

    The process is spawned lazily on first use and respawned on the next call
    after it dies. Errors are never retried inside a call.

    Usage::

        config = ServerConfig(name="reminders", command="node", args=["server.js"])
        async with MCPClient(config) as client:
            tools = await client.list_tools()
            text = await client.call_tool("reminder.add", {"text": "buy milk"})
    """

    def __init__(self, config: ServerConfig, session: Session | None = None) -> None:
        self._config = config
        self._session = session or Session(config)

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def session(self) -> Session:
        return self._session

    async def __aenter__(self) -> MCPClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def ensure_ready(self) -> None:
        """Spawn and initialize the server unless a live session exists."""
        await self._session.ensure_ready()

    async def close(self) -> None:
        """Terminate the server process; the next call starts a fresh one."""
        await self._session.close()

    async def list_tools(self) -> list[ToolDescriptor]:
        """Send ``tools/list`` and return the declared tools in order."""
        with _tracer.start_as_current_span("mcp.tools.list") as span:
            span.set_attribute(ATTR_SERVER_NAME, self._config.name)
            response = await self._session.request("tools/list")
            return decode_tools(response)

    async def list_tools_with_transcript(self) -> McpToolsResponse:
        """Like :meth:`list_tools` but also return the lines exchanged for this listing.

        The first listing on a fresh process includes the handshake.
        """
        mark = self._session.recorded_count
        tools = await self.list_tools()
        return McpToolsResponse(tools=tools, messages=self._session.transcript_since(mark))

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Send ``tools/call`` and return the first content block's text."""
        with _tracer.start_as_current_span("mcp.tools.call") as span:
            span.set_attribute(ATTR_SERVER_NAME, self._config.name)
            span.set_attribute(ATTR_TOOL_NAME, name)
            response = await self._session.request(
                "tools/call",
                params={"name": name, "arguments": arguments or {}},
            )
            text = extract_text(response, name)
        logger.debug("%s returned %d characters", name, len(text))
        return text
