"""Error types for the MCP stdio transport.

Every failure surfaces as an :class:`MCPError` subclass so callers can branch
on the kind of failure:

* :class:`StartupError` — the subprocess could not be spawned.
* :class:`CommunicationError` — an expected line never arrived (EOF, timeout,
  broken pipe, oversized line).
* :class:`HandshakeError` — ``initialize`` was absent, malformed or erroring.
* :class:`ProtocolError` — a message arrived but violates the envelope shape.
* :class:`ToolError` — the tool answered with an application-level failure.
"""

from __future__ import annotations


class MCPError(Exception):
    """Base error for all MCP transport and tool failures."""

    kind = "mcp"


class StartupError(MCPError):
    """The MCP server process could not be started."""

    kind = "startup"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Failed to start MCP server process" + (f": {detail}" if detail else ""))


class CommunicationError(MCPError):
    """An expected message line was not received from the server."""

    kind = "communication"


class HandshakeError(CommunicationError):
    """The ``initialize`` exchange failed."""

    kind = "handshake"


class ProtocolError(MCPError):
    """A received message does not have the expected JSON-RPC/MCP shape."""

    kind = "protocol"

    def __init__(self, message: str, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


class ToolError(MCPError):
    """A tool ran and reported a failure in its own payload.

    Never retried: the remote tool is working and said no.
    """

    kind = "tool"

    def __init__(self, tool: str, detail: str = "") -> None:
        self.tool = tool
        self.detail = detail
        super().__init__(f"Tool {tool} failed" + (f": {detail}" if detail else ""))
