"""MCP protocol — stdio client, session management, and reference server."""

from toolbridge.mcp.client import MCPClient
from toolbridge.mcp.models import (
    ContentBlock,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    McpJsonMessage,
    McpToolsResponse,
    ToolCallResult,
    ToolDescriptor,
)
from toolbridge.mcp.session import Session, SessionState
from toolbridge.mcp.supervisor import ProcessSupervisor

__all__ = [
    "ContentBlock",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPClient",
    "McpJsonMessage",
    "McpToolsResponse",
    "ProcessSupervisor",
    "Session",
    "SessionState",
    "ToolCallResult",
    "ToolDescriptor",
]
