"""Result decoder — pulls the text payload out of a ``tools/call`` response.

Separates three outcomes that callers treat differently: a broken envelope
(:class:`ProtocolError`), a tool that answered "no" (:class:`ToolError`), and
a usable text payload.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from toolbridge.errors import ProtocolError, ToolError
from toolbridge.mcp.models import ToolCallResult, ToolDescriptor, ToolsListResult

if TYPE_CHECKING:
    from toolbridge.mcp.models import JsonRpcResponse


def raise_for_error(response: JsonRpcResponse, method: str) -> dict[str, Any]:
    """Return ``response.result`` or raise for a JSON-RPC level error."""
    if response.error is not None:
        msg = f"MCP {method} error: {response.error.message}"
        raise ProtocolError(msg, code=response.error.code)
    if response.result is None:
        msg = f"No result in MCP {method} response"
        raise ProtocolError(msg)
    return response.result


def extract_text(response: JsonRpcResponse, tool: str) -> str:
    """Return the first content block's text of a ``tools/call`` response."""
    result = raise_for_error(response, "tools/call")
    if "content" not in result:
        msg = "No content in MCP result"
        raise ProtocolError(msg)
    try:
        call_result = ToolCallResult.model_validate(result)
    except ValidationError as exc:
        msg = f"Malformed content in MCP result: {exc}"
        raise ProtocolError(msg) from exc

    if not call_result.content or call_result.content[0].text is None:
        msg = "No text content in MCP result"
        raise ProtocolError(msg)
    text = call_result.content[0].text

    check_tool_error(text, tool, flagged=call_result.is_error)
    return text


def check_tool_error(text: str, tool: str, *, flagged: bool = False) -> None:
    """Raise :class:`ToolError` if *text* encodes an application failure.

    A JSON object carrying an ``error`` key is a failure. A result flagged
    ``isError`` is a failure even when its text is not such an object.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict) and "error" in parsed:
        error = parsed["error"]
        raise ToolError(tool, error if isinstance(error, str) else json.dumps(error))
    if flagged:
        raise ToolError(tool, text)


def decode_tools(response: JsonRpcResponse) -> list[ToolDescriptor]:
    """Decode a ``tools/list`` response into descriptors, preserving order."""
    result = raise_for_error(response, "tools/list")
    if "tools" not in result:
        msg = "No tools array in MCP response"
        raise ProtocolError(msg)
    try:
        return ToolsListResult.model_validate(result).tools
    except ValidationError as exc:
        msg = f"Malformed tools list in MCP response: {exc}"
        raise ProtocolError(msg) from exc
