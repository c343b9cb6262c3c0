"""Reference MCP server — answers JSON-RPC 2.0 over stdio with example tools.

Strictly half-duplex: each input line is answered by at most one flushed
output line before the next input line is read. Diagnostics go to stderr so
stdout carries protocol messages only.

Run with ``python -m toolbridge.mcp.server`` or ``toolbridge serve``.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import IO, Any

from toolbridge.config import DEFAULT_PROTOCOL_VERSION
from toolbridge.mcp.models import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    NOT_INITIALIZED,
    PARSE_ERROR,
    ToolDescriptor,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "toolbridge-reference-server"
SERVER_VERSION = "1.0.0"

REFERENCE_TOOLS = [
    ToolDescriptor(name="hello", description="Says hello with a greeting message"),
    ToolDescriptor(name="echo", description="Echoes back the input text"),
    ToolDescriptor(name="calculate", description="Performs basic arithmetic calculations"),
    ToolDescriptor(name="timestamp", description="Returns the current timestamp"),
]

JsonDict = dict[str, Any]


class ReferenceServer:
    """Minimal MCP server exposing a fixed tool list."""

    def __init__(self, tools: list[ToolDescriptor] | None = None) -> None:
        self.tools = list(REFERENCE_TOOLS if tools is None else tools)
        self.initialized = False

    def serve(self, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> None:
        """Read requests until EOF, writing one response line per request."""
        reader = stdin or sys.stdin
        writer = stdout or sys.stdout
        while True:
            line = reader.readline()
            if not line:
                return
            if not line.strip():
                continue
            response = self.handle_line(line)
            if response is not None:
                writer.write(json.dumps(response, separators=(",", ":")) + "\n")
                writer.flush()

    def handle_line(self, line: str) -> JsonDict | None:
        """Return the response for one input line, or ``None`` for notifications."""
        try:
            request = json.loads(line)
        except json.JSONDecodeError as exc:
            return _error(None, PARSE_ERROR, f"Parse error: {exc}")
        if not isinstance(request, dict):
            return _error(None, PARSE_ERROR, "Parse error: expected a JSON object")

        method = request.get("method")
        rpc_id = request.get("id")
        params = request.get("params") or {}

        if method == "initialize":
            self.initialized = True
            return _result(rpc_id, {
                "protocolVersion": DEFAULT_PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            })
        if method == "notifications/initialized":
            return None
        if method == "tools/list":
            if not self.initialized:
                return _error(rpc_id, NOT_INITIALIZED, "Server not initialized")
            return _result(rpc_id, {
                "tools": [tool.model_dump(exclude_none=True, by_alias=True) for tool in self.tools]
            })
        if method == "tools/call":
            if not self.initialized:
                return _error(rpc_id, NOT_INITIALIZED, "Server not initialized")
            if not isinstance(params, dict) or not isinstance(params.get("name"), str):
                return _error(rpc_id, INVALID_PARAMS, "Invalid params: tool name is required")
            arguments = params.get("arguments")
            if arguments is None:
                arguments = {}
            if not isinstance(arguments, dict):
                return _error(rpc_id, INVALID_PARAMS, "Invalid params: arguments must be an object")
            return _result(rpc_id, self.call_tool(params["name"], arguments))
        return _error(rpc_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def call_tool(self, name: str, arguments: JsonDict) -> JsonDict:
        """Run a reference tool and wrap its output in a content envelope."""
        try:
            if name == "hello":
                who = arguments.get("name")
                return _text(f"Hello, {who}!" if who else "Hello from the toolbridge reference server!")
            if name == "echo":
                text = arguments.get("text")
                if not isinstance(text, str):
                    return _tool_error("Text parameter is required")
                return _text(text)
            if name == "calculate":
                return _text(json.dumps({"result": _calculate(arguments)}))
            if name == "timestamp":
                now = time.time()
                return _text(json.dumps({
                    "timestamp": datetime.fromtimestamp(now, tz=timezone.utc).isoformat(),
                    "epochMillis": int(now * 1000),
                }))
        except (TypeError, ValueError, ZeroDivisionError) as exc:
            return _tool_error(str(exc))
        return _tool_error(f"Unknown tool: {name}")


def _calculate(arguments: JsonDict) -> float:
    operation = arguments.get("operation", "add")
    a = float(arguments["a"]) if "a" in arguments else 0.0
    b = float(arguments["b"]) if "b" in arguments else 0.0
    if operation == "add":
        return a + b
    if operation == "subtract":
        return a - b
    if operation == "multiply":
        return a * b
    if operation == "divide":
        if b == 0:
            msg = "Division by zero"
            raise ZeroDivisionError(msg)
        return a / b
    msg = f"Unknown operation: {operation}"
    raise ValueError(msg)


def _text(text: str) -> JsonDict:
    return {"content": [{"type": "text", "text": text}]}


def _tool_error(message: str) -> JsonDict:
    return {"content": [{"type": "text", "text": json.dumps({"error": message})}], "isError": True}


def _result(rpc_id: Any, result: JsonDict) -> JsonDict:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _error(rpc_id: Any, code: int, message: str) -> JsonDict:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def main() -> None:
    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(name)s: %(message)s")
    logger.info("%s running on stdio", SERVER_NAME)
    try:
        ReferenceServer().serve()
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
