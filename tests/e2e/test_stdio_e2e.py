"""End-to-end tests against real server subprocesses over stdio."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from toolbridge.capabilities import ReminderTools
from toolbridge.config import ServerConfig
from toolbridge.errors import (
    CommunicationError,
    HandshakeError,
    ProtocolError,
    StartupError,
    ToolError,
)
from toolbridge.mcp.client import MCPClient

TESTS_DIR = Path(__file__).resolve().parent.parent
FAKE_SERVER = TESTS_DIR / "fixtures" / "fake_server.py"
SRC_DIR = TESTS_DIR.parent / "src"


def _builtin(**overrides: object) -> ServerConfig:
    return ServerConfig.from_server_path(
        "builtin", env={"PYTHONPATH": str(SRC_DIR)}, read_timeout=20.0, **overrides
    )


def _fake(*options: str, **overrides: object) -> ServerConfig:
    data: dict[str, object] = {
        "name": "fake",
        "command": sys.executable,
        "args": [str(FAKE_SERVER), *options],
        "read_timeout": 20.0,
    }
    data.update(overrides)
    return ServerConfig.model_validate(data)


class TestReferenceServer:
    async def test_lists_declared_tools_in_order(self) -> None:
        async with MCPClient(_builtin()) as client:
            tools = await client.list_tools()

        assert [t.name for t in tools] == ["hello", "echo", "calculate", "timestamp"]

    async def test_call_returns_text_byte_for_byte(self) -> None:
        text = '  mixed\tspacing "quotes" ünïcödé ✓  '

        async with MCPClient(_builtin()) as client:
            result = await client.call_tool("echo", {"text": text})

        assert result == text

    async def test_ensure_ready_twice_spawns_once(self) -> None:
        async with MCPClient(_builtin()) as client:
            await client.ensure_ready()
            await client.ensure_ready()
            assert client.session.spawn_count == 1

    async def test_unknown_tool_is_tool_error(self) -> None:
        async with MCPClient(_builtin()) as client:
            with pytest.raises(ToolError, match="Unknown tool: nope"):
                await client.call_tool("nope", {})
            assert await client.call_tool("hello", {"name": "again"}) == "Hello, again!"

    async def test_respawns_after_external_kill(self) -> None:
        async with MCPClient(_builtin()) as client:
            assert await client.call_tool("echo", {"text": "first"}) == "first"
            supervisor = client.session.supervisor
            assert supervisor is not None and supervisor.process is not None
            supervisor.process.kill()
            await supervisor.process.wait()

            assert await client.call_tool("echo", {"text": "second"}) == "second"
            assert client.session.spawn_count == 2

    async def test_transcript(self) -> None:
        async with MCPClient(_builtin(record_transcript=True)) as client:
            response = await client.list_tools_with_transcript()

        directions = [m.direction for m in response.messages]
        assert directions == ["request", "response", "request", "request", "response"]
        assert json.loads(response.messages[1].content)["result"]["serverInfo"]["name"]


class TestFailureModes:
    async def test_missing_binary_is_startup_error(self, tmp_path: Path) -> None:
        config = ServerConfig(name="ghost", command=str(tmp_path / "no-such-server"))

        async with MCPClient(config) as client:
            with pytest.raises(StartupError):
                await client.call_tool("echo", {})

    async def test_immediate_exit_is_never_silent(self) -> None:
        async with MCPClient(_fake("--exit")) as client:
            with pytest.raises((StartupError, CommunicationError)):
                await client.call_tool("echo", {"text": "x"})

    async def test_three_banner_lines_tolerated(self) -> None:
        async with MCPClient(_fake("--banner", "3")) as client:
            tools = await client.list_tools()

        assert [t.name for t in tools] == ["hello", "echo"]

    async def test_eleven_banner_lines_fail(self) -> None:
        async with MCPClient(_fake("--banner", "11")) as client:
            with pytest.raises(HandshakeError, match="No valid JSON response"):
                await client.ensure_ready()

    async def test_initialize_error(self) -> None:
        async with MCPClient(_fake("--init-error", "bad version")) as client:
            with pytest.raises(HandshakeError, match="bad version"):
                await client.ensure_ready()

    async def test_error_message_surfaces(self) -> None:
        async with MCPClient(_fake("--call-error", "boom")) as client:
            with pytest.raises(ProtocolError, match="boom"):
                await client.call_tool("echo", {})

    async def test_read_timeout(self) -> None:
        async with MCPClient(_fake("--hang", read_timeout=0.5)) as client:
            with pytest.raises(CommunicationError, match="Timed out"):
                await client.call_tool("echo", {})
            assert not client.session.is_ready


class TestTypedCapability:
    async def test_reminder_add(self) -> None:
        reply = json.dumps({"id": "r1", "text": "buy milk", "completed": False})

        async with ReminderTools(MCPClient(_fake("--reply", reply))) as tools:
            reminder = await tools.add_reminder("buy milk")

        assert reminder.id == "r1"
        assert reminder.completed is False

    async def test_arguments_reach_server(self) -> None:
        async with ReminderTools(MCPClient(_fake())) as tools:
            text = await tools.client.call_tool("reminder.add", {"text": "buy milk"})

        assert json.loads(text) == {"text": "buy milk"}
