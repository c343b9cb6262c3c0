"""Tests for the error hierarchy."""

from toolbridge.errors import (
    CommunicationError,
    HandshakeError,
    MCPError,
    ProtocolError,
    StartupError,
    ToolError,
)


class TestErrorHierarchy:
    def test_all_are_mcp_errors(self) -> None:
        for cls in (StartupError, CommunicationError, HandshakeError, ProtocolError, ToolError):
            assert issubclass(cls, MCPError)

    def test_handshake_is_communication_error(self) -> None:
        assert issubclass(HandshakeError, CommunicationError)

    def test_kinds_are_distinct(self) -> None:
        kinds = {cls.kind for cls in (StartupError, CommunicationError, HandshakeError, ProtocolError, ToolError)}
        assert kinds == {"startup", "communication", "handshake", "protocol", "tool"}


class TestStartupError:
    def test_carries_os_error_text(self) -> None:
        err = StartupError("[Errno 2] No such file or directory: 'node'")
        assert "No such file or directory" in str(err)
        assert err.detail.startswith("[Errno 2]")

    def test_without_detail(self) -> None:
        assert str(StartupError()) == "Failed to start MCP server process"


class TestProtocolError:
    def test_code(self) -> None:
        err = ProtocolError("MCP tools/call error: boom", code=-32000)
        assert err.code == -32000
        assert "boom" in str(err)


class TestToolError:
    def test_attributes(self) -> None:
        err = ToolError("reminder.add", "Text parameter is required")
        assert err.tool == "reminder.add"
        assert err.detail == "Text parameter is required"
        assert "reminder.add" in str(err)
        assert "Text parameter is required" in str(err)
