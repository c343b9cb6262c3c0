"""Tests for tools/call and tools/list result decoding."""

import pytest

from toolbridge.errors import ProtocolError, ToolError
from toolbridge.mcp.decoder import check_tool_error, decode_tools, extract_text
from toolbridge.mcp.models import JsonRpcError, JsonRpcResponse


def _result(result: dict) -> JsonRpcResponse:
    return JsonRpcResponse(id=2, result=result)


class TestExtractText:
    def test_returns_first_block_text(self) -> None:
        response = _result({"content": [{"type": "text", "text": "first"}, {"type": "text", "text": "second"}]})
        assert extract_text(response, "t") == "first"

    def test_text_returned_verbatim(self) -> None:
        text = '  {"id": "r1", "text": "buy milk"}  \n'
        assert extract_text(_result({"content": [{"text": text}]}), "t") == text

    def test_error_response(self) -> None:
        response = JsonRpcResponse(id=2, error=JsonRpcError(code=-32000, message="boom"))
        with pytest.raises(ProtocolError, match="boom") as info:
            extract_text(response, "t")
        assert info.value.code == -32000

    def test_missing_result(self) -> None:
        with pytest.raises(ProtocolError, match="No result"):
            extract_text(JsonRpcResponse(id=2), "t")

    def test_missing_content(self) -> None:
        with pytest.raises(ProtocolError, match="No content"):
            extract_text(_result({"other": 1}), "t")

    def test_empty_content(self) -> None:
        with pytest.raises(ProtocolError, match="No text content"):
            extract_text(_result({"content": []}), "t")

    def test_first_block_without_text(self) -> None:
        with pytest.raises(ProtocolError, match="No text content"):
            extract_text(_result({"content": [{"type": "image", "data": "..."}]}), "t")

    def test_content_not_a_list(self) -> None:
        with pytest.raises(ProtocolError, match="Malformed content"):
            extract_text(_result({"content": "text"}), "t")

    def test_embedded_error_is_tool_error(self) -> None:
        response = _result({"content": [{"text": '{"error": "Text parameter is required"}'}]})
        with pytest.raises(ToolError, match="Text parameter is required") as info:
            extract_text(response, "reminder.add")
        assert info.value.tool == "reminder.add"

    def test_is_error_flag_with_plain_text(self) -> None:
        response = _result({"content": [{"text": "quota exceeded"}], "isError": True})
        with pytest.raises(ToolError, match="quota exceeded"):
            extract_text(response, "news.search")


class TestCheckToolError:
    def test_plain_text_passes(self) -> None:
        check_tool_error("Hello!", "hello")

    def test_json_list_passes(self) -> None:
        check_tool_error('[{"error": "inside a list"}]', "t")

    def test_object_without_error_passes(self) -> None:
        check_tool_error('{"ok": true}', "t")

    def test_object_error_kept_as_json(self) -> None:
        with pytest.raises(ToolError) as info:
            check_tool_error('{"error": {"code": 429, "message": "rate limited"}}', "news.search")
        assert info.value.detail == '{"code": 429, "message": "rate limited"}'


class TestDecodeTools:
    def test_preserves_order(self) -> None:
        response = _result({"tools": [{"name": "hello"}, {"name": "echo", "description": "Echo"}]})
        tools = decode_tools(response)
        assert [t.name for t in tools] == ["hello", "echo"]
        assert tools[0].description is None
        assert tools[1].description == "Echo"

    def test_missing_tools_array(self) -> None:
        with pytest.raises(ProtocolError, match="No tools array"):
            decode_tools(_result({}))

    def test_tool_without_name(self) -> None:
        with pytest.raises(ProtocolError, match="Malformed tools list"):
            decode_tools(_result({"tools": [{"description": "nameless"}]}))

    def test_error_response(self) -> None:
        response = JsonRpcResponse(id=2, error=JsonRpcError(code=-32002, message="Server not initialized"))
        with pytest.raises(ProtocolError, match="Server not initialized"):
            decode_tools(response)
