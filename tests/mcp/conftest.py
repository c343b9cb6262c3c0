"""In-memory supervisor doubles for session and client tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from toolbridge.config import ServerConfig

INIT_RESPONSE: dict[str, Any] = {
    "jsonrpc": "2.0",
    "id": 1,
    "result": {
        "protocolVersion": "2024-11-05",
        "capabilities": {"tools": {}},
        "serverInfo": {"name": "fake-mcp", "version": "1.0"},
    },
}


def line(message: dict[str, Any]) -> str:
    return json.dumps(message)


def text_response(text: str, request_id: int = 2) -> str:
    return line({
        "jsonrpc": "2.0",
        "id": request_id,
        "result": {"content": [{"type": "text", "text": text}]},
    })


def make_config(**overrides: Any) -> ServerConfig:
    data: dict[str, Any] = {"name": "fake", "command": "fake-server"}
    data.update(overrides)
    return ServerConfig.model_validate(data)


class FakeSupervisor:
    """Stands in for ProcessSupervisor, replaying scripted stdout lines.

    Script items are lines, ``None`` for EOF, exceptions to raise from
    ``read_line``, or an :class:`asyncio.Event` that blocks the read until set.
    """

    def __init__(
        self,
        config: ServerConfig,
        lines: list[Any],
        start_error: BaseException | None = None,
        events: list[str] | None = None,
    ) -> None:
        self.config = config
        self.lines = list(lines)
        self.start_error = start_error
        self.events = events if events is not None else []
        self.written: list[dict[str, Any]] = []
        self.alive = False
        self.closed = False

    async def start(self) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.alive = True

    def is_alive(self) -> bool:
        return self.alive

    async def write_line(self, data: str) -> None:
        self.events.append("write")
        self.written.append(json.loads(data))
        await asyncio.sleep(0)

    async def read_line(self, timeout: float | None = None) -> str | None:
        self.events.append("read")
        await asyncio.sleep(0)
        if not self.lines:
            return None
        item = self.lines.pop(0)
        if isinstance(item, asyncio.Event):
            await item.wait()
            return self.lines.pop(0) if self.lines else None
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True
        self.alive = False


class FakeFactory:
    """Supervisor factory handing out one scripted FakeSupervisor per spawn.

    Each script is a list of lines, or an exception raised from ``start``.
    """

    def __init__(self, *scripts: list[Any] | BaseException) -> None:
        self.scripts = list(scripts)
        self.instances: list[FakeSupervisor] = []
        self.events: list[str] = []

    def __call__(self, config: ServerConfig) -> FakeSupervisor:
        script = self.scripts.pop(0) if self.scripts else []
        if isinstance(script, BaseException):
            supervisor = FakeSupervisor(config, [], start_error=script, events=self.events)
        else:
            supervisor = FakeSupervisor(config, script, events=self.events)
        self.instances.append(supervisor)
        return supervisor
