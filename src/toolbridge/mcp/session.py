"""Session manager — handshake, request correlation, self-healing respawn.

A :class:`Session` pairs one :class:`ProcessSupervisor` with its handshake
state. Exactly one request is in flight at a time: the write of a request and
the read of its single response line happen under one lock.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from pydantic import ValidationError

from toolbridge.errors import CommunicationError, HandshakeError, MCPError, ProtocolError
from toolbridge.mcp.models import (
    ClientInfo,
    InitializeParams,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    McpJsonMessage,
)
from toolbridge.mcp.supervisor import ProcessSupervisor
from toolbridge.utils.telemetry import ATTR_REQUEST_ID, ATTR_SERVER_NAME, get_tracer

if TYPE_CHECKING:
    from collections.abc import Callable

    from toolbridge.config import ServerConfig

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

# Some runtimes print banners before protocol output starts.
MAX_SKIPPED_HANDSHAKE_LINES = 10

# Oldest recorded messages are dropped past this many.
MAX_TRANSCRIPT_MESSAGES = 500


class SessionState(Enum):
    UNSTARTED = "unstarted"
    AWAITING_INITIALIZE_RESPONSE = "awaiting_initialize_response"
    READY = "ready"
    FAILED = "failed"


class Session:
    """One live server process plus its handshake state.

    ``ensure_ready()`` is idempotent: while the session is ready and the
    process is alive it returns immediately, otherwise it tears down whatever
    is left and replays spawn + handshake.
    """

    def __init__(
        self,
        config: ServerConfig,
        supervisor_factory: Callable[[ServerConfig], ProcessSupervisor] = ProcessSupervisor,
    ) -> None:
        self._config = config
        self._supervisor_factory = supervisor_factory
        self._supervisor: ProcessSupervisor | None = None
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self.state = SessionState.UNSTARTED
        self.spawn_count = 0
        self.server_info: dict[str, Any] = {}
        self.transcript: list[McpJsonMessage] = []
        self.recorded_count = 0

    @property
    def supervisor(self) -> ProcessSupervisor | None:
        return self._supervisor

    @property
    def is_ready(self) -> bool:
        return (
            self.state is SessionState.READY
            and self._supervisor is not None
            and self._supervisor.is_alive()
        )

    def transcript_since(self, mark: int) -> list[McpJsonMessage]:
        """Return the retained messages recorded after *mark*, a previous ``recorded_count``."""
        dropped = self.recorded_count - len(self.transcript)
        return self.transcript[max(mark - dropped, 0) :]

    async def ensure_ready(self) -> None:
        async with self._lock:
            await self._ensure_ready_locked()

    async def request(self, method: str, params: dict[str, Any] | None = None) -> JsonRpcResponse:
        """Send one request and return its single response."""
        async with self._lock:
            await self._ensure_ready_locked()
            return await self._exchange(method, params or {})

    async def close(self) -> None:
        """Tear down the process. Safe to call repeatedly, never raises."""
        supervisor, self._supervisor = self._supervisor, None
        self.state = SessionState.UNSTARTED
        if supervisor is not None:
            await supervisor.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _ensure_ready_locked(self) -> None:
        if self.is_ready:
            return
        if self._supervisor is not None:
            logger.info("MCP server %s is not alive, respawning", self._config.name)
            await self.close()

        with _tracer.start_as_current_span("mcp.handshake") as span:
            span.set_attribute(ATTR_SERVER_NAME, self._config.name)
            self._ids = itertools.count(1)
            self._supervisor = self._supervisor_factory(self._config)
            self.spawn_count += 1
            try:
                await self._supervisor.start()
                self.state = SessionState.AWAITING_INITIALIZE_RESPONSE
                await self._handshake()
            except (MCPError, asyncio.CancelledError):
                await self.close()
                self.state = SessionState.FAILED
                raise
        self.state = SessionState.READY
        logger.info("MCP server %s initialized", self._config.name)

    async def _handshake(self) -> None:
        params = InitializeParams(
            protocol_version=self._config.protocol_version,
            capabilities={},
            client_info=ClientInfo(
                name=self._config.client_name,
                version=self._config.client_version,
            ),
        )
        request = JsonRpcRequest(
            id=next(self._ids),
            method="initialize",
            params=params.model_dump(by_alias=True),
        )
        await self._send(request.model_dump())

        line = await self._read_handshake_line()
        try:
            payload = json.loads(line)
            response = JsonRpcResponse.model_validate(payload)
        except (json.JSONDecodeError, ValidationError) as exc:
            self._record("error", line)
            msg = f"Malformed initialize response from MCP server {self._config.name}: {exc}"
            raise HandshakeError(msg) from exc
        self._record("response", payload)

        if response.error is not None:
            msg = f"MCP initialize error: {response.error.message}"
            raise HandshakeError(msg)
        if response.id is not None and response.id != request.id:
            msg = f"Initialize response id {response.id!r} does not match request id {request.id}"
            raise HandshakeError(msg)
        self.server_info = dict((response.result or {}).get("serverInfo") or {})

        notification = JsonRpcNotification(method="notifications/initialized")
        await self._send(notification.to_wire())

    async def _read_handshake_line(self) -> str:
        assert self._supervisor is not None
        skipped = 0
        while True:
            try:
                line = await self._supervisor.read_line()
            except CommunicationError as exc:
                raise HandshakeError(str(exc)) from exc
            if line is None:
                msg = f"MCP server {self._config.name} closed its output before answering initialize"
                raise HandshakeError(msg)
            stripped = line.strip()
            if stripped.startswith(("{", "[")):
                return stripped
            skipped += 1
            logger.debug("Skipping non-JSON line from %s: %s", self._config.name, line)
            if skipped > MAX_SKIPPED_HANDSHAKE_LINES:
                msg = f"No valid JSON response from MCP server {self._config.name}"
                raise HandshakeError(msg)

    async def _exchange(self, method: str, params: dict[str, Any]) -> JsonRpcResponse:
        assert self._supervisor is not None
        request = JsonRpcRequest(id=next(self._ids), method=method, params=params)
        trace.get_current_span().set_attribute(ATTR_REQUEST_ID, request.id)
        try:
            await self._send(request.model_dump())
            line = await self._supervisor.read_line()
        except (CommunicationError, asyncio.CancelledError):
            # The reply, if any, is still unread; this process cannot be reused.
            await self._invalidate()
            raise
        if line is None:
            await self._invalidate()
            msg = f"No response to {method} request"
            raise CommunicationError(msg)

        logger.debug("<- %s", line)
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            self._record("error", line)
            await self._invalidate()
            msg = f"Invalid JSON in response to {method}: {exc}"
            raise ProtocolError(msg) from exc
        self._record("response", payload)

        try:
            response = JsonRpcResponse.model_validate(payload)
        except ValidationError as exc:
            msg = f"Malformed JSON-RPC response to {method}: {exc}"
            raise ProtocolError(msg) from exc

        if response.id is not None and response.id != request.id:
            await self._invalidate()
            msg = f"Response id {response.id!r} does not match request id {request.id}"
            raise ProtocolError(msg)
        return response

    async def _send(self, data: dict[str, Any]) -> None:
        assert self._supervisor is not None
        line = json.dumps(data, separators=(",", ":"))
        logger.debug("-> %s", line)
        self._record("request", data)
        await self._supervisor.write_line(line)

    async def _invalidate(self) -> None:
        logger.warning("Dropping session with MCP server %s", self._config.name)
        await self.close()

    def _record(self, direction: str, data: Any) -> None:
        if not self._config.record_transcript:
            return
        content = data if isinstance(data, str) else json.dumps(data, indent=2)
        self.transcript.append(McpJsonMessage(direction=direction, content=content))  # type: ignore[arg-type]
        self.recorded_count += 1
        overflow = len(self.transcript) - MAX_TRANSCRIPT_MESSAGES
        if overflow > 0:
            del self.transcript[:overflow]
