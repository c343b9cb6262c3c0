"""Process supervisor — owns one MCP server subprocess and its stdio pipes.

Sends and receives newline-delimited text. stderr is piped separately and
drained by a background task that only ever logs.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from toolbridge.errors import CommunicationError, StartupError

if TYPE_CHECKING:
    from toolbridge.config import ServerConfig

logger = logging.getLogger(__name__)


def resolve_args(args: list[str], working_dir: Path, project_root: Path) -> list[str]:
    """Resolve relative file arguments against *working_dir*, then *project_root*.

    The first candidate that exists wins. Arguments that match nothing on disk
    are passed through literally since the file may be created later.
    """
    resolved: list[str] = []
    for arg in args:
        path = Path(arg)
        if path.is_absolute():
            resolved.append(arg)
            continue
        for base in (working_dir, project_root):
            candidate = base / path
            if candidate.exists():
                logger.info("Resolved path (%s): %s -> %s", base, arg, candidate.resolve())
                resolved.append(str(candidate.resolve()))
                break
        else:
            resolved.append(arg)
    return resolved


class ProcessSupervisor:
    """Spawns, watches, and tears down a single server process."""

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._process: asyncio.subprocess.Process | None = None
        self._stderr_task: asyncio.Task[None] | None = None

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        return self._process

    async def start(self) -> None:
        """Launch the subprocess with separate stdout and stderr pipes."""
        config = self._config
        project_root = config.resolved_project_root()
        args = resolve_args(config.args, config.resolved_working_dir(), project_root)
        for key in config.missing_passthrough():
            logger.warning("%s: %s not found in environment", config.name, key)

        logger.info("Starting MCP server %s: %s %s", config.name, config.command, " ".join(args))
        try:
            self._process = await asyncio.create_subprocess_exec(
                config.command,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=project_root if project_root.is_dir() else None,
                env=config.child_env(),
                limit=config.max_line_bytes,
            )
        except OSError as exc:
            logger.error("Failed to start MCP server %s: %s", config.name, exc)
            raise StartupError(str(exc)) from exc

        if self._process.stderr is not None:
            self._stderr_task = asyncio.create_task(self._drain_stderr(self._process.stderr))

    def is_alive(self) -> bool:
        """True iff the process was started and has not exited."""
        return self._process is not None and self._process.returncode is None

    async def write_line(self, line: str) -> None:
        """Write one line plus terminator to stdin and flush it."""
        if self._process is None or self._process.stdin is None:
            msg = "Transport not connected"
            raise CommunicationError(msg)
        try:
            self._process.stdin.write(line.encode() + b"\n")
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as exc:
            msg = f"MCP server {self._config.name} closed its input: {exc}"
            raise CommunicationError(msg) from exc

    async def read_line(self, timeout: float | None = None) -> str | None:
        """Read one line from stdout; ``None`` means the stream is closed."""
        if self._process is None or self._process.stdout is None:
            msg = "Transport not connected"
            raise CommunicationError(msg)
        wait = self._config.read_timeout if timeout is None else timeout
        try:
            raw = await asyncio.wait_for(self._process.stdout.readline(), timeout=wait)
        except TimeoutError as exc:
            msg = f"Timed out after {wait}s waiting for MCP server {self._config.name}"
            raise CommunicationError(msg) from exc
        except ValueError as exc:
            msg = f"Line from MCP server {self._config.name} exceeds {self._config.max_line_bytes} bytes"
            raise CommunicationError(msg) from exc
        if not raw:
            return None
        return raw.decode(errors="replace").rstrip("\r\n")

    async def close(self) -> None:
        """Terminate the subprocess. Idempotent and never raises."""
        process, self._process = self._process, None
        task, self._stderr_task = self._stderr_task, None
        if process is not None:
            if process.stdin is not None:
                process.stdin.close()
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.terminate()
                try:
                    await asyncio.wait_for(process.wait(), timeout=self._config.shutdown_timeout)
                except TimeoutError:
                    logger.warning("MCP server %s ignored terminate, killing", self._config.name)
                    with contextlib.suppress(ProcessLookupError):
                        process.kill()
                    await process.wait()
            logger.debug("MCP server %s exited with %s", self._config.name, process.returncode)
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _drain_stderr(self, stream: asyncio.StreamReader) -> None:
        try:
            while True:
                raw = await stream.readline()
                if not raw:
                    return
                logger.info("%s stderr: %s", self._config.name, raw.decode(errors="replace").rstrip())
        except (OSError, ValueError) as exc:
            logger.debug("stderr drain for %s stopped: %s", self._config.name, exc)
