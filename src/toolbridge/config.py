"""Server configuration — command line, environment passthrough, timeouts."""

from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

# Variables a child process needs to locate executables and behave sanely.
# Everything else must be named explicitly in ``env_passthrough``.
ESSENTIAL_ENV_VARS = (
    "PATH",
    "HOME",
    "USERPROFILE",
    "SYSTEMROOT",
    "TEMP",
    "TMP",
    "TMPDIR",
    "LANG",
    "LC_ALL",
)

BUILTIN_SERVER = "builtin"


def default_project_root(cwd: Path | None = None) -> Path:
    """Return the directory relative server scripts are resolved against.

    When running from inside a ``server`` subdirectory the project root is
    its parent, otherwise the current directory itself.
    """
    current = cwd or Path.cwd()
    if current.name == "server":
        return current.parent
    return current


class ServerConfig(BaseModel):
    """Everything needed to spawn and talk to one MCP server process.

    ``env_passthrough`` names host environment variables that are forwarded
    when present; ``env`` holds explicit overrides that are always set.
    """

    name: str = "mcp"
    command: str
    args: list[str] = []
    env_passthrough: list[str] = []
    env: dict[str, str] = {}
    working_dir: Path | None = None
    project_root: Path | None = None
    read_timeout: float = 30.0
    shutdown_timeout: float = 5.0
    max_line_bytes: int = 16 * 1024 * 1024
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    client_name: str = "toolbridge"
    client_version: str = "0.1.0"
    record_transcript: bool = False

    def resolved_working_dir(self) -> Path:
        return self.working_dir or Path.cwd()

    def resolved_project_root(self) -> Path:
        return self.project_root or default_project_root(self.working_dir)

    def child_env(self, host_env: dict[str, str] | None = None) -> dict[str, str]:
        """Build the environment for the child process.

        Only essential variables, the named passthrough variables and explicit
        overrides are included; the host environment is never copied whole.
        """
        source = os.environ if host_env is None else host_env
        env = {key: source[key] for key in ESSENTIAL_ENV_VARS if key in source}
        for key in self.env_passthrough:
            if key in source:
                env[key] = source[key]
        env.update(self.env)
        return env

    def missing_passthrough(self, host_env: dict[str, str] | None = None) -> list[str]:
        source = os.environ if host_env is None else host_env
        return [key for key in self.env_passthrough if key not in source and key not in self.env]

    @classmethod
    def from_server_path(cls, server_path: str | None = None, **overrides: object) -> ServerConfig:
        """Build a config from an ``MCP_SERVER_PATH``-style value.

        * ``builtin`` runs the bundled reference server with this interpreter.
        * ``npx <package> ...`` runs ``npx`` with the remaining words.
        * anything else is treated as a command line.
        """
        value = server_path or os.environ.get("MCP_SERVER_PATH") or BUILTIN_SERVER
        if value == BUILTIN_SERVER:
            command = sys.executable
            args = ["-m", "toolbridge.mcp.server"]
        else:
            parts = shlex.split(value)
            if not parts:
                msg = "Server path must not be empty"
                raise ValueError(msg)
            command, args = parts[0], parts[1:]
        data: dict[str, object] = {"name": value, "command": command, "args": args}
        data.update(overrides)
        return cls.model_validate(data)


class CapabilitySpec(BaseModel):
    """Catalog entry describing how to launch one capability's tool server."""

    name: str
    command: str = "node"
    args: list[str] = []
    env_passthrough: list[str] = Field(default_factory=list)

    def to_server_config(
        self,
        host_env: dict[str, str] | None = None,
        **overrides: object,
    ) -> ServerConfig:
        """Resolve this entry into a :class:`ServerConfig`.

        ``MCP_<NAME>_CMD`` and ``MCP_<NAME>_ARGS`` (space separated) in the
        host environment replace the default command line.
        """
        source = os.environ if host_env is None else host_env
        prefix = f"MCP_{self.name.upper()}"
        command = source.get(f"{prefix}_CMD") or self.command
        args_value = source.get(f"{prefix}_ARGS")
        args = args_value.split() if args_value else list(self.args)
        data: dict[str, object] = {
            "name": self.name,
            "command": command,
            "args": args,
            "env_passthrough": list(self.env_passthrough),
        }
        data.update(overrides)
        return ServerConfig.model_validate(data)
