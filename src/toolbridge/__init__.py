"""toolbridge — process-based JSON-RPC transport to MCP tool servers."""

from __future__ import annotations

__version__ = "0.1.0"
