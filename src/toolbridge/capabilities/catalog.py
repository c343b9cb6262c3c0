"""Capability catalog — how to launch each tool server, as data."""

from __future__ import annotations

from toolbridge.config import CapabilitySpec


def _node_server(directory: str) -> list[str]:
    return [f"mcp/{directory}/dist/index.js"]


CAPABILITIES: dict[str, CapabilitySpec] = {
    spec.name: spec
    for spec in (
        CapabilitySpec(
            name="reminders",
            args=_node_server("reminder-server"),
            env_passthrough=["REMINDERS_FILE"],
        ),
        CapabilitySpec(
            name="news",
            args=_node_server("news-server"),
            env_passthrough=["NEWS_API_KEY"],
        ),
        CapabilitySpec(
            name="notion_finance",
            args=_node_server("notion-finance-server"),
            env_passthrough=["NOTION_API_TOKEN", "NOTION_FINANCE_DATABASE_ID"],
        ),
        CapabilitySpec(
            name="notion_notes",
            args=_node_server("notion-finance-server"),
            env_passthrough=["NOTION_API_TOKEN_STUDY", "NOTION_API_TOKEN", "NOTION_STUDY_PARENT_PAGE_ID"],
        ),
        CapabilitySpec(
            name="research",
            args=_node_server("research-server"),
            env_passthrough=["NEWS_API_KEY", "RESEARCH_DIR"],
        ),
        CapabilitySpec(
            name="youtube",
            args=_node_server("youtube-server"),
            env_passthrough=["YOUTUBE_API_KEY"],
        ),
        CapabilitySpec(
            name="wikipedia",
            args=_node_server("wikipedia-server"),
        ),
    )
}


def get_capability(name: str) -> CapabilitySpec:
    try:
        return CAPABILITIES[name]
    except KeyError:
        msg = f"Unknown capability: {name!r} (known: {', '.join(sorted(CAPABILITIES))})"
        raise KeyError(msg) from None
