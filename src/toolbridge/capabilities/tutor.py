"""Tutor sources — explainer videos and encyclopedia summaries."""

from __future__ import annotations

from toolbridge.capabilities.base import (
    CapabilityTools,
    decode_payload,
    load_json,
    validate_payload,
    wrap_list,
)
from toolbridge.capabilities.models import WikipediaSnippet, YouTubeSearchResult, YouTubeVideo


class YouTubeTools(CapabilityTools):
    capability = "youtube"

    async def search_explain_videos(self, topic: str, max_results: int = 5) -> list[YouTubeVideo]:
        result = await self.client.call_tool(
            "youtube.search_explain",
            {"query": f"{topic} explained for beginners", "maxResults": max_results},
        )
        payload = wrap_list(load_json(result, YouTubeSearchResult.__name__), "videos")
        return validate_payload(YouTubeSearchResult, payload).videos


class WikipediaTools(CapabilityTools):
    capability = "wikipedia"

    async def summary(self, topic: str) -> WikipediaSnippet:
        result = await self.client.call_tool("wikipedia.summary", {"topic": topic})
        return decode_payload(WikipediaSnippet, result)
