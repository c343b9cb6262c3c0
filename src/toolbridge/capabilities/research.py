"""Research tools — document search and saving results to disk."""

from __future__ import annotations

from toolbridge.capabilities.base import CapabilityTools, decode_payload
from toolbridge.capabilities.models import NewsSearchResult, SaveFileResult


class ResearchTools(CapabilityTools):
    capability = "research"

    async def search_docs(self, query: str, page_size: int = 10) -> NewsSearchResult:
        result = await self.client.call_tool(
            "news.search_docs", {"query": query, "pageSize": page_size}
        )
        return decode_payload(NewsSearchResult, result)

    async def save_to_file(self, filename: str, content: str) -> SaveFileResult:
        result = await self.client.call_tool(
            "fs.save_to_file", {"filename": filename, "content": content}
        )
        return decode_payload(SaveFileResult, result)
