"""News tools — top headlines and article search."""

from __future__ import annotations

from typing import Any

from toolbridge.capabilities.base import (
    CapabilityTools,
    build_arguments,
    decode_payload,
    load_json,
    validate_payload,
)
from toolbridge.capabilities.models import NewsArticle, TopHeadlinesResult


class NewsTools(CapabilityTools):
    capability = "news"

    async def get_top_headlines(
        self,
        country: str | None = None,
        category: str | None = None,
        page_size: int = 20,
    ) -> TopHeadlinesResult:
        result = await self.client.call_tool(
            "news.get_top_headlines",
            build_arguments(country=country, category=category, pageSize=page_size),
        )
        return decode_payload(TopHeadlinesResult, result)

    async def search_news(
        self,
        query: str,
        page_size: int = 20,
        sort_by: str = "publishedAt",
    ) -> TopHeadlinesResult:
        """Search articles and return them in the headlines shape.

        Search results carry a query instead of country/category, and older
        servers answer with a bare article list, so the wrapper is rebuilt.
        """
        result = await self.client.call_tool(
            "news.search",
            build_arguments(query=query, pageSize=page_size, sortBy=sort_by),
        )
        payload: Any = load_json(result, "news search")
        if isinstance(payload, list):
            payload = {"articles": payload}
        if not isinstance(payload, dict):
            payload = {}
        articles = [validate_payload(NewsArticle, item) for item in payload.get("articles") or []]
        return TopHeadlinesResult(
            articles=articles,
            total_results=_as_int(payload.get("totalResults"), default=len(articles)),
            country=None,
            category=None,
            fetched_at=str(payload.get("fetchedAt") or ""),
        )


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
