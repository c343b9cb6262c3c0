"""Capability payload models.

Tool servers speak camelCase JSON; these models expose snake_case attributes
and accept either spelling on input. Optional fields decode to ``None``
whether the key is missing or explicitly ``null``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Payload(BaseModel):
    """Base for tool payloads: camelCase on the wire, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


class Reminder(Payload):
    id: str
    text: str
    created_at: int | None = None
    due_date: int | None = None
    completed: bool = False
    completed_at: int | None = None


class ReminderListResponse(Payload):
    reminders: list[Reminder]
    total_count: int


class ReminderSummary(Payload):
    pending_count: int
    overdue_count: int
    reminders: list[Reminder] = []
    ai_summary: str | None = None
    generated_at: int


# ---------------------------------------------------------------------------
# News and research
# ---------------------------------------------------------------------------


class NewsArticle(Payload):
    source: str
    author: str | None = None
    title: str
    description: str | None = None
    url: str
    published_at: str


class TopHeadlinesResult(Payload):
    articles: list[NewsArticle]
    total_results: int
    country: str | None = None
    category: str | None = None
    fetched_at: str


class NewsSearchResult(Payload):
    query: str
    total_results: int
    articles: list[NewsArticle]
    fetched_at: str


class SaveFileResult(Payload):
    path: str
    ok: bool


# ---------------------------------------------------------------------------
# Notion
# ---------------------------------------------------------------------------


class FinanceEntry(Payload):
    id: str
    title: str
    amount: float
    date: str
    category_ids: list[str] = Field(default_factory=list)
    url: str | None = None


class FinanceEntriesResult(Payload):
    entries: list[FinanceEntry]
    total_count: int
    database_id: str


class StudyNote(Payload):
    notion_page_id: str | None = None
    title: str
    topic: str
    key_points: list[str]
    explanation: str
    resources: list[str]


class CreateNoteResult(Payload):
    page_id: str
    url: str


# ---------------------------------------------------------------------------
# Tutor sources
# ---------------------------------------------------------------------------


class YouTubeVideo(Payload):
    title: str
    url: str
    channel: str | None = None
    duration: str | None = None


class YouTubeSearchResult(Payload):
    videos: list[YouTubeVideo]


class WikipediaSnippet(Payload):
    title: str
    url: str
    summary: str
