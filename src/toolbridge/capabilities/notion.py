"""Notion tools — finance ledger entries and study notes."""

from __future__ import annotations

from toolbridge.capabilities.base import CapabilityTools, build_arguments, decode_payload
from toolbridge.capabilities.models import CreateNoteResult, FinanceEntriesResult, StudyNote


class FinanceTools(CapabilityTools):
    capability = "notion_finance"

    async def get_entries(
        self,
        from_date: str | None = None,
        to_date: str | None = None,
        limit: int = 50,
    ) -> FinanceEntriesResult:
        """Fetch ledger entries, optionally bounded by ISO dates."""
        result = await self.client.call_tool(
            "notion.finance_get_entries",
            build_arguments(fromDate=from_date, toDate=to_date, limit=limit),
        )
        return decode_payload(FinanceEntriesResult, result)


class StudyNoteTools(CapabilityTools):
    capability = "notion_notes"

    async def create_study_note(self, note: StudyNote) -> str:
        """Create a study note page and return its page id."""
        arguments = build_arguments(
            title=note.title,
            topic=note.topic,
            keyPoints=list(note.key_points),
            explanation=note.explanation,
            resources=list(note.resources),
        )
        result = await self.client.call_tool("notion.create_study_note", arguments)
        return decode_payload(CreateNoteResult, result).page_id
