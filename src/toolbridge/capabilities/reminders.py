"""Reminder tools — ``reminder.add``, ``reminder.list``, ``reminder.summary_now``."""

from __future__ import annotations

from toolbridge.capabilities.base import (
    CapabilityTools,
    build_arguments,
    decode_payload,
    load_json,
    validate_payload,
    wrap_list,
)
from toolbridge.capabilities.models import Reminder, ReminderListResponse, ReminderSummary


class ReminderTools(CapabilityTools):
    capability = "reminders"

    async def add_reminder(self, text: str, due_date: int | None = None) -> Reminder:
        """Create a reminder; *due_date* is Unix milliseconds."""
        result = await self.client.call_tool(
            "reminder.add", build_arguments(text=text, dueDate=due_date)
        )
        return decode_payload(Reminder, result)

    async def list_reminders(self, only_pending: bool = False) -> ReminderListResponse:
        result = await self.client.call_tool("reminder.list", {"onlyPending": only_pending})
        payload = load_json(result, ReminderListResponse.__name__)
        return validate_payload(ReminderListResponse, wrap_list(payload, "reminders", "totalCount"))

    async def summary_now(self) -> ReminderSummary:
        result = await self.client.call_tool("reminder.summary_now", {})
        return decode_payload(ReminderSummary, result)
