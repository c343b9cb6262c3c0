"""Typed capability façades over the generic MCP client."""

from toolbridge.capabilities.catalog import CAPABILITIES, get_capability
from toolbridge.capabilities.news import NewsTools
from toolbridge.capabilities.notion import FinanceTools, StudyNoteTools
from toolbridge.capabilities.reminders import ReminderTools
from toolbridge.capabilities.research import ResearchTools
from toolbridge.capabilities.tutor import WikipediaTools, YouTubeTools

__all__ = [
    "CAPABILITIES",
    "FinanceTools",
    "NewsTools",
    "ReminderTools",
    "ResearchTools",
    "StudyNoteTools",
    "WikipediaTools",
    "YouTubeTools",
    "get_capability",
]
