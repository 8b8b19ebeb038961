"""
Reminder Processor

Splits a reminder into an action-oriented title (verb first, max 40 chars,
no timing or location) and a description holding only the contextual
details. Also extracts an optional due date from the reminder text.
"""

import logging
from datetime import datetime
from typing import Optional

from ..common.errors import AIAccessError, ProcessingError
from ..common.llm_utils import clean_text, safe_json_parse, strip_code_fences
from .base import BaseProcessor, ProcessedBlink

logger = logging.getLogger("blinks.capture.reminders")

MAX_TITLE_LENGTH = 40
NO_DATE = "NO_DATE"


REMINDER_TITLE_PROMPT = """You are a reminder analysis assistant. Your task is to create a concise, action-oriented title that captures the core action of the reminder.

Rules for the title:
1. Must be 40 characters or less
2. Start with a verb (e.g. "Call", "Submit", "Buy", "Review")
3. Use sentence casing (except for proper nouns, abbreviations, etc.)
4. Remove unnecessary words
5. Focus ONLY on the core action - exclude timing, location, and other contextual details
6. Keep it simple and direct

Examples:
Input: "Remind me to pick up dry cleaning when I get to downtown"
Title: "Pick up dry cleaning"

Input: "Need to call mom tomorrow at 2pm to discuss the family reunion"
Title: "Call mom"

Input: "Remember to buy groceries"
Title: "Buy groceries"

Reminder: "{text}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"title": "Action-oriented title here"}}"""


REMINDER_DESCRIPTION_PROMPT = """You are a reminder summarization assistant. Your task is to create a clear description that focuses on the contextual details of the reminder.

Rules for the description:
1. Focus ONLY on contextual details like timing, location, conditions, or requirements
2. Do NOT repeat the core action from the title
3. Use clear, direct language. Don't mention the user in third person (e.g. "The user needs to ...")
4. Use sentence casing (except for proper nouns, abbreviations, etc.)
5. Keep it concise but informative
6. If there are no contextual details, return an empty string

Examples:
Input: "Remind me to pick up dry cleaning when I get to downtown"
Description: "When arriving in downtown"

Input: "Need to call mom tomorrow at 2pm to discuss the family reunion"
Description: "Discuss family reunion tomorrow at 2pm"

Input: "Remember to buy groceries"
Description: ""

Reminder: "{text}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"description": "Contextual details here"}}"""


REMINDER_DATE_PROMPT = """Extract the date and time this reminder is due. The current date and time is {now}.

Rules:
- Resolve relative expressions ("tomorrow", "next Friday", "in 2 hours") against the current date and time
- Respond with a single ISO 8601 timestamp (e.g. 2025-03-14T14:00:00)
- If the reminder mentions no date or time, respond with "NO_DATE"
- Only respond with the timestamp or "NO_DATE", nothing else

Reminder: {text}

Date:"""


def shorten_title(title: str, limit: int = MAX_TITLE_LENGTH) -> str:
    """Cut a title to ``limit`` characters at a word boundary."""
    if len(title) <= limit:
        return title
    cut = title[:limit + 1].rsplit(" ", 1)[0].rstrip(" ,.;:-")
    return cut if cut else title[:limit]


class ReminderProcessor(BaseProcessor):
    """Title + contextual description for reminders."""

    kind = "reminder"

    def process(self, text: str) -> ProcessedBlink:
        reminder = self._require_text(text)

        # Single words are already as short as a title gets
        if " " not in reminder:
            return ProcessedBlink(title=reminder[0].upper() + reminder[1:], description="")

        try:
            title_raw = self._ask(REMINDER_TITLE_PROMPT.format(text=reminder))
            title_result = safe_json_parse(title_raw, ["title"])
            if not title_result.success or not str(title_result.data["title"]).strip():
                raise ProcessingError("Failed to parse AI title response")

            description_raw = self._ask(REMINDER_DESCRIPTION_PROMPT.format(text=reminder))
            description_result = safe_json_parse(description_raw, ["description"])
            if not description_result.success:
                raise ProcessingError("Failed to parse AI description response")
        except AIAccessError:
            raise
        except Exception as e:
            logger.warning("Reminder processing failed: %s", e)
            raise ProcessingError(f"Failed to process reminder: {e}") from e

        description = description_result.data["description"] or ""
        return ProcessedBlink(
            title=shorten_title(clean_text(str(title_result.data["title"]))),
            description=clean_text(str(description)),
        )

    def extract_date(self, text: str, now: Optional[datetime] = None) -> Optional[datetime]:
        """Best-effort due date; None when absent or on any failure."""
        if not text or not text.strip() or not self.is_available:
            return None

        now = now or datetime.now()
        try:
            raw = self._ask(REMINDER_DATE_PROMPT.format(now=now.isoformat(timespec="minutes"), text=text.strip()))
        except Exception as e:
            logger.info("Reminder date extraction failed: %s", e)
            return None

        return parse_reminder_date(raw)


def parse_reminder_date(raw: str) -> Optional[datetime]:
    """Parse the date prompt answer; None for NO_DATE or anything unparseable."""
    value = strip_code_fences(raw or "").strip().strip("\"'")
    if not value or value.upper() == NO_DATE:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.info("Unparseable reminder date: %r", raw)
        return None
