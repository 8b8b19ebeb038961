"""
Thought Processor

Turns a raw thought into a short title (max 60 chars) and a summary.
Both prompts must return structured JSON; anything else is a hard failure.
"""

import logging

from ..common.errors import AIAccessError, ProcessingError
from ..common.llm_utils import clean_text, safe_json_parse
from .base import BaseProcessor, ProcessedBlink
from .reminders import shorten_title

logger = logging.getLogger("blinks.capture.thoughts")

MAX_TITLE_LENGTH = 60


THOUGHT_TITLE_PROMPT = """You are a thought analysis assistant. Your task is to create a concise, descriptive title (max 60 characters) that captures the essence of the thought.

Rules for the title:
1. Must be 60 characters or less
2. Use sentence casing (except for proper nouns, abbreviations, etc.)
3. Remove unnecessary words
4. Focus on the main point

Thought: "{text}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"title": "Concise title here"}}"""


THOUGHT_SUMMARY_PROMPT = """You are a thought summarization assistant. Your task is to create a clear summary of the thought.

Rules for the summary:
1. Should capture the main idea and context
2. Use clear, direct language. Don't mention the user in third person (e.g. "The user needs to ...").
3. Use sentence casing (except for proper nouns, abbreviations, etc.)

Thought: "{text}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"summary": "This is a summary of the main idea."}}"""


class ThoughtProcessor(BaseProcessor):
    """Title + summary for thoughts."""

    kind = "thought"

    def process(self, text: str) -> ProcessedBlink:
        thought = self._require_text(text)

        try:
            title_raw = self._ask(THOUGHT_TITLE_PROMPT.format(text=thought))
            title_result = safe_json_parse(title_raw, ["title"])
            if not title_result.success or not str(title_result.data["title"]).strip():
                raise ProcessingError(f"Failed to parse AI title response ({title_result.error or 'empty title'})")

            summary_raw = self._ask(THOUGHT_SUMMARY_PROMPT.format(text=thought))
            summary_result = safe_json_parse(summary_raw, ["summary"])
            if not summary_result.success or not str(summary_result.data["summary"]).strip():
                raise ProcessingError(f"Failed to parse AI summary response ({summary_result.error or 'empty summary'})")
        except AIAccessError:
            raise
        except Exception as e:
            logger.warning("Thought processing failed: %s", e)
            raise ProcessingError(f"Failed to process thought: {e}") from e

        title = shorten_title(clean_text(str(title_result.data["title"])), MAX_TITLE_LENGTH)
        return ProcessedBlink(
            title=title,
            description=clean_text(str(summary_result.data["summary"])),
        )
