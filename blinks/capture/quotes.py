"""
Quote Processor

Cleans a quote and works out who said it.

Three prompts:
1. identify: who is the author (only when confident) plus a short
   historical note
2. clean: strip any in-text attribution ("— Author", "by Author",
   "- Author") and report the attributed name
3. compare (only with an attribution): do the attributed and identified
   names refer to the same person

Same person: keep the identified name and its note. Different person: keep
the user's attribution without a note. Any failure degrades to the trimmed
original text.
"""

import logging
from typing import Optional

from ..common.errors import AIAccessError
from ..common.llm_utils import clean_text, parse_llm_json
from .base import BaseProcessor, ProcessedBlink

logger = logging.getLogger("blinks.capture.quotes")


QUOTE_IDENTIFY_PROMPT = """You are a quote analysis assistant. Analyze this quote and provide a JSON response with exactly these fields:
- identifiedAuthor: The author of this quote (if you are confident about the attribution), or null if you cannot confidently identify the author
- description: A brief historical context or significance (2-3 sentences) ONLY if you can confidently identify the author

Quote: "{text}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"identifiedAuthor": "Author Name", "description": "Historical context here"}}"""


QUOTE_CLEAN_PROMPT = """You are a quote cleaning assistant. Analyze this quote and provide a JSON response with exactly these fields:
- cleanedQuote: The quote with any attribution removed (e.g. "by Author", "— Author", "- Author")
- attributedAuthor: The author's name if found in the attribution, or null if no attribution found

Quote: "{text}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"cleanedQuote": "The cleaned quote without attribution", "attributedAuthor": "Author Name"}}"""


AUTHOR_COMPARE_PROMPT = """You are an author name comparison assistant. Compare these two names and determine if they refer to the same person.
Provide a JSON response with exactly this field:
- isSamePerson: true if the names refer to the same person (e.g. "Mahatma Gandhi" and "Gandhi" are the same person), false otherwise

Name 1: "{attributed}"
Name 2: "{identified}"

Respond with ONLY the JSON object, no markdown formatting or additional text. Example format:
{{"isSamePerson": true}}"""


def _optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("null", "none", "unknown"):
        return None
    return text


class QuoteProcessor(BaseProcessor):
    """Formatted quote, author and historical note."""

    kind = "quote"

    def process(self, text: str) -> ProcessedBlink:
        quote = self._require_text(text)

        try:
            return self._process(quote)
        except AIAccessError:
            raise
        except Exception as e:
            logger.warning("Quote processing failed, keeping original text: %s", e)
            return ProcessedBlink(title=quote)

    def _process(self, quote: str) -> ProcessedBlink:
        identify = parse_llm_json(self._ask(QUOTE_IDENTIFY_PROMPT.format(text=quote)))
        cleaned = parse_llm_json(self._ask(QUOTE_CLEAN_PROMPT.format(text=quote), creativity="none"))

        if "cleanedQuote" not in cleaned:
            raise ValueError("clean response missing cleanedQuote")

        formatted = clean_text(str(cleaned["cleanedQuote"] or "")) or quote
        identified = _optional_text(identify.get("identifiedAuthor"))
        note = _optional_text(identify.get("description"))
        attributed = _optional_text(cleaned.get("attributedAuthor"))

        if attributed:
            if identified and self._same_person(attributed, identified):
                return ProcessedBlink(title=formatted, author=identified, description=note)
            return ProcessedBlink(title=formatted, author=attributed)

        if identified:
            return ProcessedBlink(title=formatted, author=identified, description=note)
        return ProcessedBlink(title=formatted)

    def _same_person(self, attributed: str, identified: str) -> bool:
        if attributed.casefold() == identified.casefold():
            return True
        raw = self._ask(
            AUTHOR_COMPARE_PROMPT.format(attributed=attributed, identified=identified),
            creativity="none",
        )
        return parse_llm_json(raw).get("isSamePerson") is True
