"""
Bookmark Processor

Summarizes a bookmarked page from its title and URL, and helps quick
capture find the URL and page title in the first place. Every call here is
best-effort: failures fall back to the input rather than raising.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

from ..common.errors import AIAccessError
from ..common.llm_utils import clean_text, strip_code_fences
from .base import BaseProcessor, ProcessedBlink

logger = logging.getLogger("blinks.capture.bookmarks")

NO_URL = "NO_URL"
URL_PATTERN = re.compile(r"https?://[^\s<>\"')\]]+", re.IGNORECASE)


BOOKMARK_SUMMARY_PROMPT = """Generate a concise 1-2 sentence summary of this webpage based on its title and URL.
- Start directly with the main action or purpose (omit phrases like "This webpage", "The page", "This site")
- Focus on the key information and purpose
- Keep it brief and avoid redundancy

Title: {title}
URL: {url}

Summary:"""


PAGE_TITLE_PROMPT = """Get the page title of this webpage. Only respond with the title, nothing else.

URL: {url}

Title:"""


URL_EXTRACTION_PROMPT = """Extract the URL from this text. If there is no URL, respond with "NO_URL". Only respond with the URL or "NO_URL", nothing else.

Text: {text}

URL:"""


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def get_url_domain(url: str) -> str:
    """Hostname of a URL, or the input unchanged when it does not parse."""
    return urlparse(url).hostname or url


class BookmarkProcessor(BaseProcessor):
    """Summary, URL and page title helpers for bookmarks."""

    kind = "bookmark"

    def process(self, title: str, url: str) -> ProcessedBlink:
        title = (title or "").strip() or url
        logger.debug("Processing bookmark title=%r url=%r", title, url)

        try:
            summary = self._ask(BOOKMARK_SUMMARY_PROMPT.format(title=title, url=url))
        except AIAccessError:
            raise
        except Exception as e:
            logger.warning("Bookmark summary failed, keeping title only: %s", e)
            return ProcessedBlink(title=title, description="")

        return ProcessedBlink(title=title, description=clean_text(strip_code_fences(summary)))

    def extract_url(self, text: str) -> Optional[str]:
        """URL in the text: regex first, then the model. None when absent."""
        match = URL_PATTERN.search(text or "")
        if match:
            return match.group(0).rstrip(".,;:!?")

        if not text or not text.strip() or not self.is_available:
            return None
        try:
            answer = strip_code_fences(self._ask(URL_EXTRACTION_PROMPT.format(text=text))).strip()
        except Exception as e:
            logger.info("URL extraction failed: %s", e)
            return None

        if not answer or answer == NO_URL or not is_valid_url(answer):
            return None
        return answer

    def fetch_page_title(self, url: str) -> str:
        """Page title via the model; the URL itself when that fails."""
        if not self.is_available:
            return url
        try:
            title = clean_text(strip_code_fences(self._ask(PAGE_TITLE_PROMPT.format(url=url))))
        except Exception as e:
            logger.info("Page title lookup failed for %s: %s", url, e)
            return url
        return title or url
