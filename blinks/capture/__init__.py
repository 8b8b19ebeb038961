"""
Blink Capture

Classifies captured text and enriches it with an LLM before it is stored.

Key Components:
- detect_blink_type: inline marker classification for quick capture
- ThoughtProcessor / ReminderProcessor / QuoteProcessor / BookmarkProcessor:
  per-type AI enrichment
- CaptureService: the capture, edit, toggle, delete and list commands
"""

from .base import ProcessedBlink
from .bookmarks import BookmarkProcessor
from .browser import BrowserTab, StaticTabProvider, TabProvider
from .classifier import DetectedBlink, detect_blink_type, remove_prefix
from .quotes import QuoteProcessor
from .reminders import ReminderProcessor
from .service import CaptureRequest, CaptureService, EditRequest
from .thoughts import ThoughtProcessor

__all__ = [
    "BookmarkProcessor",
    "BrowserTab",
    "CaptureRequest",
    "CaptureService",
    "DetectedBlink",
    "EditRequest",
    "ProcessedBlink",
    "QuoteProcessor",
    "ReminderProcessor",
    "StaticTabProvider",
    "TabProvider",
    "ThoughtProcessor",
    "detect_blink_type",
    "remove_prefix",
]
