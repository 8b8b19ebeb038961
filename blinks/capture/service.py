"""
Capture Service

The commands behind both surfaces (CLI and HTTP):

- quick_capture: one line of text, type inferred from inline markers
- capture: the full form (explicit type, optional URL, reminder date)
- edit / toggle / delete / list_blinks / cleanup

Pipeline for a capture:
1. Validate input (before any network call)
2. Enrich with the processor for the Blink's type
3. Persist through the configured store
4. Notify success, or notify failure and re-raise
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from ..common.design import format_blink_type, is_valid_blink_type
from ..common.errors import AIAccessError, BlinkError, ValidationError
from ..common.llm_client import LLMClient
from ..common.notify import Notifier
from ..common.schemas import Blink, BlinkType, generate_blink_id
from ..storage.base import BlinkStore
from ..storage.cleanup import (
    CUTOFF_HOUR,
    CleanupRateLimiter,
    cleanup_completed_reminders,
    run_cleanup_if_due,
)
from .base import ProcessedBlink
from .bookmarks import BookmarkProcessor, get_url_domain
from .browser import TabProvider, get_active_tab
from .classifier import detect_blink_type
from .quotes import QuoteProcessor
from .reminders import ReminderProcessor
from .thoughts import ThoughtProcessor

logger = logging.getLogger("blinks.capture.service")


@dataclass
class CaptureRequest:
    """Values of the full capture form"""
    type: str
    text: str
    source: Optional[str] = None
    reminder_date: Optional[datetime] = None
    use_browser_tab: bool = False


@dataclass
class EditRequest:
    """Fields to change on an existing Blink; None leaves a field unchanged"""
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    author: Optional[str] = None
    reminder_date: Optional[datetime] = None


class CaptureService:
    """Runs capture commands against a store and an LLM."""

    def __init__(
        self,
        store: BlinkStore,
        llm: Optional[LLMClient],
        notifier: Optional[Notifier] = None,
        tab_provider: Optional[TabProvider] = None,
        limiter: Optional[CleanupRateLimiter] = None,
        cutoff_hour: int = CUTOFF_HOUR,
        max_retries: int = 2,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._store = store
        self._notifier = notifier or Notifier()
        self._tab_provider = tab_provider
        self._limiter = limiter
        self._cutoff_hour = cutoff_hour

        self.thoughts = ThoughtProcessor(llm, max_retries, sleep)
        self.reminders = ReminderProcessor(llm, max_retries, sleep)
        self.quotes = QuoteProcessor(llm, max_retries, sleep)
        self.bookmarks = BookmarkProcessor(llm, max_retries, sleep)

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @contextmanager
    def _command(self, title: str) -> Iterator[None]:
        """Top-level boundary: every escaping error becomes a failure notification."""
        try:
            yield
        except (ValidationError, AIAccessError) as e:
            self._notifier.failure(e.title, str(e))
            raise
        except BlinkError as e:
            e.title = title
            self._notifier.failure(title, str(e))
            raise
        except Exception as e:
            logger.exception("%s", title)
            self._notifier.failure(title, str(e) or "Unknown error occurred")
            raise BlinkError(str(e) or "Unknown error occurred", title=title) from e

    # =========================================================================
    # Capture
    # =========================================================================

    def quick_capture(self, text: str, tab_provider: Optional[TabProvider] = None) -> Blink:
        """Capture one line of text, inferring the type from its marker."""
        if not text or not text.strip():
            self._notifier.failure("No text provided", "Please enter some text to capture")
            raise ValidationError("Please enter some text to capture", title="No text provided")

        loading = self._notifier.loading("Capturing...")
        try:
            with self._command("Failed to save blink"):
                detected = detect_blink_type(text)
                source = None
                reminder_date = None

                if detected.type == BlinkType.BOOKMARK:
                    source = self._find_bookmark_url(detected.content, tab_provider or self._tab_provider)
                    page_title = self.bookmarks.fetch_page_title(source)
                    processed = self.bookmarks.process(page_title, source)
                elif detected.type == BlinkType.REMINDER:
                    reminder_date = self.reminders.extract_date(detected.content)
                    processed = self.reminders.process(detected.content)
                elif detected.type == BlinkType.QUOTE:
                    processed = self.quotes.process(detected.content)
                else:
                    processed = self.thoughts.process(detected.content)

                saved = self._save(detected.type, processed, source, reminder_date)
        finally:
            loading.hide()

        self._notifier.success(f"{format_blink_type(saved.type)} captured")
        return saved

    def _find_bookmark_url(self, content: str, tab_provider: Optional[TabProvider]) -> str:
        url = self.bookmarks.extract_url(content)
        if url:
            return url
        tab = get_active_tab(tab_provider)
        if tab:
            return tab.url
        raise ValidationError(
            "No URL found in text and could not get active browser tab",
            title="No URL found",
        )

    def capture(self, request: CaptureRequest, tab_provider: Optional[TabProvider] = None) -> Blink:
        """Capture from the full form."""
        with self._command("Error saving Blink"):
            blink_type = self._validate_type(request.type)
            source = (request.source or "").strip() or None
            text = (request.text or "").strip()

            if request.use_browser_tab or (blink_type == BlinkType.BOOKMARK and not source):
                tab = get_active_tab(tab_provider or self._tab_provider)
                if tab:
                    source = source or tab.url
                    if blink_type == BlinkType.BOOKMARK and not text:
                        text = tab.title
                    self._notifier.success("URL captured", get_url_domain(tab.url))
                elif request.use_browser_tab:
                    self._notifier.failure("No active tab", "Could not find an active browser tab")

            if not text:
                raise ValidationError("Please enter some text to capture", title="Title is required")
            if blink_type == BlinkType.REMINDER and not request.reminder_date:
                raise ValidationError(
                    "Please select a date for the reminder", title="Missing reminder date",
                )

        loading = self._notifier.loading("Processing Blink...")
        try:
            with self._command(f"Error processing {blink_type.value}"):
                processed = self._process(blink_type, text, source)

            loading.title = "Saving..."
            with self._command("Error saving Blink"):
                saved = self._save(blink_type, processed, source, request.reminder_date)
        finally:
            loading.hide()

        self._notifier.success(f"{format_blink_type(saved.type)} captured")
        return saved

    def _process(self, blink_type: BlinkType, text: str, source: Optional[str]) -> ProcessedBlink:
        if blink_type == BlinkType.QUOTE:
            return self.quotes.process(text)
        if blink_type == BlinkType.REMINDER:
            return self.reminders.process(text)
        if blink_type == BlinkType.BOOKMARK:
            if source:
                return self.bookmarks.process(text, source)
            return ProcessedBlink(title=text)
        return self.thoughts.process(text)

    def _save(
        self,
        blink_type: BlinkType,
        processed: ProcessedBlink,
        source: Optional[str],
        reminder_date: Optional[datetime],
    ) -> Blink:
        blink = Blink(
            id=generate_blink_id(),
            type=blink_type,
            title=processed.title,
            description=processed.description or None,
            author=processed.author or None,
            source=source,
            reminder_date=reminder_date,
        )
        return self._store.create(blink)

    @staticmethod
    def _validate_type(value) -> BlinkType:
        raw = value.value if isinstance(value, BlinkType) else str(value or "")
        if not is_valid_blink_type(raw):
            raise ValidationError("Please select a valid Blink type", title="Invalid Blink")
        return BlinkType(raw)

    # =========================================================================
    # Edit / toggle / delete / list
    # =========================================================================

    def edit(self, blink_id: str, request: EditRequest) -> Blink:
        """Apply form changes to an existing Blink."""
        with self._command("Error updating Blink"):
            current = self._store.get(blink_id)
            blink_type = self._validate_type(request.type) if request.type else current.type

            title = current.title if request.title is None else request.title.strip()
            if not title:
                raise ValidationError("Please enter a title", title="Title is required")

            reminder_date = request.reminder_date or current.reminder_date
            if blink_type == BlinkType.REMINDER and not reminder_date:
                raise ValidationError("Please select a date", title="Missing reminder date")

            changes = {"type": blink_type, "title": title, "reminder_date": reminder_date}
            for name in ("description", "source", "author"):
                value = getattr(request, name)
                if value:
                    changes[name] = value.strip()

            updated = Blink.model_validate({**current.model_dump(), **changes})
            saved = self._store.update(updated)

        self._notifier.success("Blink updated", f'"{saved.title}" saved')
        return saved

    def toggle(self, blink_id: str) -> Blink:
        """Complete or reopen a reminder."""
        with self._command("Error updating Blink"):
            current = self._store.get(blink_id)
            if not current.is_reminder:
                raise ValidationError("Only reminders can be completed", title="Not a reminder")
            toggled = self._store.toggle_completion(blink_id)

        self._notifier.success("Reminder completed" if toggled.is_completed else "Reminder reopened")
        return toggled

    def delete(self, blink_id: str) -> None:
        with self._command("Error deleting Blink"):
            self._store.delete(blink_id)
        self._notifier.success("Blink deleted")

    def list_blinks(self) -> List[Blink]:
        """Every Blink, after an hourly-limited sweep of finished reminders."""
        with self._command("Error loading Blinks"):
            if self._limiter is not None:
                run_cleanup_if_due(self._store, self._limiter, cutoff_hour=self._cutoff_hour)
            return self._store.list()

    def get(self, blink_id: str) -> Blink:
        with self._command("Error loading Blink"):
            return self._store.get(blink_id)

    def cleanup(self) -> List[str]:
        """Sweep now, regardless of the rate limiter."""
        with self._command("Cleanup failed"):
            deleted = cleanup_completed_reminders(self._store, cutoff_hour=self._cutoff_hour)
            if self._limiter is not None:
                self._limiter.mark_cleanup_run()
        return deleted


def build_service(
    config,
    notifier: Optional[Notifier] = None,
    tab_provider: Optional[TabProvider] = None,
) -> CaptureService:
    """Wire a CaptureService from a BlinksConfig."""
    from ..storage import KeyValueStore, create_store

    notifier = notifier or Notifier()
    store = create_store(config, notifier=notifier)
    limiter = CleanupRateLimiter.from_config(KeyValueStore(config.storage.state_path), config.cleanup)
    return CaptureService(
        store,
        LLMClient.from_config(config.llm),
        notifier=notifier,
        tab_provider=tab_provider,
        limiter=limiter,
        cutoff_hour=config.cleanup.cutoff_hour,
        max_retries=config.llm.max_retries,
    )
