"""
Completed Reminder Cleanup

A completed reminder is deleted once the first 4:00 (local time) after the
day it was completed has passed: completing at 23:30 on Monday or at 09:00
on Monday both make it eligible from Tuesday 04:00.

The sweep is a full scan over the store, which is fine for personal-sized
collections. ``CleanupRateLimiter`` keeps the sweep to at most once per hour
by remembering the last run in the key-value store.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Callable, List, Optional

from ..common.config import CleanupConfig
from ..common.schemas import Blink
from .base import BlinkStore
from .kv import KeyValueStore

logger = logging.getLogger("blinks.storage.cleanup")

LAST_CLEANUP_KEY = "last_cleanup_timestamp"
CUTOFF_HOUR = 4


def _as_local(value: datetime) -> datetime:
    """Aware local-time datetime; naive values are taken as local already."""
    return value.astimezone()


def cleanup_cutoff(completed_at: datetime, cutoff_hour: int = CUTOFF_HOUR) -> datetime:
    """The day after ``completed_at`` at ``cutoff_hour``:00 local time.

    Built from the local calendar date and localized afterwards, so the
    offset is the one in effect on that day rather than on the completion day.
    """
    next_day = _as_local(completed_at).date() + timedelta(days=1)
    return datetime.combine(next_day, time(cutoff_hour)).astimezone()


def is_due_for_cleanup(
    blink: Blink,
    now: datetime,
    cutoff_hour: int = CUTOFF_HOUR,
) -> bool:
    if not blink.is_reminder or not blink.is_completed or not blink.completed_at:
        return False
    return _as_local(now) >= cleanup_cutoff(blink.completed_at, cutoff_hour)


def cleanup_completed_reminders(
    store: BlinkStore,
    now: Optional[datetime] = None,
    cutoff_hour: int = CUTOFF_HOUR,
) -> List[str]:
    """Delete every completed reminder past its cutoff. Returns the deleted ids."""
    now = now or datetime.now().astimezone()
    deleted = []

    for blink in store.list():
        if is_due_for_cleanup(blink, now, cutoff_hour):
            store.delete(blink.id)
            deleted.append(blink.id)

    if deleted:
        logger.info("Cleaned up %d completed reminder(s)", len(deleted))
    return deleted


class CleanupRateLimiter:
    """Allows a cleanup sweep at most once per ``interval``."""

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = LAST_CLEANUP_KEY,
        interval: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._kv = kv
        self._key = key
        self._interval = interval
        self._clock = clock

    @classmethod
    def from_config(cls, kv: KeyValueStore, cleanup_config: CleanupConfig) -> "CleanupRateLimiter":
        return cls(
            kv,
            key=cleanup_config.last_run_key,
            interval=timedelta(hours=cleanup_config.interval_hours),
        )

    def last_run(self) -> Optional[datetime]:
        value = self._kv.get_item(self._key)
        if not value:
            return None
        try:
            return _as_local(datetime.fromisoformat(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring unparseable cleanup timestamp %r", value)
            return None

    def should_run_cleanup(self) -> bool:
        last = self.last_run()
        if last is None:
            return True
        return _as_local(self._clock()) - last >= self._interval

    def mark_cleanup_run(self) -> None:
        self._kv.set_item(self._key, self._clock().isoformat())


def run_cleanup_if_due(
    store: BlinkStore,
    limiter: CleanupRateLimiter,
    cutoff_hour: int = CUTOFF_HOUR,
    now: Optional[datetime] = None,
) -> List[str]:
    """Sweep when the limiter allows it, then record the run."""
    if not limiter.should_run_cleanup():
        return []
    deleted = cleanup_completed_reminders(store, now=now, cutoff_hour=cutoff_hour)
    limiter.mark_cleanup_run()
    return deleted
