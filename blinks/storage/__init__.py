"""
Blink Storage

Backends for persisting Blinks plus the completed reminder cleanup.

Available Stores:
- NotionBlinkStore: rows in a Notion database (default)
- LocalBlinkStore: JSON file on disk
"""

from typing import Optional

from ..common.config import BlinksConfig
from ..common.notify import Notifier
from .base import BlinkStore
from .cleanup import (
    CleanupRateLimiter,
    cleanup_completed_reminders,
    cleanup_cutoff,
    run_cleanup_if_due,
)
from .kv import KeyValueStore
from .local import LocalBlinkStore
from .notion import NotionBlinkStore, NotionGateway


def create_store(config: BlinksConfig, notifier: Optional[Notifier] = None) -> BlinkStore:
    """Build the store selected by ``config.storage.backend``."""
    if config.storage.backend == "local":
        return LocalBlinkStore(config.storage.blinks_path)
    return NotionBlinkStore(NotionGateway.from_config(config.notion), notifier=notifier)


__all__ = [
    "BlinkStore",
    "CleanupRateLimiter",
    "KeyValueStore",
    "LocalBlinkStore",
    "NotionBlinkStore",
    "NotionGateway",
    "cleanup_completed_reminders",
    "cleanup_cutoff",
    "create_store",
    "run_cleanup_if_due",
]
