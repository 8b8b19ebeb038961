"""
Local Store

Fallback BlinkStore that keeps every Blink in a JSON array on disk
(default ~/.blinks/blinks.json). Used when no Notion database is configured.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from ..common.config import BLINKS_PATH
from ..common.errors import BlinkNotFoundError, StorageError
from ..common.schemas import Blink, generate_blink_id
from .base import BlinkStore
from .kv import write_json_atomic

logger = logging.getLogger("blinks.storage.local")


class LocalBlinkStore(BlinkStore):
    """BlinkStore persisted to a JSON file."""

    name = "local"

    def __init__(
        self,
        path: Optional[Path] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._path = Path(path) if path else BLINKS_PATH
        self._clock = clock
        self._lock = threading.RLock()

    def _load(self) -> List[Blink]:
        if not self._path.exists():
            return []

        try:
            with open(self._path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}", title="Error loading Blinks") from e

        blinks = []
        for item in data if isinstance(data, list) else []:
            try:
                blinks.append(Blink.from_json(item))
            except ValueError as e:
                logger.warning("Skipping malformed Blink in %s: %s", self._path, e)
        return blinks

    def _save(self, blinks: List[Blink]) -> None:
        write_json_atomic(self._path, [blink.to_json() for blink in blinks])

    def _index(self, blinks: List[Blink], blink_id: str) -> int:
        for i, blink in enumerate(blinks):
            if blink.id == blink_id:
                return i
        raise BlinkNotFoundError(f"No Blink with id {blink_id}")

    def list(self) -> List[Blink]:
        with self._lock:
            return self._load()

    def create(self, blink: Blink) -> Blink:
        with self._lock:
            blinks = self._load()
            if not blink.id or any(b.id == blink.id for b in blinks):
                blink = blink.model_copy(update={"id": generate_blink_id()})
            blinks.append(blink)
            self._save(blinks)
        return blink

    def update(self, blink: Blink) -> Blink:
        with self._lock:
            blinks = self._load()
            i = self._index(blinks, blink.id)
            # created_on is never rewritten
            updated = Blink.model_validate({**blink.model_dump(), "created_on": blinks[i].created_on})
            blinks[i] = updated
            self._save(blinks)
        return updated

    def delete(self, blink_id: str) -> None:
        with self._lock:
            blinks = self._load()
            del blinks[self._index(blinks, blink_id)]
            self._save(blinks)

    def toggle_completion(self, blink_id: str) -> Blink:
        with self._lock:
            blinks = self._load()
            i = self._index(blinks, blink_id)
            current = blinks[i]
            completed = not current.is_completed
            toggled = Blink.model_validate({
                **current.model_dump(),
                "is_completed": completed,
                "completed_at": self._clock() if completed else None,
            })
            blinks[i] = toggled
            self._save(blinks)
        return toggled
