"""
Base Store

Abstract interface shared by the Notion and local JSON backends.
"""

from abc import ABC, abstractmethod
from typing import List

from ..common.errors import BlinkNotFoundError
from ..common.schemas import Blink


class BlinkStore(ABC):
    """
    CRUD over a collection of Blinks.

    Each backend must implement:
    - list: every Blink in the collection
    - create / update: persist a Blink, returning the stored version
    - delete: remove (or archive) by id
    - toggle_completion: flip a reminder's completion state
    """

    name = "store"

    @abstractmethod
    def list(self) -> List[Blink]:
        pass

    @abstractmethod
    def create(self, blink: Blink) -> Blink:
        pass

    @abstractmethod
    def update(self, blink: Blink) -> Blink:
        pass

    @abstractmethod
    def delete(self, blink_id: str) -> None:
        pass

    @abstractmethod
    def toggle_completion(self, blink_id: str) -> Blink:
        """
        Flip ``is_completed`` and set ``completed_at`` to now when completing,
        clear it when un-completing. Both change in the same write.
        """
        pass

    def get(self, blink_id: str) -> Blink:
        """Look up one Blink. Backends may override with a direct fetch."""
        for blink in self.list():
            if blink.id == blink_id:
                return blink
        raise BlinkNotFoundError(f"No Blink with id {blink_id}")
