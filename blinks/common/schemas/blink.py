"""
Blink Schema

A Blink is a short captured note. The ``type`` decides which optional fields
carry meaning: reminders have a date and a completion state, quotes have an
author, bookmarks have a source URL.
"""

import secrets
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class BlinkType(str, Enum):
    """Blink categories"""
    THOUGHT = "thought"
    REMINDER = "reminder"
    BOOKMARK = "bookmark"
    QUOTE = "quote"


class Blink(BaseModel):
    """
    A captured Blink.

    Type invariants are enforced on construction: ``reminder_date`` survives
    only on reminders, ``author`` only on quotes, and ``completed_at`` only
    while ``is_completed`` is true.
    """
    id: str = Field(..., description="Local id or Notion page id")
    type: BlinkType = Field(default=BlinkType.THOUGHT)
    title: str = Field(..., description="Display text, possibly AI-formatted")
    description: Optional[str] = None
    source: Optional[str] = None
    author: Optional[str] = None
    reminder_date: Optional[datetime] = None
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("title must not be empty")
        return value

    @model_validator(mode="after")
    def _apply_type_invariants(self) -> "Blink":
        if self.type != BlinkType.REMINDER:
            self.reminder_date = None
        if self.type != BlinkType.QUOTE:
            self.author = None
        if not self.is_completed:
            self.completed_at = None
        return self

    @property
    def is_reminder(self) -> bool:
        return self.type == BlinkType.REMINDER

    def to_json(self) -> dict:
        return self.model_dump(mode="json")

    @classmethod
    def from_json(cls, data: dict) -> "Blink":
        return cls.model_validate(data)


def generate_blink_id() -> str:
    """Generate a client-side id: base36 millisecond timestamp + random suffix"""
    millis = int(time.time() * 1000)
    alphabet = "0123456789abcdefghijklmnopqrstuvwxyz"
    stamp = ""
    while millis:
        millis, rem = divmod(millis, 36)
        stamp = alphabet[rem] + stamp
    return stamp + secrets.token_hex(5)
