"""
Base AI Processor

Shared plumbing for the per-type processors: the LLM handle, the retry
policy, and the common result shape.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..common.errors import ValidationError
from ..common.llm_client import LLMClient, ask_with_retry

logger = logging.getLogger("blinks.capture")


@dataclass
class ProcessedBlink:
    """Normalized processor output"""
    title: str
    description: Optional[str] = None
    author: Optional[str] = None


class BaseProcessor:
    """Holds the LLM client and issues prompts with retry."""

    kind = "blink"

    def __init__(
        self,
        llm: Optional[LLMClient],
        max_retries: int = 2,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._llm = llm
        self._max_retries = max_retries
        self._sleep = sleep

    @property
    def is_available(self) -> bool:
        return self._llm is not None and self._llm.is_available

    def _require_text(self, text: str) -> str:
        if not text or not text.strip():
            raise ValidationError(f"Empty {self.kind} provided")
        return text.strip()

    def _ask(self, prompt: str, creativity: str = "low", max_tokens: int = 512) -> str:
        return ask_with_retry(
            self._llm,
            prompt,
            creativity=creativity,
            max_retries=self._max_retries,
            max_tokens=max_tokens,
            sleep=self._sleep,
        )
