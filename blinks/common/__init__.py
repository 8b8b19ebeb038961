"""
Blinks Common Module

Shared infrastructure for capture, storage and the command surfaces.
"""

from .config import BlinksConfig, load_config
from .errors import (
    BlinkError,
    ValidationError,
    AIAccessError,
    ProcessingError,
    StorageError,
    BlinkNotFoundError,
    ConfigError,
)
from .llm_client import LLMClient
from .notify import Notifier, ConsoleNotifier

__all__ = [
    "BlinksConfig",
    "load_config",
    "BlinkError",
    "ValidationError",
    "AIAccessError",
    "ProcessingError",
    "StorageError",
    "BlinkNotFoundError",
    "ConfigError",
    "LLMClient",
    "Notifier",
    "ConsoleNotifier",
]
