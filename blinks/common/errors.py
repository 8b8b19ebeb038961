"""
Error types shared across Blinks.

Every error carries a short ``title`` used as the headline of the failure
notification shown to the user; ``str(error)`` is the message.
"""


class BlinkError(Exception):
    """Base class for all Blinks errors."""
    title = "Something went wrong"

    def __init__(self, message: str, title: str = ""):
        super().__init__(message)
        if title:
            self.title = title


class ValidationError(BlinkError, ValueError):
    """Input rejected before any network call."""
    title = "Invalid Blink"


class AIAccessError(BlinkError):
    """AI features are not available in this environment."""
    title = "Upgrade required"


class ProcessingError(BlinkError):
    """An AI processor could not produce structured output."""
    title = "Error processing Blink"


class StorageError(BlinkError):
    """A storage backend call failed."""
    title = "Error saving Blink"


class BlinkNotFoundError(StorageError):
    """The requested Blink does not exist."""
    title = "Blink not found"


class ConfigError(BlinkError):
    """Required configuration is missing."""
    title = "Missing preferences"
