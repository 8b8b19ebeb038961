"""
Blinks

Quick capture for short notes ("Blinks"): thoughts, reminders, bookmarks and
quotes. Text is classified, optionally enriched by an LLM, and stored as rows
in a Notion database (or a local JSON file).

Usage:
    from blinks.common import load_config
    from blinks.capture import CaptureService, detect_blink_type
    from blinks.storage import create_store, run_cleanup_if_due
"""

__version__ = "0.1.0"
