"""
Quick Capture Classifier

Picks a Blink type from inline markers in free text:

    /r or r/   reminder
    /b or b/   bookmark
    /q or q/   quote

Markers are matched anywhere in the text (substring containment, not anchored)
and checked in the order above; the first match wins. Text without a marker
is a thought. Because matching is unanchored, words that happen to contain a
marker (e.g. "ab/c") can trigger a type.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ..common.schemas import BlinkType

# (markers, slash-form prefix to strip), in priority order
TYPE_MARKERS: Dict[BlinkType, Tuple[Tuple[str, ...], str]] = {
    BlinkType.REMINDER: (("/r ", "r/ "), "/r"),
    BlinkType.BOOKMARK: (("/b", "b/"), "/b"),
    BlinkType.QUOTE: (("/q ", "q/ "), "/q"),
}


@dataclass
class DetectedBlink:
    type: BlinkType
    content: str


def detect_blink_type(text: str) -> DetectedBlink:
    """Classify text by marker and strip the marker from the content."""
    value = (text or "").strip()

    for blink_type, (markers, prefix) in TYPE_MARKERS.items():
        if any(marker in value for marker in markers):
            return DetectedBlink(type=blink_type, content=remove_prefix(value, prefix))

    return DetectedBlink(type=BlinkType.THOUGHT, content=value)


def remove_prefix(text: str, prefix: str) -> str:
    """Remove the first slash-form marker ("/r"), else the reversed form ("r/")."""
    if prefix in text:
        return text.replace(prefix, "", 1).strip()
    reversed_form = prefix.lstrip("/") + "/"
    return text.replace(reversed_form, "", 1).strip()
