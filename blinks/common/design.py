"""Display metadata for each Blink category."""

from dataclasses import dataclass
from typing import Dict, Union

from .schemas.blink import BlinkType


@dataclass(frozen=True)
class BlinkDesign:
    icon: str
    icon_color: str
    title: str
    color: str


BLINK_TYPES: Dict[BlinkType, BlinkDesign] = {
    BlinkType.THOUGHT: BlinkDesign(
        icon="short-paragraph", icon_color="blue", title="Thoughts", color="blue",
    ),
    BlinkType.REMINDER: BlinkDesign(
        icon="clock", icon_color="yellow", title="Reminders", color="yellow",
    ),
    BlinkType.BOOKMARK: BlinkDesign(
        icon="link", icon_color="secondary-text", title="Bookmarks", color="secondary-text",
    ),
    BlinkType.QUOTE: BlinkDesign(
        icon="quotation-marks", icon_color="secondary-text", title="Quotes", color="secondary-text",
    ),
}

# Section order for grouped list output
SECTION_ORDER = list(BLINK_TYPES)


def is_valid_blink_type(value: str) -> bool:
    return value in {t.value for t in BlinkType}


def get_blink_type_info(blink_type: Union[BlinkType, str]) -> BlinkDesign:
    return BLINK_TYPES[BlinkType(blink_type)]


def get_blink_icon(blink_type: Union[BlinkType, str]) -> str:
    return get_blink_type_info(blink_type).icon


def get_blink_title(blink_type: Union[BlinkType, str]) -> str:
    return get_blink_type_info(blink_type).title


def get_blink_icon_color(blink_type: Union[BlinkType, str]) -> str:
    return get_blink_type_info(blink_type).icon_color


def get_blink_color(blink_type: Union[BlinkType, str]) -> str:
    return get_blink_type_info(blink_type).color


def format_blink_type(blink_type: Union[BlinkType, str]) -> str:
    """Capitalized display form, e.g. "thought" -> "Thought"."""
    value = BlinkType(blink_type).value
    return value[:1].upper() + value[1:]
