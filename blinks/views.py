"""
Blink Views

Text renderings of the list and detail screens: search filter, sorting,
grouping into per-type sections, and a Markdown detail page.
"""

from datetime import datetime
from functools import cmp_to_key
from typing import Dict, List, Optional

from .common.design import (
    SECTION_ORDER,
    format_blink_type,
    get_blink_color,
    get_blink_icon,
    get_blink_icon_color,
    get_blink_title,
)
from .common.schemas import Blink, BlinkType

SORT_OPTIONS = ("newest", "title")


DETAIL_TEMPLATE = """## {title}

- Type: {type}
- Created: {created}
{extra}"""


def format_date(value: datetime) -> str:
    """Short date, e.g. "Mar 4, 2025"."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_datetime(value: datetime) -> str:
    return f"{format_date(value)} {value.strftime('%H:%M')}"


def _ts(value: Optional[datetime]) -> float:
    return value.timestamp() if value else float("-inf")


def _compare(a: Blink, b: Blink, sort_by: str) -> int:
    # Two reminders always order by due date, earliest first
    if a.is_reminder and b.is_reminder:
        return (_ts(a.reminder_date) > _ts(b.reminder_date)) - (_ts(a.reminder_date) < _ts(b.reminder_date))

    if sort_by == "newest":
        return (_ts(b.created_on) > _ts(a.created_on)) - (_ts(b.created_on) < _ts(a.created_on))

    a_title, b_title = a.title.casefold(), b.title.casefold()
    return (a_title > b_title) - (a_title < b_title)


def filter_and_sort(blinks: List[Blink], search_text: str = "", sort_by: str = "newest") -> List[Blink]:
    """Case-insensitive title search, then sort by ``newest`` or ``title``."""
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unknown sort option: {sort_by}")

    needle = (search_text or "").casefold()
    filtered = [b for b in blinks if needle in b.title.casefold()]
    return sorted(filtered, key=cmp_to_key(lambda a, b: _compare(a, b, sort_by)))


def group_by_type(blinks: List[Blink], sort_by: str = "newest") -> Dict[BlinkType, List[Blink]]:
    """Sections in display order; empty sections are left out."""
    grouped: Dict[BlinkType, List[Blink]] = {}
    for blink_type in SECTION_ORDER:
        section = [b for b in blinks if b.type == blink_type]
        if not section:
            continue
        if sort_by == "title":
            section.sort(key=lambda b: b.title.casefold())
        grouped[blink_type] = section
    return grouped


def render_item(blink: Blink) -> str:
    marker = ""
    if blink.is_reminder:
        marker = "[x] " if blink.is_completed else "[ ] "

    line = f"  {marker}{blink.title}"
    details = []
    if blink.author:
        details.append(f"— {blink.author}")
    if blink.reminder_date:
        details.append(format_datetime(blink.reminder_date))
    if blink.source:
        details.append(blink.source)
    if details:
        line += "  (" + ", ".join(details) + ")"
    return f"{line}  [{blink.id}]"


def render_list(
    blinks: List[Blink],
    search_text: str = "",
    sort_by: str = "newest",
    show_sections: bool = True,
) -> str:
    ordered = filter_and_sort(blinks, search_text, sort_by)
    if not ordered:
        return "No Blinks yet. Capture your first thought, reminder, bookmark or quote."

    if not show_sections:
        return "\n".join(render_item(b) for b in ordered)

    lines = []
    for blink_type, section in group_by_type(ordered, sort_by).items():
        lines.append(f"{get_blink_title(blink_type)} ({len(section)})")
        lines.extend(render_item(b) for b in section)
        lines.append("")
    return "\n".join(lines).rstrip()


def display_info(blink: Blink) -> Dict[str, str]:
    """Icon, colors and section title a client uses to draw the Blink."""
    return {
        "icon": get_blink_icon(blink.type),
        "icon_color": get_blink_icon_color(blink.type),
        "color": get_blink_color(blink.type),
        "section": get_blink_title(blink.type),
    }


def render_detail(blink: Blink) -> str:
    """Markdown detail page for one Blink."""
    extra = []
    if blink.author:
        extra.append(f"- Author: {blink.author}")
    if blink.reminder_date:
        extra.append(f"- Reminder: {format_datetime(blink.reminder_date)}")
    if blink.is_reminder:
        status = "Completed" if blink.is_completed else "Open"
        if blink.is_completed and blink.completed_at:
            status += f" ({format_datetime(blink.completed_at)})"
        extra.append(f"- Status: {status}")
    if blink.source:
        extra.append(f"- Source: [{blink.source}]({blink.source})")
    if blink.description:
        extra.append(f"- Description: {blink.description}")

    return DETAIL_TEMPLATE.format(
        title=blink.title,
        type=format_blink_type(blink.type),
        created=format_date(blink.created_on),
        extra="\n".join(extra) + ("\n" if extra else ""),
    )
