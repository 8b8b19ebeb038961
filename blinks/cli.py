"""
Blinks command line.

Usage:
    blinks quick "/r call mom tomorrow at 2pm"
    blinks capture --type bookmark --url https://example.com "Example"
    blinks list [--search milk] [--sort title] [--flat]
    blinks show ID
    blinks edit ID [--title ...] [--type ...] [--date ...]
    blinks toggle ID
    blinks delete ID
    blinks cleanup
    blinks configure --notion-token secret_... --database-id ID
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from .common.config import CONFIG_PATH, load_config, save_config
from .common.errors import BlinkError
from .common.notify import ConsoleNotifier
from .capture.browser import StaticTabProvider
from .capture.service import CaptureRequest, CaptureService, EditRequest, build_service
from .views import SORT_OPTIONS, render_detail, render_list

BLINK_TYPES = ("thought", "reminder", "bookmark", "quote")


def _datetime_arg(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date/time: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blinks", description="Capture thoughts, reminders, bookmarks and quotes.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--tab-url",
        default=os.getenv("BLINKS_ACTIVE_TAB_URL"),
        help="URL of the active browser tab (used for bookmarks).",
    )
    parser.add_argument(
        "--tab-title",
        default=os.getenv("BLINKS_ACTIVE_TAB_TITLE", ""),
        help="Title of the active browser tab.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    quick = sub.add_parser("quick", help="Quick capture; type from /r, /b or /q markers.")
    quick.add_argument("text", nargs="+", help="Text to capture.")

    capture = sub.add_parser("capture", help="Capture with an explicit type.")
    capture.add_argument("text", nargs="*", help="Blink text.")
    capture.add_argument("--type", default="thought", choices=BLINK_TYPES)
    capture.add_argument("--url", dest="source", help="Source URL.")
    capture.add_argument("--date", dest="reminder_date", type=_datetime_arg, help="Reminder date (ISO 8601).")
    capture.add_argument("--browser-tab", action="store_true", help="Add the active browser tab URL.")

    listing = sub.add_parser("list", help="List Blinks.")
    listing.add_argument("--search", default="", help="Filter by title.")
    listing.add_argument("--sort", default="newest", choices=SORT_OPTIONS)
    listing.add_argument("--flat", action="store_true", help="Hide per-type sections.")

    show = sub.add_parser("show", help="Show one Blink.")
    show.add_argument("id")

    edit = sub.add_parser("edit", help="Edit a Blink.")
    edit.add_argument("id")
    edit.add_argument("--type", choices=BLINK_TYPES)
    edit.add_argument("--title")
    edit.add_argument("--description")
    edit.add_argument("--url", dest="source")
    edit.add_argument("--author")
    edit.add_argument("--date", dest="reminder_date", type=_datetime_arg)

    toggle = sub.add_parser("toggle", help="Complete or reopen a reminder.")
    toggle.add_argument("id")

    delete = sub.add_parser("delete", help="Delete a Blink.")
    delete.add_argument("id")

    sub.add_parser("cleanup", help="Delete finished reminders now.")

    configure = sub.add_parser("configure", help="Save preferences to ~/.blinks/config.json.")
    configure.add_argument("--notion-token", help="Notion integration token.")
    configure.add_argument("--database-id", help="Notion database ID.")
    configure.add_argument("--provider", choices=("anthropic", "openai", "google"), help="LLM provider.")
    configure.add_argument("--backend", choices=("notion", "local"), help="Storage backend.")

    return parser


def run_command(args: argparse.Namespace, service: CaptureService) -> None:
    if args.command == "quick":
        service.quick_capture(" ".join(args.text))
    elif args.command == "capture":
        service.capture(CaptureRequest(
            type=args.type,
            text=" ".join(args.text),
            source=args.source,
            reminder_date=args.reminder_date,
            use_browser_tab=args.browser_tab,
        ))
    elif args.command == "list":
        blinks = service.list_blinks()
        print(render_list(blinks, args.search, args.sort, show_sections=not args.flat))
    elif args.command == "show":
        print(render_detail(service.get(args.id)))
    elif args.command == "edit":
        service.edit(args.id, EditRequest(
            type=args.type,
            title=args.title,
            description=args.description,
            source=args.source,
            author=args.author,
            reminder_date=args.reminder_date,
        ))
    elif args.command == "toggle":
        service.toggle(args.id)
    elif args.command == "delete":
        service.delete(args.id)
    elif args.command == "cleanup":
        deleted = service.cleanup()
        print(f"[Blinks] Removed {len(deleted)} completed reminder(s)")


def configure(args: argparse.Namespace) -> None:
    """Merge the given flags into the current config and write it back."""
    config = load_config()
    if args.notion_token:
        config.notion.api_token = args.notion_token
        config._env_sourced_keys.discard("notion_api_token")
    if args.database_id:
        config.notion.database_id = args.database_id
    if args.provider:
        config.llm.provider = args.provider
    if args.backend:
        config.storage.backend = args.backend
    save_config(config)
    print(f"[Blinks] Configuration saved to {CONFIG_PATH}")


def main(argv: Optional[List[str]] = None, service: Optional[CaptureService] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "configure":
        configure(args)
        return 0

    if service is None:
        notifier = ConsoleNotifier()
        tabs = StaticTabProvider.single(args.tab_url, args.tab_title) if args.tab_url else None
        try:
            service = build_service(load_config(), notifier=notifier, tab_provider=tabs)
        except BlinkError as e:
            notifier.failure(e.title, str(e))
            return 1

    try:
        run_command(args, service)
    except BlinkError:
        # Already reported through the notifier
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
