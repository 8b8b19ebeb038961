"""
Notion Store

Maps Blinks onto rows of a Notion database and back.

Database schema (property name -> Notion type):
- Title: title
- Type: select ("Thought", "Reminder", "Bookmark", "Quote")
- Context: rich_text
- URL: url
- Author: rich_text
- Reminder Date: date
- Is Completed: checkbox
- Completed At: date

All calls to the Notion SDK go through ``NotionGateway``, which hides the
differences between the data source, database query and search APIs.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional

from notion_client import APIErrorCode, APIResponseError, Client

from ..common.config import NotionConfig
from ..common.errors import BlinkError, BlinkNotFoundError, StorageError
from ..common.notify import Notifier
from ..common.schemas import Blink, BlinkType
from .base import BlinkStore

logger = logging.getLogger("blinks.storage.notion")

UNTITLED = "Untitled"

# Canonical property names used in the Notion database schema
PROPERTY_TITLE = "Title"
PROPERTY_TYPE = "Type"
PROPERTY_CONTEXT = "Context"
PROPERTY_URL = "URL"
PROPERTY_AUTHOR = "Author"
PROPERTY_REMINDER_DATE = "Reminder Date"
PROPERTY_IS_COMPLETED = "Is Completed"
PROPERTY_COMPLETED_AT = "Completed At"


def _normalize_id(value: str) -> str:
    return (value or "").replace("-", "").lower()


def is_full_page(obj: Dict[str, Any]) -> bool:
    """True for complete page objects, False for partial/stub results."""
    return isinstance(obj, dict) and obj.get("object") == "page" and "properties" in obj


class NotionGateway:
    """
    The only place that talks to the Notion SDK.

    Operations:
    - list_pages: every full page in the database, across all result pages
    - retrieve_page / create_page / update_page / archive_page
    """

    def __init__(self, client: Client, database_id: str):
        self._client = client
        self._database_id = database_id

    @classmethod
    def from_config(cls, notion_config: NotionConfig) -> "NotionGateway":
        notion_config.require()
        return cls(Client(auth=notion_config.api_token), notion_config.database_id)

    @property
    def database_id(self) -> str:
        return self._database_id

    def list_pages(self) -> List[Dict[str, Any]]:
        database = self._client.databases.retrieve(database_id=self._database_id)

        data_sources = database.get("data_sources") or []
        if data_sources and hasattr(self._client, "data_sources"):
            data_source_id = data_sources[0]["id"]
            logger.debug("Querying data source %s", data_source_id)
            return self._paginate(
                lambda **kw: self._client.data_sources.query(data_source_id=data_source_id, **kw)
            )

        if hasattr(self._client.databases, "query"):
            return self._paginate(
                lambda **kw: self._client.databases.query(database_id=self._database_id, **kw)
            )

        # Search every page, keep the ones whose parent is our database
        wanted = _normalize_id(self._database_id)
        pages = self._paginate(
            lambda **kw: self._client.search(filter={"value": "page", "property": "object"}, **kw)
        )
        return [
            page for page in pages
            if _normalize_id(page.get("parent", {}).get("database_id", "")) == wanted
        ]

    def _paginate(self, query: Callable[..., Dict[str, Any]]) -> List[Dict[str, Any]]:
        pages: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            kwargs = {"start_cursor": cursor} if cursor else {}
            response = query(**kwargs)

            for item in response.get("results", []):
                if is_full_page(item):
                    pages.append(item)

            cursor = response.get("next_cursor") if response.get("has_more") else None
            if not cursor:
                return pages

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return self._client.pages.retrieve(page_id=page_id)

    def create_page(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self._client.pages.create(
            parent={"type": "database_id", "database_id": self._database_id},
            properties=properties,
        )

    def update_page(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self._client.pages.update(page_id=page_id, properties=properties)

    def archive_page(self, page_id: str) -> Dict[str, Any]:
        return self._client.pages.update(page_id=page_id, archived=True)


# =============================================================================
# Property mapping
# =============================================================================

def _rich_text(content: str) -> List[Dict[str, Any]]:
    return [{"type": "text", "text": {"content": content}}]


def _iso(value: datetime) -> str:
    """Full ISO-8601 timestamp; naive values are taken as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning("Unparseable Notion date: %r", value)
        return None


def plain_text(parts: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    """Concatenate rich text pieces; None when empty."""
    if not parts:
        return None
    text = "".join(
        part.get("plain_text") or part.get("text", {}).get("content", "")
        for part in parts
    ).strip()
    return text or None


def blink_to_properties(blink: Blink, clear_completion: bool = False) -> Dict[str, Any]:
    """
    Map a Blink to a Notion properties payload.

    Absent optional fields are left out. With ``clear_completion`` an
    incomplete reminder sends an explicit null ``Completed At``.
    """
    properties: Dict[str, Any] = {
        PROPERTY_TITLE: {"title": _rich_text(blink.title)},
        PROPERTY_TYPE: {"select": {"name": blink.type.value.capitalize()}},
    }

    if blink.description:
        properties[PROPERTY_CONTEXT] = {"rich_text": _rich_text(blink.description)}
    if blink.source:
        properties[PROPERTY_URL] = {"url": blink.source}
    if blink.author:
        properties[PROPERTY_AUTHOR] = {"rich_text": _rich_text(blink.author)}
    if blink.reminder_date:
        properties[PROPERTY_REMINDER_DATE] = {"date": {"start": _iso(blink.reminder_date)}}

    if blink.is_reminder:
        properties[PROPERTY_IS_COMPLETED] = {"checkbox": blink.is_completed}
        if blink.is_completed and blink.completed_at:
            properties[PROPERTY_COMPLETED_AT] = {"date": {"start": _iso(blink.completed_at)}}
        elif clear_completion and not blink.is_completed:
            properties[PROPERTY_COMPLETED_AT] = {"date": None}

    return properties


def _date_start(prop: Optional[Dict[str, Any]]) -> Optional[datetime]:
    date = (prop or {}).get("date") or {}
    return _parse_datetime(date.get("start"))


def page_to_blink(page: Dict[str, Any]) -> Blink:
    """Convert a full Notion page into a Blink."""
    props = page.get("properties", {})

    title = plain_text(props.get(PROPERTY_TITLE, {}).get("title")) or UNTITLED

    select = props.get(PROPERTY_TYPE, {}).get("select") or {}
    type_name = (select.get("name") or BlinkType.THOUGHT.value).lower()
    try:
        blink_type = BlinkType(type_name)
    except ValueError:
        logger.warning("Unknown Blink type %r on page %s, using thought", type_name, page.get("id"))
        blink_type = BlinkType.THOUGHT

    is_completed = bool(props.get(PROPERTY_IS_COMPLETED, {}).get("checkbox", False))
    created_on = _parse_datetime(page.get("created_time")) or datetime.now(timezone.utc)

    return Blink(
        id=page["id"],
        type=blink_type,
        title=title,
        description=plain_text(props.get(PROPERTY_CONTEXT, {}).get("rich_text")),
        source=props.get(PROPERTY_URL, {}).get("url") or None,
        author=plain_text(props.get(PROPERTY_AUTHOR, {}).get("rich_text")),
        reminder_date=_date_start(props.get(PROPERTY_REMINDER_DATE)),
        is_completed=is_completed,
        completed_at=_date_start(props.get(PROPERTY_COMPLETED_AT)),
        created_on=created_on,
    )


# =============================================================================
# Store
# =============================================================================

class NotionBlinkStore(BlinkStore):
    """BlinkStore backed by a Notion database. Deletes archive the page."""

    name = "notion"

    def __init__(
        self,
        gateway: NotionGateway,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._gateway = gateway
        self._notifier = notifier or Notifier()
        self._clock = clock

    @contextmanager
    def _notion_call(self, title: str) -> Iterator[None]:
        """Notify the user, then surface the failure as a StorageError."""
        try:
            yield
        except BlinkError as e:
            self._notifier.failure(e.title, str(e))
            raise
        except APIResponseError as e:
            self._notifier.failure(title, str(e))
            if e.code == APIErrorCode.ObjectNotFound:
                raise BlinkNotFoundError(str(e)) from e
            raise StorageError(str(e), title=title) from e
        except Exception as e:
            logger.error("%s: %s", title, e)
            self._notifier.failure(title, str(e))
            raise StorageError(str(e), title=title) from e

    def list(self) -> List[Blink]:
        with self._notion_call("Notion query failed"):
            pages = self._gateway.list_pages()
        logger.debug("Loaded %d pages from Notion", len(pages))
        return [page_to_blink(page) for page in pages]

    def get(self, blink_id: str) -> Blink:
        with self._notion_call("Notion query failed"):
            page = self._gateway.retrieve_page(blink_id)
            if not is_full_page(page) or page.get("archived") or page.get("in_trash"):
                raise BlinkNotFoundError(f"No Blink with id {blink_id}")
        return page_to_blink(page)

    def create(self, blink: Blink) -> Blink:
        with self._notion_call("Notion save failed"):
            page = self._gateway.create_page(blink_to_properties(blink))
        if is_full_page(page):
            return page_to_blink(page)
        return blink.model_copy(update={"id": page.get("id", blink.id)})

    def update(self, blink: Blink) -> Blink:
        with self._notion_call("Notion update failed"):
            page = self._gateway.update_page(blink.id, blink_to_properties(blink, clear_completion=True))
        return page_to_blink(page) if is_full_page(page) else blink

    def delete(self, blink_id: str) -> None:
        with self._notion_call("Notion delete failed"):
            self._gateway.archive_page(blink_id)

    def toggle_completion(self, blink_id: str) -> Blink:
        with self._notion_call("Notion update failed"):
            page = self._gateway.retrieve_page(blink_id)
            if not is_full_page(page):
                raise BlinkNotFoundError("Notion page metadata incomplete for toggle operation")

            current = bool(
                page["properties"].get(PROPERTY_IS_COMPLETED, {}).get("checkbox", False)
            )
            completed_at = {"start": _iso(self._clock())} if not current else None
            updated = self._gateway.update_page(blink_id, {
                PROPERTY_IS_COMPLETED: {"checkbox": not current},
                PROPERTY_COMPLETED_AT: {"date": completed_at},
            })
        return page_to_blink(updated if is_full_page(updated) else page)
