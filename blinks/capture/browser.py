"""
Browser context for captures.

The active browser tab is optional context: it pre-fills bookmark URLs and
titles when a surface can supply it. A missing provider, a provider error or
no active tab all come back as ``None``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("blinks.capture.browser")


@dataclass
class BrowserTab:
    url: str
    title: str = ""
    active: bool = False


class TabProvider(ABC):
    """Source of open browser tabs."""

    @abstractmethod
    def get_tabs(self) -> List[BrowserTab]:
        pass


class StaticTabProvider(TabProvider):
    """Tabs handed over by the caller (CLI flags, request body)."""

    def __init__(self, tabs: Optional[List[BrowserTab]] = None):
        self._tabs = list(tabs or [])

    @classmethod
    def single(cls, url: str, title: str = "") -> "StaticTabProvider":
        return cls([BrowserTab(url=url, title=title, active=True)])

    def get_tabs(self) -> List[BrowserTab]:
        return list(self._tabs)


def get_active_tab(provider: Optional[TabProvider]) -> Optional[BrowserTab]:
    """The active tab with a URL, or None."""
    if provider is None:
        return None
    try:
        tabs = provider.get_tabs()
    except Exception as e:
        logger.info("Browser tabs unavailable: %s", e)
        return None

    for tab in tabs:
        if tab.active and tab.url:
            return tab
    return None
