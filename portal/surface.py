"""Rendering surface and the addressable fragment.

The surface stands in for the page markup: it knows which page elements
exist, which one is active, which body markers are set, which notices are
waiting to be shown and the last view model rendered into each page.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    message: str
    level: str = "info"  # info | success | error


class Surface:
    def __init__(self, page_ids: Iterable[str]):
        self.page_ids: Set[str] = set(page_ids)
        self.active_page: Optional[str] = None
        self.markers: Set[str] = set()
        self.views: Dict[str, BaseModel] = {}
        self._notices: List[Notice] = []

    def has_page(self, page_id: str) -> bool:
        return page_id in self.page_ids

    def deactivate_all(self) -> None:
        self.active_page = None

    def activate(self, page_id: str) -> None:
        if page_id not in self.page_ids:
            raise KeyError(page_id)
        self.active_page = page_id

    def set_marker(self, name: str, on: bool) -> None:
        if on:
            self.markers.add(name)
        else:
            self.markers.discard(name)

    def render(self, page_id: str, view: BaseModel) -> None:
        self.views[page_id] = view

    def notify(self, message: str, level: str = "info") -> None:
        logger.info("Notice (%s): %s", level, message)
        self._notices.append(Notice(message, level))

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    def drain_notices(self) -> List[Notice]:
        """Return pending notices and forget them."""
        notices, self._notices = self._notices, []
        return notices


class Location:
    """The current fragment plus a queue of fragment-change events.

    ``assign`` behaves like setting ``location.hash``: a change queues an
    event, assigning the current value does nothing. ``replace`` changes the
    fragment without queueing.
    """

    def __init__(self, fragment: str = ""):
        self.fragment = fragment
        self._changes: Deque[str] = deque()

    def assign(self, fragment: str) -> None:
        if fragment == self.fragment:
            return
        self.fragment = fragment
        self._changes.append(fragment)

    def replace(self, fragment: str) -> None:
        self.fragment = fragment

    def next_change(self) -> Optional[str]:
        return self._changes.popleft() if self._changes else None

    def discard_changes(self) -> None:
        self._changes.clear()
