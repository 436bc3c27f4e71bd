"""Playlist of hosted media items.

Resolves pasted URLs to stable item ids and keeps the ordered item list
together with the current selection.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import DuplicateItemError, ValidationError

logger = logging.getLogger(__name__)

# Checked in order; group 1 is the item id.
ITEM_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/watch\?.*v=([^&\n?#]+)"),
]


def extract_item_id(url: str) -> str | None:
    """Extract the item id from a hosted-platform URL.

    Args:
        url: A watch, short-link or embed URL

    Returns:
        The item id, or None if the URL matches no known format.

    Examples:
        >>> extract_item_id("https://youtu.be/abc123")
        'abc123'
        >>> extract_item_id("https://www.youtube.com/watch?list=x&v=abc123&t=4")
        'abc123'
    """
    if not url:
        return None

    for pattern in ITEM_ID_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1)
    return None


@dataclass(frozen=True)
class PlaylistItem:
    """One addressable media source.

    Attributes:
        id: Stable item id extracted from the source URL.
        source_url: The URL as entered.
        title: Display title.
    """

    id: str
    source_url: str
    title: str


@dataclass(frozen=True)
class PlaylistState:
    """Snapshot of the playlist."""

    items: tuple[PlaylistItem, ...]
    current_id: str | None

    @property
    def current(self) -> PlaylistItem | None:
        for item in self.items:
            if item.id == self.current_id:
                return item
        return None


SelectionListener = Callable[[PlaylistItem | None], None]


class Playlist:
    """Ordered, id-unique list of items with an optional current item.

    The current id always refers to an item in the list. Removing the
    current item moves the selection to the first remaining item, or
    clears it when the list becomes empty.
    """

    def __init__(self) -> None:
        self._items: list[PlaylistItem] = []
        self._current_id: str | None = None
        self._listeners: list[SelectionListener] = []

    @property
    def items(self) -> tuple[PlaylistItem, ...]:
        return tuple(self._items)

    @property
    def current_id(self) -> str | None:
        return self._current_id

    @property
    def current(self) -> PlaylistItem | None:
        return self.get(self._current_id) if self._current_id else None

    @property
    def state(self) -> PlaylistState:
        return PlaylistState(items=self.items, current_id=self._current_id)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def get(self, item_id: str) -> PlaylistItem | None:
        """Find an item by id."""
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a listener called with the new current item on change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, url: str) -> PlaylistItem:
        """Add an item from a URL.

        The first item added to a playlist without a selection becomes
        current.

        Args:
            url: Source URL as typed by the user

        Returns:
            The new item

        Raises:
            ValidationError: If the URL is empty or not recognised
            DuplicateItemError: If the item is already in the playlist
        """
        url = (url or "").strip()
        if not url:
            raise ValidationError("Enter a URL to add")

        item_id = extract_item_id(url)
        if item_id is None:
            raise ValidationError(f"Invalid video URL: {url}")
        if item_id in self:
            raise DuplicateItemError(item_id)

        item = PlaylistItem(id=item_id, source_url=url, title=f"Video {len(self._items) + 1}")
        self._items.append(item)
        logger.debug(f"Added playlist item {item_id}")

        if self._current_id is None:
            self._set_current(item_id)
        return item

    def remove(self, item_id: str) -> PlaylistItem:
        """Remove an item, moving the selection if it was current.

        Raises:
            ValidationError: If no item has this id
        """
        item = self.get(item_id)
        if item is None:
            raise ValidationError(f"No such item: {item_id}")

        self._items.remove(item)
        logger.debug(f"Removed playlist item {item_id}")

        if self._current_id == item_id:
            self._set_current(self._items[0].id if self._items else None)
        return item

    def select(self, item_id: str) -> PlaylistItem:
        """Make an item current.

        Raises:
            ValidationError: If no item has this id
        """
        item = self.get(item_id)
        if item is None:
            raise ValidationError(f"No such item: {item_id}")
        self._set_current(item_id)
        return item

    def _set_current(self, item_id: str | None) -> None:
        self._current_id = item_id
        current = self.current
        for listener in list(self._listeners):
            try:
                listener(current)
            except Exception:
                logger.exception("Playlist listener failed")


__all__ = [
    "ITEM_ID_PATTERNS",
    "Playlist",
    "PlaylistItem",
    "PlaylistState",
    "SelectionListener",
    "extract_item_id",
]
