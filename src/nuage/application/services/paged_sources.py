"""Ready-made :class:`~nuage.application.interfaces.PagedSource` implementations.

Two shapes cover every list in the client:

* :class:`SlicePagedSource` — the remote side paginates. The first page comes
  from a feed-specific producer, every later page from a generic "follow the
  cursor" call.
* :class:`IdListPagedSource` — the remote side only hands out the full list of
  ids (playlists). Pagination is computed client-side over that list and each
  page is a bulk item fetch for the next chunk of ids.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from ...config import DEFAULT_PLAYLIST_CHUNK_SIZE
from ...domain.slice import Cursor, Slice
from ...errors import FetchError

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


class SlicePagedSource(Generic[T]):
    """Dispatch the first page to *first* and later pages to *follow*."""

    def __init__(
        self,
        first: Callable[[], Slice[T]],
        follow: Callable[[Cursor], Slice[T]],
    ) -> None:
        self._first = first
        self._follow = follow

    def __call__(self, cursor: Optional[Cursor]) -> Slice[T]:
        if cursor is None:
            return self._first()
        return self._follow(cursor)


@dataclass(frozen=True)
class _IdListCursor:
    owner: int
    offset: int


class IdListPagedSource(Generic[T]):
    """Page through a pre-fetched id list, fetching items chunk by chunk.

    The id list is requested with the first page and reused for every later
    page, so reloading from the first page picks up a changed list. Cursors
    are private to the instance that produced them.
    """

    def __init__(
        self,
        fetch_ids: Callable[[], Sequence[str]],
        fetch_items: Callable[[Sequence[str]], Sequence[T]],
        chunk_size: int = DEFAULT_PLAYLIST_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._fetch_ids = fetch_ids
        self._fetch_items = fetch_items
        self._chunk_size = chunk_size
        self._ids: Optional[List[str]] = None
        self._lock = threading.Lock()

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def __call__(self, cursor: Optional[Cursor]) -> Slice[T]:
        ids = self._refresh_ids() if cursor is None else self._ensure_ids()
        offset = self._offset_for(cursor)
        chunk = ids[offset : offset + self._chunk_size]
        items = list(self._fetch_items(chunk)) if chunk else []
        end = offset + len(chunk)
        next_cursor = _IdListCursor(id(self), end) if end < len(ids) else None
        LOGGER.debug(
            "id-list page offset=%d size=%d fetched=%d remaining=%d",
            offset,
            len(chunk),
            len(items),
            len(ids) - end,
        )
        return Slice.of(items, next_cursor)

    def _refresh_ids(self) -> List[str]:
        ids = [str(item) for item in self._fetch_ids()]
        with self._lock:
            self._ids = ids
        return ids

    def _ensure_ids(self) -> List[str]:
        with self._lock:
            if self._ids is not None:
                return self._ids
        ids = [str(item) for item in self._fetch_ids()]
        with self._lock:
            if self._ids is None:
                self._ids = ids
            return self._ids

    def _offset_for(self, cursor: Optional[Cursor]) -> int:
        if cursor is None:
            return 0
        if not isinstance(cursor, _IdListCursor) or cursor.owner != id(self):
            raise FetchError(f"cursor {cursor!r} was not issued by this source")
        return cursor.offset
