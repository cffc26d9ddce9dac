"""Accumulating incremental loader shared by every list in the client.

An :class:`InfinitePublisher` wraps a :class:`PagedSource` and remembers
every element fetched so far together with the cursor of the next page.
:meth:`InfinitePublisher.load_more` is safe to call as often as the view
likes: it does nothing once the source is exhausted and nothing while a fetch
is already outstanding, so a publisher never has more than one page request
in flight.

Fetches are handed to a :class:`FetchScheduler`.  The scheduler decides where
the fetch runs; it must report completion back on the context that owns the
publisher, which is the only context allowed to mutate it.  Completion is
bound to the publisher through a weak reference, a dispose flag and a
generation counter, so results that arrive for a discarded, disposed or
reloaded publisher are dropped instead of applied.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import (
    Callable,
    Generic,
    Iterator,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
    overload,
)

from ...config import DEFAULT_PLAYLIST_CHUNK_SIZE
from ...domain.slice import Cursor, Slice
from ...errors import FetchError
from ...events.signal import ObservableProperty, Signal
from ..interfaces import FetchScheduler, PagedSource
from .paged_sources import IdListPagedSource, SlicePagedSource

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


class ImmediateScheduler:
    """Run fetches synchronously on the calling thread.

    Used by the CLI and by tests; the GUI uses
    :class:`~nuage.gui.ui.tasks.fetch_scheduler.QtFetchScheduler`.
    """

    def submit(
        self,
        fetch: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        try:
            result = fetch()
        except Exception as exc:
            on_failure(exc)
            return
        on_success(result)


class ElementsView(Sequence[T]):
    """Read-only live view over a publisher's accumulated elements."""

    __slots__ = ("_items",)

    def __init__(self, items: List[T]) -> None:
        self._items = items

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[T]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[T, Sequence[T]]:
        if isinstance(index, slice):
            return tuple(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"ElementsView({self._items!r})"


def _as_fetch_error(exc: BaseException) -> FetchError:
    if isinstance(exc, FetchError):
        return exc
    error = FetchError(str(exc) or exc.__class__.__name__)
    error.__cause__ = exc
    return error


class InfinitePublisher(Generic[T]):
    """Append-only accumulation of the pages produced by a paged source.

    Observable state:

    * ``loading`` — ``True`` while a page request is outstanding.
    * ``exhausted`` — ``True`` once a page arrived without a next cursor.
    * ``error`` — the :class:`FetchError` of the last failed attempt, cleared
      by the next successful page or by :meth:`reload`.

    Signals, mirroring the Qt item-model protocol so adapters can forward
    them one to one:

    * ``rows_about_to_be_inserted(first, last)`` before elements are appended
    * ``rows_inserted(first, elements)`` after they were appended
    * ``about_to_reset()`` / ``reset_done()`` around :meth:`reload`
    * ``page_loaded(slice)`` for every successful page, empty ones included
    * ``failed(error)`` for every failed attempt
    """

    def __init__(
        self,
        source: PagedSource[T],
        scheduler: Optional[FetchScheduler] = None,
        *,
        name: str = "",
    ) -> None:
        self._source = source
        self._scheduler: FetchScheduler = scheduler or ImmediateScheduler()
        self._name = name or getattr(source, "__name__", type(source).__name__)

        # State
        self._elements: List[T] = []
        self._view: ElementsView[T] = ElementsView(self._elements)
        self._cursor: Optional[Cursor] = None
        self._generation = 0
        self._in_flight = False
        self._guard = threading.Lock()
        self._reload_pending = False
        self._disposed = False

        self.loading = ObservableProperty(False)
        self.exhausted = ObservableProperty(False)
        self.error = ObservableProperty(None)

        self.rows_about_to_be_inserted = Signal("rows_about_to_be_inserted")
        self.rows_inserted = Signal("rows_inserted")
        self.about_to_reset = Signal("about_to_reset")
        self.reset_done = Signal("reset_done")
        self.page_loaded = Signal("page_loaded")
        self.failed = Signal("failed")

    # -- construction variants ---------------------------------------------

    @classmethod
    def from_first_slice(
        cls,
        first: Callable[[], Slice[T]],
        follow: Callable[[Cursor], Slice[T]],
        scheduler: Optional[FetchScheduler] = None,
        *,
        name: str = "",
    ) -> "InfinitePublisher[T]":
        """Publisher whose first page comes from *first* and later pages from *follow*."""
        return cls(SlicePagedSource(first, follow), scheduler, name=name)

    @classmethod
    def from_ids(
        cls,
        fetch_ids: Callable[[], Sequence[str]],
        fetch_items: Callable[[Sequence[str]], Sequence[T]],
        scheduler: Optional[FetchScheduler] = None,
        *,
        chunk_size: int = DEFAULT_PLAYLIST_CHUNK_SIZE,
        name: str = "",
    ) -> "InfinitePublisher[T]":
        """Publisher paging client-side over an id list fetched once."""
        return cls(IdListPagedSource(fetch_ids, fetch_items, chunk_size), scheduler, name=name)

    # -- properties --------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def cursor(self) -> Optional[Cursor]:
        return self._cursor

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    @property
    def is_exhausted(self) -> bool:
        return bool(self.exhausted.value)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._elements)

    # -- public API --------------------------------------------------------

    def current(self) -> ElementsView[T]:
        """Return the elements accumulated so far as a live read-only view."""
        return self._view

    def can_load_more(self) -> bool:
        return not (self._disposed or self.exhausted.value or self._in_flight)

    def load_more(self) -> bool:
        """Request the next page.

        Returns ``True`` when a fetch was submitted and ``False`` when the
        call was a no-op (exhausted, already loading or disposed).
        """
        with self._guard:
            if self._disposed:
                LOGGER.debug("load_more(%s): publisher disposed", self._name)
                return False
            if self.exhausted.value:
                LOGGER.debug("load_more(%s): exhausted", self._name)
                return False
            if self._in_flight:
                LOGGER.debug("load_more(%s): already loading a page", self._name)
                return False
            self._in_flight = True
            generation = self._generation
            cursor = self._cursor

        self.loading.value = True
        source = self._source
        ref = weakref.ref(self)

        def fetch() -> Slice[T]:
            return source(cursor)

        def on_success(page: Slice[T]) -> None:
            publisher = ref()
            if publisher is None:
                LOGGER.debug("Dropping page for a collected publisher")
                return
            publisher._apply_page(generation, page)

        def on_failure(exc: Exception) -> None:
            publisher = ref()
            if publisher is None:
                LOGGER.debug("Dropping failure for a collected publisher: %s", exc)
                return
            publisher._apply_failure(generation, exc)

        LOGGER.debug("load_more(%s): fetching cursor=%r", self._name, cursor)
        self._scheduler.submit(fetch, on_success, on_failure)
        return True

    def reload(self) -> None:
        """Drop everything and start again from the first page.

        A page request still outstanding is allowed to finish first (its
        result is discarded) so the one-request-at-a-time rule holds.
        """
        if self._disposed:
            return
        self._generation += 1
        self.about_to_reset.emit()
        self._elements.clear()
        self._cursor = None
        self.error.value = None
        self.exhausted.value = False
        self.reset_done.emit()
        if self._in_flight:
            self._reload_pending = True
            return
        self.load_more()

    def dispose(self) -> None:
        """Detach all observers; results still in flight will be discarded."""
        if self._disposed:
            return
        self._disposed = True
        self._generation += 1
        self._reload_pending = False
        for signal in (
            self.rows_about_to_be_inserted,
            self.rows_inserted,
            self.about_to_reset,
            self.reset_done,
            self.page_loaded,
            self.failed,
            self.loading.changed,
            self.exhausted.changed,
            self.error.changed,
        ):
            signal.disconnect_all()

    # -- completion ----------------------------------------------------------

    def _apply_page(self, generation: int, page: Slice[T]) -> None:
        if generation != self._generation:
            self._discard_stale()
            return
        if not isinstance(page, Slice):
            self._apply_failure(
                generation, TypeError(f"paged source returned {type(page).__name__}, not Slice")
            )
            return

        elements = page.elements
        first = len(self._elements)
        self._cursor = page.next_cursor
        if elements:
            self.rows_about_to_be_inserted.emit(first, first + len(elements) - 1)
            self._elements.extend(elements)
            self.rows_inserted.emit(first, elements)

        self.error.value = None
        self.exhausted.value = page.next_cursor is None
        self._in_flight = False
        self.loading.value = False
        LOGGER.info(
            "Page loaded for %s: %d new, %d total%s",
            self._name,
            len(elements),
            len(self._elements),
            " (exhausted)" if page.next_cursor is None else "",
        )
        self.page_loaded.emit(page)

    def _apply_failure(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            self._discard_stale()
            return
        error = _as_fetch_error(exc)
        LOGGER.warning("Fetch failed for %s (cursor=%r): %s", self._name, self._cursor, error)
        self._in_flight = False
        self.loading.value = False
        self.error.value = error
        self.failed.emit(error)

    def _discard_stale(self) -> None:
        LOGGER.debug("Discarding stale result for %s", self._name)
        if self._disposed:
            return
        self._in_flight = False
        self.loading.value = False
        if self._reload_pending:
            self._reload_pending = False
            self.load_more()
