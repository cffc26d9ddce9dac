"""Pure Python list ViewModel (MVVM) over an :class:`InfinitePublisher`.

Holds the display side of incremental loading: row construction through a
row builder, the look-ahead policy that decides when rendering is close
enough to the end of the known rows to request the next page, and error
reporting.  ``InfiniteListModel`` bridges it to Qt views.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, Optional, Sequence, TypeVar

from nuage.application.services.infinite_publisher import InfinitePublisher
from nuage.config import DEFAULT_PREFETCH_ROWS
from nuage.domain.slice import Slice
from nuage.errors import FetchError, PlaybackError
from nuage.errors.handler import ErrorHandler, ErrorSeverity
from nuage.events.bus import EventBus
from nuage.events.feed_events import FeedExhaustedEvent, PageLoadedEvent, SessionChangedEvent
from nuage.events.signal import ObservableProperty, Signal
from nuage.gui.ui.rows import Row, RowBuilder
from nuage.gui.viewmodels.base import BaseViewModel

T = TypeVar("T")

ActivateHandler = Callable[[Sequence[Any], int], None]


class FeedListViewModel(BaseViewModel, Generic[T]):
    """List ViewModel for one feed — pure Python, no Qt dependency.

    The ViewModel owns its publisher: :meth:`dispose` disposes it too.
    """

    def __init__(
        self,
        publisher: InfinitePublisher[T],
        row_builder: RowBuilder,
        *,
        on_activate: Optional[ActivateHandler] = None,
        prefetch_rows: int = DEFAULT_PREFETCH_ROWS,
        error_handler: Optional[ErrorHandler] = None,
        event_bus: Optional[EventBus] = None,
        reload_on_session_change: bool = False,
    ) -> None:
        super().__init__()
        self._publisher = publisher
        self._row_builder = row_builder
        self._on_activate = on_activate
        self._prefetch_rows = max(0, prefetch_rows)
        self._error_handler = error_handler
        self._event_bus = event_bus
        self._row_cache: Dict[int, Row] = {}
        self._logger = logging.getLogger(__name__)

        # Observable properties
        self.count = ObservableProperty(len(publisher))
        self.loading = ObservableProperty(publisher.is_loading)
        self.exhausted = ObservableProperty(publisher.is_exhausted)
        self.is_empty = ObservableProperty(publisher.is_exhausted and len(publisher) == 0)
        self.error_message = ObservableProperty(None)

        # Signals
        self.error_occurred = Signal("error_occurred")  # emits FetchError

        self.connect_signal(publisher.rows_inserted, self._on_rows_inserted)
        self.connect_signal(publisher.reset_done, self._on_reset)
        self.connect_signal(publisher.page_loaded, self._on_page_loaded)
        self.connect_signal(publisher.failed, self._on_failed)
        self.connect_signal(publisher.loading.changed, self._on_loading_changed)
        self.connect_signal(publisher.exhausted.changed, self._on_exhausted_changed)

        if event_bus is not None and reload_on_session_change:
            self.subscribe_event(event_bus, SessionChangedEvent, self._on_session_changed)

    # -- properties --------------------------------------------------------

    @property
    def publisher(self) -> InfinitePublisher[T]:
        return self._publisher

    @property
    def name(self) -> str:
        return self._publisher.name

    @property
    def prefetch_rows(self) -> int:
        return self._prefetch_rows

    def elements(self) -> Sequence[T]:
        return self._publisher.current()

    # -- rows ----------------------------------------------------------------

    def row_at(self, index: int) -> Row:
        """Build (or return the cached) row for *index*."""
        elements = self._publisher.current()
        if not 0 <= index < len(elements):
            raise IndexError(f"row {index} out of range for {len(elements)} rows")
        row = self._row_cache.get(index)
        if row is None:
            row = self._row_builder(elements, index)
            self._row_cache[index] = row
        return row

    def should_prefetch(self, index: int) -> bool:
        """Return ``True`` when *index* is inside the look-ahead window."""
        if not self._publisher.can_load_more():
            return False
        window = max(self._prefetch_rows, 1)
        return index >= len(self._publisher) - window

    def row_shown(self, index: int) -> bool:
        """Note that *index* is being rendered; request more rows if near the end."""
        if self.should_prefetch(index):
            return self._publisher.load_more()
        return False

    # -- commands ----------------------------------------------------------

    def start(self) -> bool:
        """Load the first page unless something is already loaded or loading."""
        if len(self._publisher) or self._publisher.is_exhausted:
            return False
        return self._publisher.load_more()

    def can_load_more(self) -> bool:
        return self._publisher.can_load_more()

    def load_more(self) -> bool:
        return self._publisher.load_more()

    def retry(self) -> bool:
        """Repeat the last failed request with the same cursor."""
        return self._publisher.load_more()

    def reload(self) -> None:
        self._publisher.reload()

    def activate(self, index: int) -> None:
        """Run the activation action (usually playback) for row *index*."""
        if self._on_activate is None:
            return
        elements = self._publisher.current()
        if not 0 <= index < len(elements):
            raise IndexError(f"row {index} out of range for {len(elements)} rows")
        try:
            self._on_activate(elements, index)
        except PlaybackError as exc:
            self._logger.warning("Cannot play row %d of %s: %s", index, self.name, exc)
            if self._error_handler is not None:
                self._error_handler.handle(exc, ErrorSeverity.ERROR, {"feed": self.name, "row": index})

    def dispose(self) -> None:
        super().dispose()
        self._row_cache.clear()
        self._publisher.dispose()

    # -- publisher callbacks ---------------------------------------------------

    def _on_rows_inserted(self, first: int, elements: Sequence[T]) -> None:
        self.count.value = len(self._publisher)
        self.error_message.value = None

    def _on_reset(self) -> None:
        self._row_cache.clear()
        self.count.value = len(self._publisher)
        self.error_message.value = None
        self.is_empty.value = False

    def _on_loading_changed(self, loading: bool, _old: bool) -> None:
        self.loading.value = loading

    def _on_exhausted_changed(self, exhausted: bool, _old: bool) -> None:
        self.exhausted.value = exhausted

    def _on_page_loaded(self, page: Slice[T]) -> None:
        total = len(self._publisher)
        self.is_empty.value = self._publisher.is_exhausted and total == 0
        if self._event_bus is not None:
            self._event_bus.publish(
                PageLoadedEvent(feed=self.name, added=len(page), total=total, source="feed")
            )
            if page.is_last:
                self._event_bus.publish(FeedExhaustedEvent(feed=self.name, total=total, source="feed"))
        if not page.elements and not page.is_last:
            # No rows were inserted, so no view will render one and ask again.
            self._logger.debug("Empty page for %s, requesting the next one", self.name)
            self._publisher.load_more()

    def _on_failed(self, error: FetchError) -> None:
        self.error_message.value = str(error)
        self.error_occurred.emit(error)
        if self._error_handler is not None:
            self._error_handler.handle(
                error,
                ErrorSeverity.WARNING,
                {"feed": self.name, "loaded": len(self._publisher)},
            )

    def _on_session_changed(self, event: SessionChangedEvent) -> None:
        self._logger.info("Session changed, reloading %s", self.name)
        self.reload()
