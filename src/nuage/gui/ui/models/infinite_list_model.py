"""Qt list model exposing a :class:`FeedListViewModel` to item views."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QAbstractListModel, QModelIndex, QObject, Qt, QTimer, Signal

from ....events.signal import Signal as PySignal
from ...viewmodels.feed_list_viewmodel import FeedListViewModel
from ..rows import Row
from .roles import role_names
from .row_adapter import RowAdapter

LOGGER = logging.getLogger(__name__)


class InfiniteListModel(QAbstractListModel):
    """List model that grows as its feed publishes pages.

    Rows are inserted with ``beginInsertRows``/``endInsertRows`` as pages
    arrive.  Views drive loading either through ``canFetchMore``/``fetchMore``
    or implicitly: rendering a row inside the look-ahead window schedules the
    next page request for the next event loop iteration.
    """

    errorOccurred = Signal(str)
    loadingChanged = Signal(bool)
    exhaustedChanged = Signal(bool)

    def __init__(
        self,
        view_model: FeedListViewModel,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._vm = view_model
        self._row_adapter = RowAdapter()
        self._prefetch_queued = False
        self._connections: List[Tuple[PySignal, Callable]] = []

        publisher = view_model.publisher
        self._connect(publisher.rows_about_to_be_inserted, self._on_rows_about_to_be_inserted)
        self._connect(publisher.rows_inserted, self._on_rows_inserted)
        self._connect(publisher.about_to_reset, self._on_about_to_reset)
        self._connect(publisher.reset_done, self._on_reset_done)
        self._connect(view_model.loading.changed, self._on_loading_changed)
        self._connect(view_model.exhausted.changed, self._on_exhausted_changed)
        self._connect(view_model.error_occurred, self._on_error)

    @property
    def view_model(self) -> FeedListViewModel:
        return self._vm

    def row_at(self, row: int) -> Optional[Row]:
        if not 0 <= row < len(self._vm.elements()):
            return None
        return self._vm.row_at(row)

    def dispose(self) -> None:
        """Stop observing the view model; the model keeps its current rows."""
        for signal, handler in self._connections:
            try:
                signal.disconnect(handler)
            except ValueError:
                continue
        self._connections.clear()

    # ------------------------------------------------------------------
    # Qt model implementation
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self._vm.elements())

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid() or not 0 <= index.row() < len(self._vm.elements()):
            return None
        row = index.row()
        if role == Qt.DisplayRole and self._vm.should_prefetch(row):
            self._queue_prefetch(row)
        return self._row_adapter.data(self._vm.row_at(row), role)

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return role_names(super().roleNames())

    # ------------------------------------------------------------------
    # Pagination support (Qt canFetchMore/fetchMore API)
    # ------------------------------------------------------------------
    def canFetchMore(self, parent: QModelIndex = QModelIndex()) -> bool:  # type: ignore[override]
        if parent.isValid():
            return False
        return self._vm.can_load_more()

    def fetchMore(self, parent: QModelIndex = QModelIndex()) -> None:  # type: ignore[override]
        if parent.isValid():
            return
        self._vm.load_more()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _connect(self, signal: PySignal, handler: Callable) -> None:
        signal.connect(handler)
        self._connections.append((signal, handler))

    def _queue_prefetch(self, row: int) -> None:
        # data() must not insert rows while a view is painting.
        if self._prefetch_queued:
            return
        self._prefetch_queued = True
        QTimer.singleShot(0, self, lambda: self._run_prefetch(row))

    def _run_prefetch(self, row: int) -> None:
        self._prefetch_queued = False
        self._vm.row_shown(row)

    def _on_rows_about_to_be_inserted(self, first: int, last: int) -> None:
        self.beginInsertRows(QModelIndex(), first, last)

    def _on_rows_inserted(self, first: int, elements: Any) -> None:
        self.endInsertRows()

    def _on_about_to_reset(self) -> None:
        self.beginResetModel()

    def _on_reset_done(self) -> None:
        self.endResetModel()

    def _on_loading_changed(self, loading: bool, _old: bool) -> None:
        self.loadingChanged.emit(bool(loading))

    def _on_exhausted_changed(self, exhausted: bool, _old: bool) -> None:
        self.exhaustedChanged.emit(bool(exhausted))

    def _on_error(self, error: Exception) -> None:
        LOGGER.debug("Surfacing fetch error for %s: %s", self._vm.name, error)
        self.errorOccurred.emit(str(error))
