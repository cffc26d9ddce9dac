"""Qt widgets composing the main application window."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QModelIndex, Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QSplitter,
)

from ...appctx import AppContext
from ...config import MIN_WINDOW_HEIGHT, MIN_WINDOW_WIDTH, PLAYLISTS_SECTION_TITLE
from ...errors.handler import ErrorSeverity
from ..factories.viewmodel_factory import ViewModelFactory
from ..navigation import NavigationDetail, NavigationKind
from ..viewmodels.feed_list_viewmodel import FeedListViewModel
from .models.infinite_list_model import InfiniteListModel

LOGGER = logging.getLogger(__name__)

_DETAIL_ROLE = Qt.UserRole + 1


class MainWindow(QMainWindow):
    """Primary window: sidebar destinations on the left, the feed on the right."""

    def __init__(self, context: AppContext) -> None:
        super().__init__()
        self._context = context
        self._factory = ViewModelFactory(context)
        self._feed_vm: Optional[FeedListViewModel] = None
        self._feed_model: Optional[InfiniteListModel] = None

        self.setWindowTitle("Nuage")
        self.setMinimumSize(MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT)

        self.sidebar = QListWidget()
        self.sidebar.setMaximumWidth(240)
        self.feed_view = QListView()
        self.feed_view.setUniformItemSizes(False)
        self.feed_view.setWordWrap(True)
        self.loading_label = QLabel()

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.sidebar)
        splitter.addWidget(self.feed_view)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)
        self.statusBar().addPermanentWidget(self.loading_label)

        context.error_handler.register_ui_callback(self._show_error)

        self.sidebar_vm = self._factory.create_sidebar_vm()
        self.sidebar_vm.entries.changed.connect(self._on_entries_changed)
        self.sidebar_vm.navigation_requested.connect(self._show_feed)
        self.sidebar.currentItemChanged.connect(self._on_sidebar_item_changed)
        self.feed_view.doubleClicked.connect(self._on_feed_activated)

        self._populate_sidebar(self.sidebar_vm.entries.value)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def feed_view_model(self) -> Optional[FeedListViewModel]:
        return self._feed_vm

    def start(self) -> None:
        """Load the sidebar playlists and open the remembered destination."""
        self.sidebar_vm.refresh_playlists()
        kind = self._context.settings.get("ui.last_navigation", NavigationKind.STREAM.value)
        try:
            detail = NavigationDetail.from_kind(kind)
        except ValueError:
            detail = NavigationDetail.stream()
        self.sidebar_vm.select(detail)

    # ------------------------------------------------------------------
    # QWidget overrides
    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        """Release the current feed before the window closes."""

        self._release_feed()
        self.sidebar_vm.dispose()
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Sidebar
    # ------------------------------------------------------------------
    def _populate_sidebar(self, entries) -> None:
        selected = self.sidebar_vm.selection.value
        self.sidebar.blockSignals(True)
        try:
            self.sidebar.clear()
            header_added = False
            for entry in entries:
                if entry.kind is NavigationKind.PLAYLIST and not header_added:
                    header = QListWidgetItem(PLAYLISTS_SECTION_TITLE)
                    header.setFlags(Qt.ItemFlag.NoItemFlags)
                    self.sidebar.addItem(header)
                    header_added = True
                item = QListWidgetItem(entry.title)
                item.setData(_DETAIL_ROLE, entry)
                self.sidebar.addItem(item)
                if entry == selected:
                    self.sidebar.setCurrentItem(item)
        finally:
            self.sidebar.blockSignals(False)

    def _on_entries_changed(self, entries, _old) -> None:
        self._populate_sidebar(entries)

    def _on_sidebar_item_changed(self, current: QListWidgetItem, _previous) -> None:
        if current is None:
            return
        detail = current.data(_DETAIL_ROLE)
        if isinstance(detail, NavigationDetail):
            self.sidebar_vm.select(detail)

    # ------------------------------------------------------------------
    # Feed
    # ------------------------------------------------------------------
    def _show_feed(self, detail: NavigationDetail) -> None:
        self._release_feed()
        LOGGER.info("Showing %s", detail.id)
        vm = self._factory.feed_for(detail)
        model = InfiniteListModel(vm, self)
        model.loadingChanged.connect(self._on_loading_changed)
        model.errorOccurred.connect(self._on_feed_error)
        vm.is_empty.changed.connect(self._on_empty_changed)
        self._feed_vm = vm
        self._feed_model = model
        self.feed_view.setModel(model)
        self.setWindowTitle(f"Nuage — {detail.title}")
        if detail.kind is not NavigationKind.PLAYLIST:
            self._context.settings.set("ui.last_navigation", detail.kind.value)
        vm.start()

    def _release_feed(self) -> None:
        if self._feed_model is not None:
            self.feed_view.setModel(None)
            self._feed_model.dispose()
            self._feed_model.deleteLater()
            self._feed_model = None
        if self._feed_vm is not None:
            self._feed_vm.dispose()
            self._feed_vm = None

    def _on_feed_activated(self, index: QModelIndex) -> None:
        if self._feed_vm is not None and index.isValid():
            self._feed_vm.activate(index.row())

    def _on_loading_changed(self, loading: bool) -> None:
        self.loading_label.setText("Loading…" if loading else "")

    def _on_empty_changed(self, empty: bool, _old: bool) -> None:
        if empty:
            self.statusBar().showMessage("Nothing here yet", 5000)

    def _on_feed_error(self, message: str) -> None:
        self.statusBar().showMessage(f"Could not load more: {message}", 8000)

    def _show_error(self, message: str, severity: ErrorSeverity) -> None:
        self.statusBar().showMessage(message, 8000)
