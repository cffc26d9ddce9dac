"""Pure Python SidebarViewModel — no Qt dependency.

Lists the fixed destinations followed by the playlists in the signed-in
user's library and tracks the current selection.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from nuage.application.interfaces import FetchScheduler
from nuage.application.services.infinite_publisher import ImmediateScheduler
from nuage.application.services.session import Session
from nuage.domain.models import Playlist
from nuage.events.bus import EventBus
from nuage.events.feed_events import SessionChangedEvent
from nuage.events.signal import ObservableProperty, Signal
from nuage.gui.navigation import NavigationDetail
from nuage.gui.viewmodels.base import BaseViewModel


class SidebarViewModel(BaseViewModel):
    """Sidebar ViewModel — pure Python."""

    def __init__(
        self,
        fetch_playlists: Callable[[], List[Playlist]],
        session: Session,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[FetchScheduler] = None,
    ) -> None:
        super().__init__()
        self._fetch_playlists = fetch_playlists
        self._session = session
        self._scheduler: FetchScheduler = scheduler or ImmediateScheduler()
        self._generation = 0
        self._logger = logging.getLogger(__name__)

        # Observable properties
        self.entries = ObservableProperty(list(NavigationDetail.fixed_entries()))
        self.selection = ObservableProperty(None)
        self.loading = ObservableProperty(False)

        # Signals for one-shot notifications
        self.navigation_requested = Signal("navigation_requested")

        if event_bus is not None:
            self.subscribe_event(event_bus, SessionChangedEvent, self._on_session_changed)

    @property
    def playlist_entries(self) -> List[NavigationDetail]:
        return [entry for entry in self.entries.value if entry.playlist_id is not None]

    def refresh_playlists(self) -> None:
        """Load the library playlists through the scheduler.

        A failure leaves the playlist section empty.
        """
        if self.is_disposed:
            return
        self._generation += 1
        generation = self._generation
        if not self._session.is_signed_in:
            self._apply_playlists(generation, [])
            return
        self.loading.value = True
        self._scheduler.submit(
            self._fetch_playlists,
            lambda playlists: self._apply_playlists(generation, playlists),
            lambda exc: self._on_playlists_failed(generation, exc),
        )

    def select(self, detail: NavigationDetail) -> None:
        """Select *detail* and ask the shell to show its feed."""
        if self.selection.value == detail:
            return
        self.selection.value = detail
        self.navigation_requested.emit(detail)

    def select_by_id(self, entry_id: str) -> Optional[NavigationDetail]:
        for entry in self.entries.value:
            if entry.id == entry_id:
                self.select(entry)
                return entry
        return None

    # -- completion ----------------------------------------------------------

    def _apply_playlists(self, generation: int, playlists: List[Playlist]) -> None:
        if self.is_disposed or generation != self._generation:
            return
        self.loading.value = False
        self._session.set_playlists(playlists)
        playlist_entries = [NavigationDetail.playlist(p.title, p.id) for p in playlists]
        self.entries.value = list(NavigationDetail.fixed_entries()) + playlist_entries
        current = self.selection.value
        if current is not None and current not in self.entries.value:
            self.selection.value = None

    def _on_playlists_failed(self, generation: int, exc: Exception) -> None:
        self._logger.warning("Could not load library playlists: %s", exc)
        self._apply_playlists(generation, [])

    def _on_session_changed(self, event: SessionChangedEvent) -> None:
        self.refresh_playlists()
