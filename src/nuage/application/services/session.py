"""Signed-in user state, passed explicitly to whatever needs it."""

from __future__ import annotations

import logging
from typing import List, Optional

from ...domain.models import Playlist, User
from ...errors import NotAuthenticatedError
from ...events.bus import EventBus
from ...events.feed_events import SessionChangedEvent
from ...events.signal import ObservableProperty

LOGGER = logging.getLogger(__name__)


class Session:
    """Holds the authenticated user and the playlists in their library."""

    def __init__(self, event_bus: Optional[EventBus] = None, user: Optional[User] = None) -> None:
        self._event_bus = event_bus
        self.user = ObservableProperty(user)
        self.playlists = ObservableProperty([])

    @property
    def is_signed_in(self) -> bool:
        return self.user.value is not None

    def sign_in(self, user: User) -> None:
        self._set_user(user)

    def sign_out(self) -> None:
        self.playlists.value = []
        self._set_user(None)

    def require_user(self) -> User:
        """Return the signed-in user or raise :class:`NotAuthenticatedError`."""
        user = self.user.value
        if user is None:
            raise NotAuthenticatedError("this feed needs a signed-in user")
        return user

    def set_playlists(self, playlists: List[Playlist]) -> None:
        self.playlists.value = list(playlists)

    def _set_user(self, user: Optional[User]) -> None:
        previous = self.user.value
        self.user.value = user
        if previous == user:
            return
        LOGGER.info("Session user changed: %s", user.username if user else "<signed out>")
        if self._event_bus is not None:
            self._event_bus.publish(
                SessionChangedEvent(user_id=user.id if user else None, source="session")
            )
