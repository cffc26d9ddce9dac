"""Application-wide context shared by the CLI and the GUI layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .application.interfaces import FetchScheduler, Player, StreamingClient
from .application.services.infinite_publisher import ImmediateScheduler
from .application.services.session import Session
from .errors import CatalogError
from .errors.handler import ErrorHandler
from .events.bus import EventBus
from .infrastructure.queue_player import QueuePlayer

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .settings.manager import SettingsManager

LOGGER = logging.getLogger(__name__)


def _create_settings_manager() -> "SettingsManager":
    from .settings.manager import SettingsManager

    manager = SettingsManager()
    manager.load()
    return manager


@dataclass
class AppContext:
    """Container object shared across CLI commands and GUI components.

    The session lives here and is handed to whatever builds a feed; nothing
    reaches for a global signed-in user.
    """

    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    client: Optional[StreamingClient] = None
    player: Player = field(default_factory=QueuePlayer)
    scheduler: FetchScheduler = field(default_factory=ImmediateScheduler)
    event_bus: EventBus = field(default_factory=EventBus)
    session: Optional[Session] = None
    error_handler: Optional[ErrorHandler] = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = Session(self.event_bus)
        if self.error_handler is None:
            self.error_handler = ErrorHandler(logging.getLogger("nuage"), self.event_bus)

    @property
    def prefetch_rows(self) -> int:
        return int(self.settings.get("lists.prefetch_rows"))

    @property
    def playlist_chunk_size(self) -> int:
        return int(self.settings.get("lists.playlist_chunk_size"))

    def require_client(self) -> StreamingClient:
        if self.client is None:
            raise CatalogError("no catalog is open")
        return self.client

    def open_catalog(self, path: Optional[Path] = None) -> StreamingClient:
        """Serve feeds from the catalog at *path* and sign in its user.

        Without *path* the ``catalog_path`` setting is used.  A successful
        open is remembered in the settings.
        """
        from .infrastructure.fixture_client import FixtureClient

        if path is None:
            stored = self.settings.get("catalog_path")
            if not stored:
                raise CatalogError("no catalog configured; pass a catalog path")
            path = Path(stored)
        path = Path(path).expanduser()
        client = FixtureClient.from_path(path, page_size=int(self.settings.get("lists.page_size")))
        self.client = client
        user = client.me()
        if user is None:
            self.session.sign_out()
        else:
            self.session.sign_in(user)
        self.settings.set("catalog_path", str(path))
        LOGGER.info("Opened catalog %s", path)
        return client
