"""Default configuration values for Nuage."""

from __future__ import annotations

from typing import Final

# Number of entities the offline catalog client returns per page.  The remote
# service picks its own page size; this only applies to ``FixtureClient``.
DEFAULT_PAGE_SIZE: Final[int] = 50

# Playlists are loaded as a full id list followed by bulk track requests of at
# most this many ids.
DEFAULT_PLAYLIST_CHUNK_SIZE: Final[int] = 50

# Lists request the next page once rendering reaches this many rows from the
# end of the rows known so far.
DEFAULT_PREFETCH_ROWS: Final[int] = 5

SETTINGS_DIR_NAME: Final[str] = "Nuage"
SETTINGS_FILE_NAME: Final[str] = "settings.json"

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

STREAM_TITLE: Final[str] = "Stream"
LIKES_TITLE: Final[str] = "Likes"
HISTORY_TITLE: Final[str] = "History"
FOLLOWING_TITLE: Final[str] = "Following"
PLAYLISTS_SECTION_TITLE: Final[str] = "Playlists"

# Symbol names mirror the system icon set used by the macOS client.
STREAM_ICON: Final[str] = "bolt.horizontal.fill"
LIKES_ICON: Final[str] = "heart.fill"
HISTORY_ICON: Final[str] = "clock.fill"
FOLLOWING_ICON: Final[str] = "person.2.fill"

MIN_WINDOW_WIDTH: Final[int] = 800
MIN_WINDOW_HEIGHT: Final[int] = 400
