"""Destinations offered by the sidebar."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..config import (
    FOLLOWING_ICON,
    FOLLOWING_TITLE,
    HISTORY_ICON,
    HISTORY_TITLE,
    LIKES_ICON,
    LIKES_TITLE,
    STREAM_ICON,
    STREAM_TITLE,
)


class NavigationKind(str, Enum):
    STREAM = "stream"
    LIKES = "likes"
    HISTORY = "history"
    FOLLOWING = "following"
    PLAYLIST = "playlist"


@dataclass(frozen=True)
class NavigationDetail:
    """One sidebar destination.

    Identity is the title plus the playlist id, so two playlists that share a
    name stay distinct entries.
    """

    kind: NavigationKind
    title: str
    playlist_id: Optional[str] = None
    image_name: Optional[str] = field(default=None, compare=False)

    @classmethod
    def stream(cls) -> "NavigationDetail":
        return cls(NavigationKind.STREAM, STREAM_TITLE, image_name=STREAM_ICON)

    @classmethod
    def likes(cls) -> "NavigationDetail":
        return cls(NavigationKind.LIKES, LIKES_TITLE, image_name=LIKES_ICON)

    @classmethod
    def history(cls) -> "NavigationDetail":
        return cls(NavigationKind.HISTORY, HISTORY_TITLE, image_name=HISTORY_ICON)

    @classmethod
    def following(cls) -> "NavigationDetail":
        return cls(NavigationKind.FOLLOWING, FOLLOWING_TITLE, image_name=FOLLOWING_ICON)

    @classmethod
    def playlist(cls, name: str, playlist_id: str) -> "NavigationDetail":
        return cls(NavigationKind.PLAYLIST, name, playlist_id=playlist_id)

    @classmethod
    def fixed_entries(cls) -> Tuple["NavigationDetail", ...]:
        return (cls.stream(), cls.likes(), cls.history(), cls.following())

    @classmethod
    def from_kind(cls, kind: str) -> "NavigationDetail":
        """Return the fixed entry for *kind*; playlists have no fixed entry."""
        for entry in cls.fixed_entries():
            if entry.kind.value == kind:
                return entry
        raise ValueError(f"no fixed navigation entry for {kind!r}")

    @property
    def id(self) -> str:
        if self.kind is NavigationKind.PLAYLIST:
            return f"playlist:{self.playlist_id}"
        return self.kind.value


__all__ = ["NavigationDetail", "NavigationKind"]
