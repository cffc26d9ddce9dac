"""Offline :class:`StreamingClient` backed by a JSON catalog file.

The catalog stores every entity once and refers to users, tracks and
playlists by id::

    {
      "me": "u1",
      "users": [{"id": "u1", "username": "ada", "followers_count": 3}],
      "tracks": [{"id": "t1", "title": "Intro", "user": "u1", "duration": 184}],
      "playlists": [{"id": "p1", "title": "Mix", "user": "u1", "track_ids": ["t1"]}],
      "posts": [{"id": "s1", "type": "track-repost", "user": "u2", "track": "t1"}],
      "likes": {"u1": ["t1"]},
      "history": ["t1"],
      "followings": {"u1": ["u2"]},
      "comments": {"t1": [{"id": "c1", "body": "nice", "user": "u2"}]},
      "library": ["p1"]
    }

References are expanded into the nested payloads the service would send and
then decoded with the entity ``from_dict`` constructors, so a broken catalog
fails the same way a malformed response would.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..config import DEFAULT_PAGE_SIZE
from ..domain.models import Comment, Playlist, Post, Track, User
from ..domain.slice import Cursor, Slice
from ..errors import CatalogError, DecodeError, FetchError
from ..utils.jsonio import read_json

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _FixtureCursor:
    feed: str
    offset: int


class FixtureClient:
    """Serve feeds from an in-memory catalog, *page_size* entities at a time."""

    def __init__(self, catalog: Mapping[str, Any], page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if not isinstance(catalog, Mapping):
            raise CatalogError("catalog root must be an object")
        self._catalog = catalog
        self._page_size = page_size
        self._users = self._index(catalog.get("users", []), "users")
        self._tracks = self._index(catalog.get("tracks", []), "tracks")
        self._playlists = self._index(catalog.get("playlists", []), "playlists")

    @classmethod
    def from_path(cls, path: Path, page_size: int = DEFAULT_PAGE_SIZE) -> "FixtureClient":
        try:
            payload = read_json(path)
        except (OSError, ValueError) as exc:
            raise CatalogError(f"cannot read catalog {path}: {exc}") from exc
        LOGGER.info("Loaded catalog %s", path)
        return cls(payload, page_size=page_size)

    @property
    def page_size(self) -> int:
        return self._page_size

    # -- StreamingClient -----------------------------------------------------

    def me(self) -> Optional[User]:
        user_id = self._catalog.get("me")
        if user_id is None:
            return None
        return User.from_dict(self._user_payload(str(user_id)))

    def stream(self) -> Slice[Post]:
        return self._page("stream", 0)

    def track_likes(self, user: User) -> Slice[Track]:
        return self._page(f"likes:{user.id}", 0)

    def history(self) -> Slice[Track]:
        return self._page("history", 0)

    def followings(self, user: User) -> Slice[User]:
        return self._page(f"followings:{user.id}", 0)

    def comments(self, track_id: str) -> Slice[Comment]:
        return self._page(f"comments:{track_id}", 0)

    def next_page(self, cursor: Cursor) -> Slice:
        if not isinstance(cursor, _FixtureCursor):
            raise FetchError(f"unrecognised cursor: {cursor!r}")
        return self._page(cursor.feed, cursor.offset)

    def playlist(self, playlist_id: str) -> Playlist:
        """Return the playlist with its track ids only; tracks come from :meth:`tracks`."""
        return Playlist.from_dict(self._playlist_payload(playlist_id, expand_tracks=False))

    def tracks(self, track_ids: Sequence[str]) -> List[Track]:
        return [Track.from_dict(self._track_payload(track_id)) for track_id in track_ids]

    def library_playlists(self) -> List[Playlist]:
        return [self.playlist(str(pid)) for pid in self._catalog.get("library", [])]

    # -- paging --------------------------------------------------------------

    def _page(self, feed: str, offset: int) -> Slice:
        entries, decode = self._feed(feed)
        chunk = entries[offset : offset + self._page_size]
        end = offset + len(chunk)
        next_cursor = _FixtureCursor(feed, end) if end < len(entries) else None
        LOGGER.debug("Serving %s[%d:%d] of %d", feed, offset, end, len(entries))
        return Slice.of([decode(entry) for entry in chunk], next_cursor)

    def _feed(self, feed: str) -> tuple[List[Any], Callable[[Any], Any]]:
        kind, _, key = feed.partition(":")
        catalog = self._catalog
        if kind == "stream":
            return list(catalog.get("posts", [])), lambda raw: Post.from_dict(self._post_payload(raw))
        if kind == "history":
            return list(catalog.get("history", [])), self._decode_track_ref
        if kind == "likes":
            return list(catalog.get("likes", {}).get(key, [])), self._decode_track_ref
        if kind == "followings":
            return (
                list(catalog.get("followings", {}).get(key, [])),
                lambda ref: User.from_dict(self._user_payload(str(ref))),
            )
        if kind == "comments":
            return (
                list(catalog.get("comments", {}).get(key, [])),
                lambda raw: Comment.from_dict(self._with_user(raw)),
            )
        raise FetchError(f"unknown feed: {feed}")

    def _decode_track_ref(self, ref: Any) -> Track:
        return Track.from_dict(self._track_payload(str(ref)))

    # -- payload expansion ---------------------------------------------------

    @staticmethod
    def _index(entries: Any, section: str) -> Dict[str, Mapping[str, Any]]:
        if not isinstance(entries, list):
            raise CatalogError(f"catalog section '{section}' must be a list")
        index: Dict[str, Mapping[str, Any]] = {}
        for entry in entries:
            if not isinstance(entry, Mapping) or "id" not in entry:
                raise CatalogError(f"catalog section '{section}' has an entry without id")
            index[str(entry["id"])] = entry
        return index

    def _user_payload(self, user_id: str) -> Mapping[str, Any]:
        try:
            return self._users[user_id]
        except KeyError:
            raise DecodeError(f"unknown user: {user_id}") from None

    def _with_user(self, raw: Any) -> Dict[str, Any]:
        if not isinstance(raw, Mapping):
            raise DecodeError(f"expected an object, got {raw!r}")
        payload = dict(raw)
        user = payload.get("user")
        if isinstance(user, str):
            payload["user"] = self._user_payload(user)
        return payload

    def _track_payload(self, track_id: str) -> Dict[str, Any]:
        try:
            raw = self._tracks[track_id]
        except KeyError:
            raise DecodeError(f"unknown track: {track_id}") from None
        return self._with_user(raw)

    def _playlist_payload(self, playlist_id: str, expand_tracks: bool = True) -> Dict[str, Any]:
        try:
            raw = self._playlists[playlist_id]
        except KeyError:
            raise FetchError(f"unknown playlist: {playlist_id}") from None
        payload = self._with_user(raw)
        track_ids = [str(tid) for tid in payload.get("track_ids", [])]
        payload["track_ids"] = track_ids
        payload["tracks"] = [self._track_payload(tid) for tid in track_ids] if expand_tracks else []
        return payload

    def _post_payload(self, raw: Any) -> Dict[str, Any]:
        payload = self._with_user(raw)
        if isinstance(payload.get("track"), str):
            payload["track"] = self._track_payload(payload["track"])
        if isinstance(payload.get("playlist"), str):
            payload["playlist"] = self._playlist_payload(payload["playlist"])
        return payload
