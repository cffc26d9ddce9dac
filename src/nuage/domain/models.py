"""Entities served by the streaming service.

Each entity can be decoded from the JSON-like payload the service returns via
``from_dict``; malformed payloads raise :class:`~nuage.errors.DecodeError` so
that a page which fails to decode surfaces as a regular fetch failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from ..errors import DecodeError


def _require(payload: Mapping[str, Any], key: str, kind: str) -> Any:
    if not isinstance(payload, Mapping):
        raise DecodeError(f"{kind} payload must be an object, got {type(payload).__name__}")
    try:
        return payload[key]
    except KeyError:
        raise DecodeError(f"{kind} payload is missing '{key}'") from None


def _int(payload: Mapping[str, Any], key: str, kind: str, default: int = 0) -> int:
    value = payload.get(key, default)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DecodeError(f"{kind}.{key} is not an integer: {value!r}") from None


def _datetime(value: Any, kind: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise DecodeError(f"{kind} has an invalid timestamp: {value!r}") from None


@dataclass(frozen=True)
class User:
    id: str
    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    followers_count: int = 0

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> User:
        return cls(
            id=str(_require(payload, "id", "user")),
            username=str(_require(payload, "username", "user")),
            full_name=payload.get("full_name") or None,
            avatar_url=payload.get("avatar_url"),
            followers_count=_int(payload, "followers_count", "user"),
        )


@dataclass(frozen=True)
class Track:
    id: str
    title: str
    user: User
    duration: float = 0.0  # seconds
    artwork_url: Optional[str] = None
    description: Optional[str] = None
    playback_count: int = 0
    like_count: int = 0
    repost_count: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Track:
        track_id = str(_require(payload, "id", "track"))
        duration = payload.get("duration", 0) or 0
        try:
            duration = float(duration)
        except (TypeError, ValueError):
            raise DecodeError(f"track.duration is not a number: {duration!r}") from None
        return cls(
            id=track_id,
            title=str(_require(payload, "title", "track")),
            user=User.from_dict(_require(payload, "user", "track")),
            duration=duration,
            artwork_url=payload.get("artwork_url"),
            description=payload.get("description"),
            playback_count=_int(payload, "playback_count", "track"),
            like_count=_int(payload, "like_count", "track"),
            repost_count=_int(payload, "repost_count", "track"),
        )


@dataclass(frozen=True)
class Playlist:
    id: str
    title: str
    user: User
    artwork_url: Optional[str] = None
    track_ids: List[str] = field(default_factory=list, compare=False, hash=False)
    tracks: List[Track] = field(default_factory=list, compare=False, hash=False)

    @property
    def track_count(self) -> int:
        return max(len(self.track_ids), len(self.tracks))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Playlist:
        playlist_id = str(_require(payload, "id", "playlist"))
        raw_tracks = payload.get("tracks") or []
        if not isinstance(raw_tracks, list):
            raise DecodeError("playlist.tracks must be a list")
        tracks = [Track.from_dict(item) for item in raw_tracks]
        raw_ids = payload.get("track_ids")
        if raw_ids is None:
            track_ids = [track.id for track in tracks]
        elif isinstance(raw_ids, list):
            track_ids = [str(item) for item in raw_ids]
        else:
            raise DecodeError("playlist.track_ids must be a list")
        return cls(
            id=playlist_id,
            title=str(_require(payload, "title", "playlist")),
            user=User.from_dict(_require(payload, "user", "playlist")),
            artwork_url=payload.get("artwork_url"),
            track_ids=track_ids,
            tracks=tracks,
        )


@dataclass(frozen=True)
class Comment:
    id: str
    body: str
    user: User
    created_at: Optional[datetime] = None
    # Position inside the track the comment is attached to, in seconds.
    timestamp: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Comment:
        comment_id = str(_require(payload, "id", "comment"))
        timestamp = payload.get("timestamp")
        if timestamp is not None:
            try:
                timestamp = float(timestamp)
            except (TypeError, ValueError):
                raise DecodeError(f"comment.timestamp is not a number: {timestamp!r}") from None
        return cls(
            id=comment_id,
            body=str(_require(payload, "body", "comment")),
            user=User.from_dict(_require(payload, "user", "comment")),
            created_at=_datetime(payload.get("created_at"), "comment"),
            timestamp=timestamp,
        )


PostItem = Union[Track, Playlist]


@dataclass(frozen=True)
class Post:
    id: str
    user: User
    item: PostItem
    is_repost: bool = False
    created_at: Optional[datetime] = None

    @property
    def tracks(self) -> List[Track]:
        """Tracks that start playing when the post is activated."""
        if isinstance(self.item, Track):
            return [self.item]
        return list(self.item.tracks)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Post:
        kind = payload.get("type", "track") if isinstance(payload, Mapping) else None
        if kind in ("track", "track-repost"):
            item: PostItem = Track.from_dict(_require(payload, "track", "post"))
        elif kind in ("playlist", "playlist-repost"):
            item = Playlist.from_dict(_require(payload, "playlist", "post"))
        else:
            raise DecodeError(f"post has an unknown type: {kind!r}")
        return cls(
            id=str(_require(payload, "id", "post")),
            user=User.from_dict(_require(payload, "user", "post")),
            item=item,
            is_repost=kind.endswith("-repost") or bool(payload.get("is_repost", False)),
            created_at=_datetime(payload.get("created_at"), "post"),
        )
