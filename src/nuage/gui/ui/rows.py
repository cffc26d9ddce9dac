"""Row variants rendered by the list views.

Every list renders one of a closed set of row kinds.  A row builder maps
``(elements, index)`` to a :class:`Row`; the Qt role adapter resolves the
variant at render time.  Builders are pure: they read the element sequence
and never modify it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple, TypeVar

from ...domain.models import Comment, Playlist, Post, Track, User

T = TypeVar("T")


class RowKind(str, Enum):
    TRACK = "track"
    PLAYLIST = "playlist"
    USER = "user"
    COMMENT = "comment"


@dataclass(frozen=True)
class Row:
    kind: RowKind
    title: str
    subtitle: str = ""
    # Feed rows are introduced by who shared the item, e.g. "ada reposted".
    header: Optional[str] = None
    artwork_url: Optional[str] = None
    details: Tuple[str, ...] = ()
    item: Any = None


RowBuilder = Callable[[Sequence[T], int], Row]


def format_duration(seconds: float) -> str:
    """Format a duration as ``m:ss`` or ``h:mm:ss``."""

    total = max(0, int(round(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def clean_description(text: Optional[str]) -> Optional[str]:
    """Collapse a free-form description onto a single line."""

    if text is None:
        return None
    cleaned = text.strip().replace("\r\n", " ").replace("\n", " ")
    return cleaned or None


def _plural(count: int, noun: str) -> str:
    return f"{count:,} {noun}" if count == 1 else f"{count:,} {noun}s"


def track_row(track: Track, header: Optional[str] = None) -> Row:
    details = [
        f"{_plural(track.playback_count, 'play')} · {_plural(track.like_count, 'like')}"
        f" · {_plural(track.repost_count, 'repost')}",
        format_duration(track.duration),
    ]
    description = clean_description(track.description)
    if description:
        details.append(description)
    return Row(
        kind=RowKind.TRACK,
        title=track.title,
        subtitle=track.user.display_name,
        header=header,
        artwork_url=track.artwork_url,
        details=tuple(details),
        item=track,
    )


def playlist_row(playlist: Playlist, header: Optional[str] = None) -> Row:
    return Row(
        kind=RowKind.PLAYLIST,
        title=playlist.title,
        subtitle=playlist.user.display_name,
        header=header,
        artwork_url=playlist.artwork_url,
        details=(_plural(playlist.track_count, "track"),),
        item=playlist,
    )


def user_row(user: User) -> Row:
    return Row(
        kind=RowKind.USER,
        title=user.username,
        subtitle=user.full_name or "",
        artwork_url=user.avatar_url,
        details=(_plural(user.followers_count, "follower"),),
        item=user,
    )


def comment_row(comment: Comment) -> Row:
    details = []
    if comment.timestamp is not None:
        details.append(f"at {format_duration(comment.timestamp)}")
    if comment.created_at is not None:
        details.append(comment.created_at.strftime("%Y-%m-%d %H:%M"))
    return Row(
        kind=RowKind.COMMENT,
        title=comment.user.username,
        subtitle=comment.body,
        artwork_url=comment.user.avatar_url,
        details=tuple(details),
        item=comment,
    )


def post_row(post: Post) -> Row:
    action = "reposted" if post.is_repost else "posted"
    header = f"{post.user.username} {action}"
    if isinstance(post.item, Track):
        return track_row(post.item, header=header)
    return playlist_row(post.item, header=header)


# -- (elements, index) builders used by the list view models ---------------


def build_post_row(posts: Sequence[Post], index: int) -> Row:
    return post_row(posts[index])


def build_track_row(tracks: Sequence[Track], index: int) -> Row:
    return track_row(tracks[index])


def build_user_row(users: Sequence[User], index: int) -> Row:
    return user_row(users[index])


def build_comment_row(comments: Sequence[Comment], index: int) -> Row:
    return comment_row(comments[index])
