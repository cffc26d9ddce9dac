"""Protocols for the collaborators the list layer consumes but does not own."""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from ..domain.models import Comment, Playlist, Post, Track, User
from ..domain.slice import Cursor, Slice

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class PagedSource(Protocol[T_co]):
    """Fetch one page; ``None`` asks for the first page."""

    def __call__(self, cursor: Optional[Cursor]) -> Slice[T_co]: ...


class FetchScheduler(Protocol):
    """Runs a fetch off the owning context and reports back on it.

    Implementations must invoke exactly one of ``on_success`` / ``on_failure``
    per submission, on the context that owns the publishers.
    """

    def submit(
        self,
        fetch: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[Exception], None],
    ) -> None: ...


class StreamingClient(Protocol):
    """Query side of the remote streaming service.

    Feed endpoints return their first page; later pages are requested through
    :meth:`next_page` with the cursor of the previous page.
    """

    def me(self) -> Optional[User]: ...

    def stream(self) -> Slice[Post]: ...

    def track_likes(self, user: User) -> Slice[Track]: ...

    def history(self) -> Slice[Track]: ...

    def followings(self, user: User) -> Slice[User]: ...

    def comments(self, track_id: str) -> Slice[Comment]: ...

    def next_page(self, cursor: Cursor) -> Slice: ...

    def playlist(self, playlist_id: str) -> Playlist: ...

    def tracks(self, track_ids: Sequence[str]) -> List[Track]: ...

    def library_playlists(self) -> List[Playlist]: ...


class Player(Protocol):
    """Playback command surface."""

    def play(self, tracks: Sequence[Track], from_index: int = 0) -> None: ...
