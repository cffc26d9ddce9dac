"""ViewModelFactory — centralised ViewModel creation.

Every list in the client is a :class:`FeedListViewModel` over an
:class:`InfinitePublisher`; the factory picks the paged source, the row
builder and the activation action for each kind of list and wires them to
the collaborators held by the :class:`AppContext`.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from nuage.application.interfaces import StreamingClient
from nuage.application.services.infinite_publisher import InfinitePublisher
from nuage.application.services.playback import play_posts, play_tracks
from nuage.appctx import AppContext
from nuage.domain.models import Comment, Post, Track, User
from nuage.domain.slice import Cursor, Slice
from nuage.gui.navigation import NavigationDetail, NavigationKind
from nuage.gui.ui.rows import (
    build_comment_row,
    build_post_row,
    build_track_row,
    build_user_row,
)
from nuage.gui.viewmodels.feed_list_viewmodel import FeedListViewModel
from nuage.gui.viewmodels.sidebar_viewmodel import SidebarViewModel


class ViewModelFactory:
    """Centrally creates ViewModels from the shared application context."""

    def __init__(self, context: AppContext) -> None:
        self._context = context

    @property
    def context(self) -> AppContext:
        return self._context

    # -- list factories ------------------------------------------------------

    def post_list(
        self,
        first: Callable[[], Slice[Post]],
        *,
        name: str = "posts",
        follow: Optional[Callable[[Cursor], Slice[Post]]] = None,
        user_bound: bool = False,
    ) -> FeedListViewModel[Post]:
        """List of posts; activating one plays every loaded post's tracks."""
        ctx = self._context

        def activate(posts: Sequence[Post], index: int) -> None:
            play_posts(posts, index, ctx.player, ctx.event_bus)

        return self._list(first, follow, build_post_row, activate, name, user_bound)

    def track_list(
        self,
        first: Callable[[], Slice[Track]],
        *,
        name: str = "tracks",
        follow: Optional[Callable[[Cursor], Slice[Track]]] = None,
        user_bound: bool = False,
    ) -> FeedListViewModel[Track]:
        """List of tracks; activating one plays the loaded tracks from there."""
        ctx = self._context

        def activate(tracks: Sequence[Track], index: int) -> None:
            play_tracks(tracks, index, ctx.player, ctx.event_bus)

        return self._list(first, follow, build_track_row, activate, name, user_bound)

    def comment_list(self, track_id: str) -> FeedListViewModel[Comment]:
        client = self._client()
        return self._list(
            lambda: client.comments(track_id),
            None,
            build_comment_row,
            None,
            f"comments:{track_id}",
            False,
        )

    def user_grid(
        self,
        first: Callable[[], Slice[User]],
        *,
        name: str = "users",
        follow: Optional[Callable[[Cursor], Slice[User]]] = None,
        user_bound: bool = False,
    ) -> FeedListViewModel[User]:
        return self._list(first, follow, build_user_row, None, name, user_bound)

    def playlist_tracks(self, playlist_id: str, *, name: str = "") -> FeedListViewModel[Track]:
        """Tracks of a playlist, loaded as an id list then in bulk chunks."""
        ctx = self._context
        client = self._client()

        def fetch_ids() -> Sequence[str]:
            return client.playlist(playlist_id).track_ids

        def activate(tracks: Sequence[Track], index: int) -> None:
            play_tracks(tracks, index, ctx.player, ctx.event_bus)

        publisher = InfinitePublisher.from_ids(
            fetch_ids,
            client.tracks,
            ctx.scheduler,
            chunk_size=ctx.playlist_chunk_size,
            name=name or f"playlist:{playlist_id}",
        )
        return FeedListViewModel(
            publisher,
            build_track_row,
            on_activate=activate,
            prefetch_rows=ctx.prefetch_rows,
            error_handler=ctx.error_handler,
            event_bus=ctx.event_bus,
        )

    # -- navigation ----------------------------------------------------------

    def feed_for(self, detail: NavigationDetail) -> FeedListViewModel:
        """Build the list shown for a sidebar destination."""
        client = self._client()
        session = self._context.session
        kind = detail.kind
        if kind is NavigationKind.STREAM:
            return self.post_list(client.stream, name=detail.id, user_bound=True)
        if kind is NavigationKind.LIKES:
            return self.track_list(
                lambda: client.track_likes(session.require_user()),
                name=detail.id,
                user_bound=True,
            )
        if kind is NavigationKind.HISTORY:
            return self.track_list(client.history, name=detail.id, user_bound=True)
        if kind is NavigationKind.FOLLOWING:
            return self.user_grid(
                lambda: client.followings(session.require_user()),
                name=detail.id,
                user_bound=True,
            )
        if kind is NavigationKind.PLAYLIST and detail.playlist_id:
            return self.playlist_tracks(detail.playlist_id, name=detail.id)
        raise ValueError(f"cannot build a feed for {detail!r}")

    def create_sidebar_vm(self) -> SidebarViewModel:
        ctx = self._context
        return SidebarViewModel(
            fetch_playlists=lambda: self._client().library_playlists(),
            session=ctx.session,
            event_bus=ctx.event_bus,
            scheduler=ctx.scheduler,
        )

    # -- helpers -------------------------------------------------------------

    def _client(self) -> StreamingClient:
        return self._context.require_client()

    def _list(self, first, follow, row_builder, on_activate, name, user_bound) -> FeedListViewModel:
        ctx = self._context
        publisher = InfinitePublisher.from_first_slice(
            first,
            follow or self._client().next_page,
            ctx.scheduler,
            name=name,
        )
        return FeedListViewModel(
            publisher,
            row_builder,
            on_activate=on_activate,
            prefetch_rows=ctx.prefetch_rows,
            error_handler=ctx.error_handler,
            event_bus=ctx.event_bus,
            reload_on_session_change=user_bound,
        )
