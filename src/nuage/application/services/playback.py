"""Turn an activated row into a play request."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ...domain.models import Post, Track
from ...errors import PlaybackError
from ...events.bus import EventBus
from ...events.feed_events import PlaybackRequestedEvent
from ..interfaces import Player

LOGGER = logging.getLogger(__name__)


def queue_from_posts(posts: Sequence[Post], index: int) -> Tuple[List[Track], int]:
    """Flatten the tracks of *posts* and locate where post *index* starts.

    Playlist posts contribute all their tracks, so the start index is the sum
    of the track counts of every post before *index*.
    """
    if not 0 <= index < len(posts):
        raise IndexError(f"post index {index} out of range for {len(posts)} posts")
    counts = [len(post.tracks) for post in posts]
    tracks = [track for post in posts for track in post.tracks]
    return tracks, sum(counts[:index])


def play(
    tracks: Sequence[Track],
    from_index: int,
    player: Player,
    event_bus: Optional[EventBus] = None,
) -> None:
    """Hand *tracks* to *player*, starting at *from_index*."""
    if not tracks:
        raise PlaybackError("nothing to play")
    if not 0 <= from_index < len(tracks):
        raise PlaybackError(f"start index {from_index} out of range for {len(tracks)} tracks")
    LOGGER.info("Playing %d tracks from #%d (%s)", len(tracks), from_index, tracks[from_index].title)
    player.play(list(tracks), from_index)
    if event_bus is not None:
        event_bus.publish(
            PlaybackRequestedEvent(
                track_ids=[track.id for track in tracks],
                start_index=from_index,
                source="playback",
            )
        )


def play_posts(
    posts: Sequence[Post],
    index: int,
    player: Player,
    event_bus: Optional[EventBus] = None,
) -> None:
    tracks, start = queue_from_posts(posts, index)
    play(tracks, start, player, event_bus)


def play_tracks(
    tracks: Sequence[Track],
    index: int,
    player: Player,
    event_bus: Optional[EventBus] = None,
) -> None:
    play(tracks, index, player, event_bus)
