"""Turning activated rows into play requests."""

from unittest.mock import Mock

import pytest

from nuage.application.services.playback import play, play_posts, play_tracks, queue_from_posts
from nuage.domain.models import Playlist, Post, Track, User
from nuage.errors import PlaybackError
from nuage.events.bus import EventBus
from nuage.events.feed_events import PlaybackRequestedEvent
from nuage.infrastructure.queue_player import QueuePlayer

ADA = User(id="u1", username="ada")


def _track(tid):
    return Track(id=tid, title=tid.upper(), user=ADA)


def _posts():
    playlist = Playlist(id="p", title="Mix", user=ADA, tracks=[_track("b"), _track("c"), _track("d")])
    return [
        Post(id="1", user=ADA, item=_track("a")),
        Post(id="2", user=ADA, item=playlist),
        Post(id="3", user=ADA, item=_track("e")),
    ]


def test_queue_from_posts_starts_after_preceding_tracks():
    tracks, start = queue_from_posts(_posts(), 2)
    assert [t.id for t in tracks] == ["a", "b", "c", "d", "e"]
    assert start == 4


def test_queue_from_posts_playlist_starts_at_its_first_track():
    _, start = queue_from_posts(_posts(), 1)
    assert start == 1


def test_queue_from_posts_out_of_range():
    with pytest.raises(IndexError):
        queue_from_posts(_posts(), 3)


def test_play_posts_hands_queue_to_player():
    player = QueuePlayer()
    bus = EventBus()
    events = []
    bus.subscribe(PlaybackRequestedEvent, events.append)

    play_posts(_posts(), 2, player, bus)

    assert [t.id for t in player.queue.value] == ["a", "b", "c", "d", "e"]
    assert player.current_track.id == "e"
    assert events[0].track_ids == ["a", "b", "c", "d", "e"]
    assert events[0].start_index == 4


def test_play_tracks_from_index():
    player = Mock()
    tracks = [_track("a"), _track("b")]
    play_tracks(tracks, 1, player)
    player.play.assert_called_once_with(tracks, 1)


def test_empty_playlist_post_cannot_play():
    empty = Post(id="p", user=ADA, item=Playlist(id="p", title="Empty", user=ADA))
    with pytest.raises(PlaybackError):
        play_posts([empty], 0, QueuePlayer())


def test_play_rejects_bad_index():
    with pytest.raises(PlaybackError):
        play([_track("a")], 3, QueuePlayer())
