"""Row builders for the closed set of row kinds."""

from datetime import datetime

import pytest

from nuage.domain.models import Comment, Playlist, Post, Track, User
from nuage.gui.ui.rows import (
    RowKind,
    build_comment_row,
    build_post_row,
    build_track_row,
    build_user_row,
    clean_description,
    format_duration,
)

ADA = User(id="u1", username="ada", full_name="Ada Lovelace", followers_count=1)
BOB = User(id="u2", username="bob", followers_count=1200)
TRACK = Track(
    id="t1",
    title="Intro",
    user=ADA,
    duration=184,
    description=" first line\nsecond line \n",
    playback_count=1200,
    like_count=1,
    repost_count=0,
)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0:00"), (5, "0:05"), (184, "3:04"), (3599, "59:59"), (3725, "1:02:05"), (-3, "0:00")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_clean_description():
    assert clean_description(" a\nb\r\nc ") == "a b c"
    assert clean_description("   ") is None
    assert clean_description(None) is None


def test_track_row():
    row = build_track_row([TRACK], 0)
    assert row.kind is RowKind.TRACK
    assert row.title == "Intro"
    assert row.subtitle == "Ada Lovelace"
    assert row.header is None
    assert row.details == ("1,200 plays · 1 like · 0 reposts", "3:04", "first line second line")
    assert row.item is TRACK


def test_post_rows_name_the_poster():
    playlist = Playlist(id="p1", title="Mix", user=BOB, track_ids=["t1", "t2"])
    posts = [
        Post(id="s1", user=BOB, item=TRACK),
        Post(id="s2", user=ADA, item=playlist, is_repost=True),
    ]

    first = build_post_row(posts, 0)
    second = build_post_row(posts, 1)

    assert first.kind is RowKind.TRACK
    assert first.header == "bob posted"
    assert second.kind is RowKind.PLAYLIST
    assert second.header == "ada reposted"
    assert second.details == ("2 tracks",)


def test_user_row():
    row = build_user_row([ADA, BOB], 1)
    assert row.kind is RowKind.USER
    assert row.title == "bob"
    assert row.details == ("1,200 followers",)


def test_comment_row():
    comment = Comment(id="c1", body="nice", user=BOB, created_at=datetime(2024, 3, 1, 10, 15), timestamp=65)
    row = build_comment_row([comment], 0)
    assert row.kind is RowKind.COMMENT
    assert row.title == "bob"
    assert row.subtitle == "nice"
    assert row.details == ("at 1:05", "2024-03-01 10:15")


def test_builders_do_not_mutate_elements():
    elements = [TRACK]
    snapshot = list(elements)
    build_track_row(elements, 0)
    assert elements == snapshot
