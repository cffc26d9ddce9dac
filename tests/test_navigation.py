import pytest

from nuage.gui.navigation import NavigationDetail, NavigationKind


def test_fixed_entries():
    entries = NavigationDetail.fixed_entries()
    assert [e.id for e in entries] == ["stream", "likes", "history", "following"]
    assert entries[0].image_name == "bolt.horizontal.fill"


def test_playlist_identity_is_title_and_id():
    a = NavigationDetail.playlist("Mix", "p1")
    b = NavigationDetail.playlist("Mix", "p2")
    assert a != b
    assert a == NavigationDetail.playlist("Mix", "p1")
    assert len({a, b, NavigationDetail.playlist("Mix", "p1")}) == 2
    assert a.id == "playlist:p1"
    assert a.kind is NavigationKind.PLAYLIST


def test_from_kind():
    assert NavigationDetail.from_kind("history") == NavigationDetail.history()
    with pytest.raises(ValueError):
        NavigationDetail.from_kind("playlist")
