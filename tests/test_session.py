import pytest

from nuage.application.services.session import Session
from nuage.domain.models import Playlist, User
from nuage.errors import NotAuthenticatedError
from nuage.events.bus import EventBus
from nuage.events.feed_events import SessionChangedEvent

ADA = User(id="u1", username="ada")


def test_require_user_when_signed_out():
    with pytest.raises(NotAuthenticatedError):
        Session().require_user()


def test_sign_in_publishes_event():
    bus = EventBus()
    events = []
    bus.subscribe(SessionChangedEvent, events.append)
    session = Session(bus)

    session.sign_in(ADA)
    session.sign_in(ADA)

    assert session.is_signed_in
    assert session.require_user() is ADA
    assert [e.user_id for e in events] == ["u1"]


def test_sign_out_clears_playlists():
    bus = EventBus()
    events = []
    bus.subscribe(SessionChangedEvent, events.append)
    session = Session(bus, user=ADA)
    session.set_playlists([Playlist(id="p", title="Mix", user=ADA)])

    session.sign_out()

    assert not session.is_signed_in
    assert session.playlists.value == []
    assert events[-1].user_id is None
