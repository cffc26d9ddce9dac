import os
import sys
from pathlib import Path
from typing import Any, Callable, List, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class ManualScheduler:
    """Fetch scheduler that runs submitted fetches only when told to.

    Lets tests hold a fetch "in flight" and complete it later, in any order.
    """

    def __init__(self) -> None:
        self.pending: List[Tuple[Callable[[], Any], Callable, Callable]] = []
        self.submitted = 0

    def submit(self, fetch, on_success, on_failure) -> None:
        self.submitted += 1
        self.pending.append((fetch, on_success, on_failure))

    def run_next(self) -> None:
        self._run(self.pending.pop(0))

    def run_all(self) -> None:
        while self.pending:
            self.run_next()

    def fail_next(self, exc: Exception) -> None:
        _, _, on_failure = self.pending.pop(0)
        on_failure(exc)

    @staticmethod
    def _run(entry) -> None:
        fetch, on_success, on_failure = entry
        try:
            result = fetch()
        except Exception as exc:
            on_failure(exc)
            return
        on_success(result)


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


def _user(uid: str, username: str, **extra: Any) -> dict:
    payload = {"id": uid, "username": username, "followers_count": 0}
    payload.update(extra)
    return payload


def _track(tid: str, title: str, user: str, duration: int = 180, **extra: Any) -> dict:
    payload = {"id": tid, "title": title, "user": user, "duration": duration}
    payload.update(extra)
    return payload


@pytest.fixture
def catalog() -> dict:
    """A small catalog: seven tracks, two playlists, four stream posts."""
    return {
        "me": "u1",
        "users": [
            _user("u1", "ada", full_name="Ada Lovelace", followers_count=12),
            _user("u2", "brian", followers_count=1),
            _user("u3", "chloe"),
            _user("u4", "dmitri"),
        ],
        "tracks": [
            _track("t1", "Intro", "u2", 184, playback_count=1200, like_count=1),
            _track("t2", "Second", "u2", 200),
            _track("t3", "Third", "u3", 3725, description="  line one\nline two "),
            _track("t4", "Fourth", "u3"),
            _track("t5", "Fifth", "u4"),
            _track("t6", "Sixth", "u4"),
            _track("t7", "Seventh", "u1"),
        ],
        "playlists": [
            {"id": "p1", "title": "Mix", "user": "u1", "track_ids": ["t1", "t2", "t3", "t4", "t5"]},
            {"id": "p2", "title": "Short", "user": "u2", "track_ids": ["t6", "t7"]},
        ],
        "posts": [
            {"id": "s1", "type": "track", "user": "u2", "track": "t1"},
            {"id": "s2", "type": "playlist-repost", "user": "u3", "playlist": "p2"},
            {"id": "s3", "type": "track-repost", "user": "u4", "track": "t3"},
            {"id": "s4", "type": "track", "user": "u3", "track": "t4"},
        ],
        "likes": {"u1": ["t1", "t3", "t5", "t7"]},
        "history": ["t7", "t6"],
        "followings": {"u1": ["u2", "u3", "u4"]},
        "comments": {
            "t1": [
                {"id": "c1", "body": "nice", "user": "u2", "timestamp": 65,
                 "created_at": "2024-03-01T10:15:00"},
                {"id": "c2", "body": "love the drop", "user": "u3"},
            ]
        },
        "library": ["p1", "p2"],
    }


@pytest.fixture
def catalog_path(tmp_path: Path, catalog: dict) -> Path:
    import json

    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog), encoding="utf-8")
    return path


@pytest.fixture
def qapp():
    """Create a QApplication for Qt tests."""
    pytest.importorskip("PySide6", reason="PySide6 is required", exc_type=ImportError)
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
