"""Tests for QtFetchScheduler: pool execution, GUI-thread completion."""

import threading

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required", exc_type=ImportError)
pytest.importorskip("pytestqt", reason="pytest-qt is required", exc_type=ImportError)

from PySide6.QtCore import QThreadPool

from nuage.application.services.infinite_publisher import InfinitePublisher
from nuage.domain.slice import Slice
from nuage.errors import FetchError
from nuage.gui.ui.tasks.fetch_scheduler import QtFetchScheduler


@pytest.fixture
def scheduler(qapp):
    pool = QThreadPool()
    pool.setMaxThreadCount(2)
    scheduler = QtFetchScheduler(pool)
    yield scheduler
    pool.waitForDone(2000)


def test_success_is_delivered_on_gui_thread(qtbot, scheduler):
    fetch_threads, callback_threads, results = [], [], []

    def fetch():
        fetch_threads.append(threading.current_thread())
        return 42

    def on_success(value):
        callback_threads.append(threading.current_thread())
        results.append(value)

    scheduler.submit(fetch, on_success, lambda exc: None)
    qtbot.waitUntil(lambda: results == [42], timeout=3000)

    assert fetch_threads[0] is not threading.main_thread()
    assert callback_threads[0] is threading.main_thread()
    assert scheduler.pending_count == 0


def test_failure_is_delivered(qtbot, scheduler):
    errors = []

    def fetch():
        raise FetchError("offline")

    scheduler.submit(fetch, lambda value: None, errors.append)
    qtbot.waitUntil(lambda: len(errors) == 1, timeout=3000)
    assert isinstance(errors[0], FetchError)


def test_wait_for_done(scheduler):
    results = []
    for value in range(3):
        scheduler.submit(lambda value=value: value, results.append, lambda exc: None)
    assert scheduler.wait_for_done(3000) is True
    assert sorted(results) == [0, 1, 2]


def test_publisher_pages_through_pool(qtbot, scheduler):
    def source(cursor):
        start = cursor or 0
        end = min(start + 4, 10)
        return Slice.of(range(start, end), end if end < 10 else None)

    publisher = InfinitePublisher(source, scheduler)
    while not publisher.is_exhausted:
        publisher.load_more()
        assert publisher.load_more() is False  # one request at a time
        qtbot.waitUntil(lambda: not publisher.is_loading, timeout=3000)

    assert list(publisher.current()) == list(range(10))


class _Aborted(BaseException):
    pass


def test_non_exception_failure_releases_publisher(qtbot, scheduler):
    attempts = []

    def source(cursor):
        attempts.append(cursor)
        if len(attempts) == 1:
            raise _Aborted("worker torn down")
        return Slice.of([1, 2], None)

    publisher = InfinitePublisher(source, scheduler)
    publisher.load_more()
    qtbot.waitUntil(lambda: not publisher.is_loading, timeout=3000)

    assert isinstance(publisher.error.value, FetchError)
    assert "worker torn down" in str(publisher.error.value)
    assert scheduler.pending_count == 0

    assert publisher.load_more() is True
    qtbot.waitUntil(lambda: publisher.is_exhausted, timeout=3000)
    assert list(publisher.current()) == [1, 2]
