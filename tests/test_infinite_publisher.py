"""Tests for InfinitePublisher — accumulation, in-flight guard, failure and lifecycle."""

import gc
import threading
from unittest.mock import Mock

import pytest

from nuage.application.services.infinite_publisher import (
    ElementsView,
    ImmediateScheduler,
    InfinitePublisher,
)
from nuage.domain.slice import Slice
from nuage.errors import FetchError


class ScriptedSource:
    """Paged source that replays a script of pages / exceptions and records cursors."""

    def __init__(self, *steps):
        self._steps = list(steps)
        self.cursors = []

    def __call__(self, cursor):
        self.cursors.append(cursor)
        step = self._steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


class TestLoadMore:
    def test_two_pages_then_exhausted(self):
        source = ScriptedSource(Slice.of("ABC", "x"), Slice.of("D", None))
        publisher = InfinitePublisher(source)

        assert publisher.load_more() is True
        assert publisher.load_more() is True

        assert list(publisher.current()) == ["A", "B", "C", "D"]
        assert publisher.is_exhausted
        assert source.cursors == [None, "x"]

        assert publisher.load_more() is False
        assert publisher.load_more() is False
        assert list(publisher.current()) == ["A", "B", "C", "D"]
        assert len(source.cursors) == 2

    def test_growth_matches_page_in_order(self):
        source = ScriptedSource(Slice.of([1, 2], "a"), Slice.of([3, 2, 1], "b"))
        publisher = InfinitePublisher(source)

        publisher.load_more()
        before = list(publisher.current())
        publisher.load_more()

        assert len(publisher) == len(before) + 3
        assert list(publisher.current())[len(before):] == [3, 2, 1]

    def test_duplicates_are_kept(self):
        source = ScriptedSource(Slice.of(["a", "b"], 1), Slice.of(["b", "a"], None))
        publisher = InfinitePublisher(source)
        publisher.load_more()
        publisher.load_more()
        assert list(publisher.current()) == ["a", "b", "b", "a"]

    def test_cursor_is_passed_back_verbatim(self):
        token = object()
        source = ScriptedSource(Slice.of([1], token), Slice.of([2], None))
        publisher = InfinitePublisher(source)
        publisher.load_more()
        assert publisher.cursor is token
        publisher.load_more()
        assert source.cursors[1] is token

    def test_empty_first_page_is_exhausted(self):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([], None)))
        publisher.load_more()
        assert len(publisher) == 0
        assert publisher.is_exhausted

    def test_empty_page_with_cursor_is_not_exhausted(self):
        source = ScriptedSource(Slice.of([], "next"), Slice.of(["z"], None))
        publisher = InfinitePublisher(source)
        publisher.load_more()
        assert len(publisher) == 0
        assert not publisher.is_exhausted
        assert publisher.can_load_more()
        publisher.load_more()
        assert list(publisher.current()) == ["z"]

    def test_default_scheduler_runs_inline(self):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([1], None)))
        publisher.load_more()
        assert not publisher.is_loading
        assert list(publisher.current()) == [1]


class TestInFlightGuard:
    def test_second_call_before_completion_is_noop(self, manual_scheduler):
        source = ScriptedSource(Slice.of("AB", "x"))
        publisher = InfinitePublisher(source, manual_scheduler)

        assert publisher.load_more() is True
        assert publisher.load_more() is False
        assert publisher.is_loading
        assert manual_scheduler.submitted == 1

        manual_scheduler.run_all()

        assert source.cursors == [None]
        assert list(publisher.current()) == ["A", "B"]
        assert not publisher.is_loading

    def test_concurrent_callers_cause_one_invocation(self):
        release = threading.Event()
        calls = []

        def source(cursor):
            calls.append(cursor)
            release.wait(timeout=5)
            return Slice.of([1, 2], None)

        class ThreadScheduler:
            def __init__(self):
                self.threads = []

            def submit(self, fetch, on_success, on_failure):
                def run():
                    on_success(fetch())

                thread = threading.Thread(target=run)
                self.threads.append(thread)
                thread.start()

        scheduler = ThreadScheduler()
        publisher = InfinitePublisher(source, scheduler)
        barrier = threading.Barrier(8)

        def caller():
            barrier.wait()
            publisher.load_more()

        callers = [threading.Thread(target=caller) for _ in range(8)]
        for thread in callers:
            thread.start()
        for thread in callers:
            thread.join()
        release.set()
        for thread in scheduler.threads:
            thread.join()

        assert len(calls) == 1
        assert list(publisher.current()) == [1, 2]
        assert publisher.load_more() is False

    def test_loading_observable_toggles(self, manual_scheduler):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([1], "c")), manual_scheduler)
        changes = []
        publisher.loading.changed.connect(lambda new, old: changes.append(new))

        publisher.load_more()
        manual_scheduler.run_all()

        assert changes == [True, False]


class TestFailure:
    def test_failure_leaves_state_unchanged_and_retries_same_cursor(self):
        source = ScriptedSource(
            Slice.of("AB", "x"),
            FetchError("offline"),
            Slice.of("C", None),
        )
        publisher = InfinitePublisher(source)
        publisher.load_more()
        snapshot = (list(publisher.current()), publisher.cursor)

        assert publisher.load_more() is True
        assert (list(publisher.current()), publisher.cursor) == snapshot
        assert not publisher.is_loading
        assert not publisher.is_exhausted
        assert isinstance(publisher.error.value, FetchError)

        publisher.load_more()
        assert source.cursors == [None, "x", "x"]
        assert list(publisher.current()) == ["A", "B", "C"]
        assert publisher.error.value is None

    def test_first_page_failure_then_retry(self):
        source = ScriptedSource(FetchError("boom"), Slice.of("AB", None))
        publisher = InfinitePublisher(source)
        failures = []
        publisher.failed.connect(failures.append)

        publisher.load_more()
        assert list(publisher.current()) == []
        assert len(failures) == 1

        publisher.load_more()
        assert source.cursors == [None, None]
        assert list(publisher.current()) == ["A", "B"]

    def test_foreign_exceptions_surface_as_fetch_error(self):
        publisher = InfinitePublisher(ScriptedSource(ValueError("bad json")))
        failures = []
        publisher.failed.connect(failures.append)

        publisher.load_more()

        assert isinstance(failures[0], FetchError)
        assert isinstance(failures[0].__cause__, ValueError)
        assert "bad json" in str(failures[0])

    def test_non_slice_result_is_a_failure(self):
        publisher = InfinitePublisher(ScriptedSource(["not", "a", "slice"]))
        publisher.load_more()
        assert isinstance(publisher.error.value, FetchError)
        assert len(publisher) == 0
        assert not publisher.is_loading

    def test_retryable_indefinitely(self):
        source = ScriptedSource(*([FetchError("x")] * 5), Slice.of([1], None))
        publisher = InfinitePublisher(source)
        for _ in range(6):
            publisher.load_more()
        assert list(publisher.current()) == [1]


class TestSignals:
    def test_insert_notifications_bracket_the_append(self):
        publisher = InfinitePublisher(ScriptedSource(Slice.of("AB", "x"), Slice.of("C", None)))
        events = []
        publisher.rows_about_to_be_inserted.connect(
            lambda first, last: events.append(("about", first, last, len(publisher)))
        )
        publisher.rows_inserted.connect(
            lambda first, items: events.append(("inserted", first, tuple(items), len(publisher)))
        )

        publisher.load_more()
        publisher.load_more()

        assert events == [
            ("about", 0, 1, 0),
            ("inserted", 0, ("A", "B"), 2),
            ("about", 2, 2, 2),
            ("inserted", 2, ("C",), 3),
        ]

    def test_empty_page_emits_no_insert_but_page_loaded(self):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([], "c")))
        inserted = Mock()
        pages = Mock()
        publisher.rows_inserted.connect(inserted)
        publisher.page_loaded.connect(pages)

        publisher.load_more()

        inserted.assert_not_called()
        pages.assert_called_once()

    def test_current_is_live_and_read_only(self):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([1], "c"), Slice.of([2], None)))
        view = publisher.current()
        assert isinstance(view, ElementsView)
        publisher.load_more()
        publisher.load_more()
        assert list(view) == [1, 2]
        assert view[-1] == 2
        assert view[0:1] == (1,)
        assert not hasattr(view, "append")


class TestConstructionVariants:
    def test_from_first_slice(self):
        first = Mock(return_value=Slice.of([1, 2], "c1"))
        follow = Mock(return_value=Slice.of([3], None))
        publisher = InfinitePublisher.from_first_slice(first, follow, name="feed")

        publisher.load_more()
        publisher.load_more()

        first.assert_called_once_with()
        follow.assert_called_once_with("c1")
        assert list(publisher.current()) == [1, 2, 3]
        assert publisher.name == "feed"

    def test_from_ids(self):
        fetch_ids = Mock(return_value=["a", "b", "c", "d", "e"])
        fetch_items = Mock(side_effect=lambda ids: [i.upper() for i in ids])
        publisher = InfinitePublisher.from_ids(fetch_ids, fetch_items, chunk_size=2)

        while publisher.load_more():
            pass

        assert list(publisher.current()) == ["A", "B", "C", "D", "E"]
        assert fetch_ids.call_count == 1
        assert [c.args[0] for c in fetch_items.call_args_list] == [["a", "b"], ["c", "d"], ["e"]]
        assert publisher.is_exhausted


class TestLifecycle:
    def test_dispose_discards_in_flight_result(self, manual_scheduler):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([1], None)), manual_scheduler)
        inserted = Mock()
        publisher.rows_inserted.connect(inserted)
        publisher.load_more()

        publisher.dispose()
        manual_scheduler.run_all()

        assert len(publisher) == 0
        inserted.assert_not_called()
        assert publisher.load_more() is False

    def test_collected_publisher_result_is_dropped(self, manual_scheduler):
        publisher = InfinitePublisher(ScriptedSource(Slice.of([1], None)), manual_scheduler)
        publisher.load_more()
        del publisher
        gc.collect()

        manual_scheduler.run_all()  # must not raise

    def test_reload_restarts_from_first_page(self):
        source = ScriptedSource(Slice.of("AB", "x"), Slice.of("Z", None))
        publisher = InfinitePublisher(source)
        resets = []
        publisher.about_to_reset.connect(lambda: resets.append("about"))
        publisher.reset_done.connect(lambda: resets.append("done"))
        publisher.load_more()

        publisher.reload()

        assert resets == ["about", "done"]
        assert source.cursors == [None, None]
        assert list(publisher.current()) == ["Z"]
        assert publisher.is_exhausted

    def test_reload_while_loading_discards_stale_page(self, manual_scheduler):
        source = ScriptedSource(Slice.of(["old"], "x"), Slice.of(["new"], None))
        publisher = InfinitePublisher(source, manual_scheduler)
        publisher.load_more()

        publisher.reload()
        assert manual_scheduler.submitted == 1  # reload waits for the outstanding fetch

        manual_scheduler.run_next()  # stale result arrives, reload fetch is issued
        assert len(publisher) == 0
        assert manual_scheduler.submitted == 2

        manual_scheduler.run_next()
        assert list(publisher.current()) == ["new"]
        assert source.cursors == [None, None]

    def test_reload_clears_exhausted_and_error(self):
        source = ScriptedSource(FetchError("x"), Slice.of([1], None))
        publisher = InfinitePublisher(source, ImmediateScheduler())
        publisher.load_more()
        assert publisher.error.value is not None
        publisher.reload()
        assert publisher.error.value is None
        assert list(publisher.current()) == [1]


def test_scheduler_exception_in_fetch_reported_once():
    scheduler = ImmediateScheduler()
    success, failure = Mock(), Mock()
    scheduler.submit(Mock(side_effect=FetchError("no")), success, failure)
    success.assert_not_called()
    failure.assert_called_once()


@pytest.mark.parametrize("cursor", ["opaque", 17, ("tuple", 1)])
def test_any_cursor_value_round_trips(cursor):
    source = ScriptedSource(Slice.of([1], cursor), Slice.of([2], None))
    publisher = InfinitePublisher(source)
    publisher.load_more()
    publisher.load_more()
    assert source.cursors[1] == cursor
