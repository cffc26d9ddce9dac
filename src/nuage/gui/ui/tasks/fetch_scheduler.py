"""Run page fetches on a thread pool and complete them on the GUI thread."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from PySide6.QtCore import QCoreApplication, QDeadlineTimer, QObject, QThreadPool, Slot

from .page_fetch_worker import PageFetchSignals, PageFetchWorker

LOGGER = logging.getLogger(__name__)

_Callbacks = Tuple[Callable[[Any], None], Callable[[Exception], None]]


class QtFetchScheduler(QObject):
    """Fetch scheduler for the Qt client.

    Fetches run in :class:`PageFetchWorker` runnables.  The worker signals are
    owned by this object, which lives on the GUI thread, so their emission
    from a pool thread is queued and the completion callbacks always run on
    the GUI thread.
    """

    def __init__(
        self,
        pool: Optional[QThreadPool] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._ids = itertools.count(1)
        self._pending: Dict[int, _Callbacks] = {}
        self._signals = PageFetchSignals(self)
        self._signals.succeeded.connect(self._on_succeeded)
        self._signals.failed.connect(self._on_failed)

    @property
    def pool(self) -> QThreadPool:
        return self._pool

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def submit(
        self,
        fetch: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        request_id = next(self._ids)
        self._pending[request_id] = (on_success, on_failure)
        LOGGER.debug("Submitting fetch #%d", request_id)
        self._pool.start(PageFetchWorker(request_id, fetch, self._signals))

    def wait_for_done(self, msecs: int = 5000) -> bool:
        """Block until every submitted fetch has completed on this thread.

        Returns ``False`` when *msecs* elapse first.
        """
        deadline = QDeadlineTimer(msecs)
        while self._pending:
            if deadline.hasExpired():
                return False
            QCoreApplication.processEvents()
            self._pool.waitForDone(10)
        return True

    # -- completion (GUI thread) ---------------------------------------------

    @Slot(int, object)
    def _on_succeeded(self, request_id: int, result: object) -> None:
        callbacks = self._pending.pop(request_id, None)
        if callbacks is None:
            LOGGER.debug("Ignoring result for unknown fetch #%d", request_id)
            return
        on_success, _ = callbacks
        on_success(result)

    @Slot(int, object)
    def _on_failed(self, request_id: int, error: object) -> None:
        callbacks = self._pending.pop(request_id, None)
        if callbacks is None:
            LOGGER.debug("Ignoring failure for unknown fetch #%d", request_id)
            return
        _, on_failure = callbacks
        if not isinstance(error, Exception):
            error = RuntimeError(str(error))
        on_failure(error)
