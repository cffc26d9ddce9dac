"""Background worker that runs a single page fetch."""

from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, Signal

LOGGER = logging.getLogger(__name__)


class PageFetchSignals(QObject):
    """Signal container for :class:`PageFetchWorker` results."""

    succeeded = Signal(int, object)  # request id, fetch result
    failed = Signal(int, object)  # request id, exception

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class PageFetchWorker(QRunnable):
    """Run *fetch* on a pool thread and report the outcome by request id."""

    def __init__(
        self,
        request_id: int,
        fetch: Callable[[], Any],
        signals: PageFetchSignals,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._request_id = request_id
        self._fetch = fetch
        self._signals = signals

    @property
    def request_id(self) -> int:
        return self._request_id

    def run(self) -> None:  # pragma: no cover - runs in background thread
        try:
            result = self._fetch()
        except Exception as exc:
            LOGGER.debug("Fetch #%d failed: %s", self._request_id, exc)
            self._signals.failed.emit(self._request_id, exc)
            return
        except BaseException as exc:
            # The owner's in-flight guard is only released by a reply.
            LOGGER.error("Fetch #%d aborted: %r", self._request_id, exc)
            self._signals.failed.emit(self._request_id, exc)
            return
        self._signals.succeeded.emit(self._request_id, result)
