"""Background tasks and workers."""

from __future__ import annotations

from .fetch_scheduler import QtFetchScheduler
from .page_fetch_worker import PageFetchSignals, PageFetchWorker

__all__ = [
    "PageFetchSignals",
    "PageFetchWorker",
    "QtFetchScheduler",
]
