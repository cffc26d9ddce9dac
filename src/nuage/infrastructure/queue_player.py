"""Minimal :class:`Player` that keeps a play queue without producing audio."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..domain.models import Track
from ..events.signal import ObservableProperty

LOGGER = logging.getLogger(__name__)


class QueuePlayer:
    """Record what would be playing.

    Audio output lives in an external player; this implementation stands in
    for it in the CLI and when no audio backend is configured.
    """

    def __init__(self) -> None:
        self.queue = ObservableProperty([])
        self.current_index = ObservableProperty(None)

    @property
    def current_track(self) -> Optional[Track]:
        index = self.current_index.value
        queue: List[Track] = self.queue.value
        if index is None or not 0 <= index < len(queue):
            return None
        return queue[index]

    def play(self, tracks: Sequence[Track], from_index: int = 0) -> None:
        self.queue.value = list(tracks)
        self.current_index.value = from_index
        LOGGER.info("Now playing: %s", self.current_track.title if self.current_track else "-")

