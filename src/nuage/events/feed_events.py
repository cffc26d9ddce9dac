from dataclasses import dataclass, field
from typing import Optional

from .bus import Event


@dataclass(kw_only=True)
class PageLoadedEvent(Event):
    feed: str = ""
    added: int = 0
    total: int = 0


@dataclass(kw_only=True)
class FeedExhaustedEvent(Event):
    feed: str = ""
    total: int = 0


@dataclass(kw_only=True)
class PlaybackRequestedEvent(Event):
    track_ids: list[str] = field(default_factory=list)
    start_index: int = 0


@dataclass(kw_only=True)
class SessionChangedEvent(Event):
    user_id: Optional[str] = None
