from .bus import Event, EventBus, Subscription
from .feed_events import (
    FeedExhaustedEvent,
    PageLoadedEvent,
    PlaybackRequestedEvent,
    SessionChangedEvent,
)
from .signal import ObservableProperty, Signal

__all__ = [
    "Event",
    "EventBus",
    "FeedExhaustedEvent",
    "ObservableProperty",
    "PageLoadedEvent",
    "PlaybackRequestedEvent",
    "SessionChangedEvent",
    "Signal",
    "Subscription",
]
