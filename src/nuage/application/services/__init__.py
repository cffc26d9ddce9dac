from .infinite_publisher import ElementsView, ImmediateScheduler, InfinitePublisher
from .paged_sources import IdListPagedSource, SlicePagedSource
from .session import Session

__all__ = [
    "ElementsView",
    "IdListPagedSource",
    "ImmediateScheduler",
    "InfinitePublisher",
    "Session",
    "SlicePagedSource",
]
