import logging
import threading
import uuid
from collections import defaultdict
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


@dataclass(kw_only=True)
class Event:
    """Base class for everything published on the :class:`EventBus`."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    source: str = ""


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = Event
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    def __init__(self, logger: Optional[logging.Logger] = None, max_workers: int = 2):
        self._logger = logger or logging.getLogger(__name__)
        self._sync_handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._async_handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._max_workers = max_workers
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: Callable, async_: bool = False) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            if async_:
                self._async_handlers[event_type].append(sub)
            else:
                self._sync_handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.active = False
        with self._lock:
            for store in (self._sync_handlers, self._async_handlers):
                subs = store.get(subscription.event_type)
                if subs and subscription in subs:
                    subs.remove(subscription)

    def publish(self, event: Event):
        event_type = type(event)

        with self._lock:
            sync_subs = list(self._sync_handlers[event_type])
            async_subs = list(self._async_handlers[event_type])

        for sub in sync_subs:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as exc:
                self._logger.error("Sync handler failed for %s: %s", event_type.__name__, exc)

        for sub in async_subs:
            if not sub.active:
                continue
            self._pool().submit(self._safe_async_call, sub.handler, event)

    def publish_async(self, event: Event) -> List[Future]:
        """Submit all handlers (sync and async) to the thread pool, return futures."""
        event_type = type(event)
        futures: List[Future] = []

        with self._lock:
            subs = list(self._sync_handlers[event_type]) + list(self._async_handlers[event_type])

        for sub in subs:
            if not sub.active:
                continue
            futures.append(self._pool().submit(self._safe_async_call, sub.handler, event))

        return futures

    def _pool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="nuage-events"
                )
            return self._executor

    def _safe_async_call(self, handler, event):
        try:
            handler(event)
        except Exception as exc:
            self._logger.error("Async handler failed: %s", exc)

    def shutdown(self):
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
