"""BaseViewModel — pure Python, no Qt dependency.

Tracks ``EventBus`` subscriptions and ``Signal`` connections so concrete
ViewModels can release everything they observe with a single ``dispose()``.
"""

from __future__ import annotations

from typing import Callable, Type

from nuage.events.bus import EventBus, Subscription
from nuage.events.signal import Signal


class BaseViewModel:
    """ViewModel base class — pure Python, no Qt dependency."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._connections: list[tuple[Signal, Callable]] = []
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def connect_signal(self, signal: Signal, handler: Callable) -> None:
        """Connect *handler* to *signal* and remember to disconnect it."""
        signal.connect(handler)
        self._connections.append((signal, handler))

    def dispose(self) -> None:
        """Cancel tracked subscriptions and disconnect tracked signals."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        for signal, handler in self._connections:
            try:
                signal.disconnect(handler)
            except ValueError:
                # Already detached by the signal's owner.
                continue
        self._connections.clear()
        self._disposed = True
