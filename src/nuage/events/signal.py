"""Pure Python signal system — no Qt dependency.

Provides ``Signal`` for observer-pattern callbacks and ``ObservableProperty``
for data-binding between publishers, view models and the Qt adapters.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Pure Python signal — does not depend on Qt.

    Handler registration is protected by a lock; emission iterates over a
    snapshot so handlers may connect or disconnect while being called.
    Exceptions raised by individual handlers are logged and do not prevent
    the remaining handlers from running (same semantics as ``EventBus``).
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> Callable:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def disconnect_all(self) -> None:
        with self._lock:
            self._handlers.clear()

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Signal %s handler %r failed", self._name or "<anonymous>", handler)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty:
    """Observable value used for view-model data binding.

    Emits ``changed(new_value, old_value)`` whenever the value is set to
    something that compares unequal to the current value.
    """

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal("changed")

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self.changed.emit(new_value, old_value)
