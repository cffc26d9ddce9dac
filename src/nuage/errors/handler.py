"""Central place where recoverable failures are logged and surfaced."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from nuage.events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(ErrorSeverity).index(self)


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


UiCallback = Callable[[str, ErrorSeverity], None]


class ErrorHandler:
    """Log an error, publish it on the bus and, if severe enough, show it.

    Failed page fetches arrive as warnings (the list stays usable and can be
    retried); failed playback arrives as an error and reaches the UI.
    """

    def __init__(
        self,
        logger: logging.Logger,
        event_bus: EventBus,
        ui_threshold: ErrorSeverity = ErrorSeverity.ERROR,
    ):
        self._logger = logger
        self._events = event_bus
        self._ui_threshold = ui_threshold
        self._ui_callback: Optional[UiCallback] = None
        self._last_event: Optional[ErrorOccurredEvent] = None

    @property
    def last_event(self) -> Optional[ErrorOccurredEvent]:
        return self._last_event

    def register_ui_callback(self, callback: Optional[UiCallback]):
        self._ui_callback = callback

    def handle(
        self,
        error: Exception,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[dict] = None,
    ) -> ErrorOccurredEvent:
        context = dict(context or {})
        log_method = getattr(self._logger, severity.value, self._logger.error)
        where = context.get("feed")
        if where:
            log_method("%s in %s: %s", error.__class__.__name__, where, error, extra={"context": context})
        else:
            log_method("%s: %s", error.__class__.__name__, error, extra={"context": context})

        event = ErrorOccurredEvent(error=error, severity=severity, context=context, source="errors")
        self._last_event = event
        self._events.publish(event)

        if self._ui_callback is not None and severity.rank >= self._ui_threshold.rank:
            self._ui_callback(str(error), severity)
        return event
