"""
Alert surface shared by every view.

Holds at most one current alert; showing a new one replaces the previous.
Listeners (toast renderers) are notified on show and hide.
"""
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from cubtton.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)

DEFAULT_DURATION_MS = 3000


class AlertKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    LOADING = "loading"


@dataclass(frozen=True)
class Alert:
    id: int
    message: str
    kind: AlertKind
    duration_ms: Optional[int] = DEFAULT_DURATION_MS

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "kind": self.kind.value,
            "duration_ms": self.duration_ms,
        }


AlertListener = Callable[[Optional[Alert]], None]


class AlertService:
    """Fire-and-forget status messages for the user."""

    def __init__(self):
        self.current: Optional[Alert] = None
        self._ids = itertools.count(1)
        self._listeners: list[AlertListener] = []

    def show_alert(
        self,
        message: str,
        kind: Union[AlertKind, str] = AlertKind.INFO,
        duration_ms: Optional[int] = DEFAULT_DURATION_MS,
    ) -> Alert:
        """
        Show an alert message.

        Args:
            message: Text to display
            kind: success, error, info or loading
            duration_ms: Time before auto-close; None keeps it until hidden
        """
        alert = Alert(id=next(self._ids), message=message, kind=AlertKind(kind), duration_ms=duration_ms)
        self.current = alert
        logger.info(f"[alert:{alert.kind.value}] {sanitize_string_for_logging(message, 120)}")
        self._notify()
        return alert

    def hide_alert(self) -> None:
        self.current = None
        self._notify()

    def subscribe(self, listener: AlertListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.current)
            except Exception:
                logger.exception("Alert listener failed")
