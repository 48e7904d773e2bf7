from __future__ import annotations

from typing import Any

from ..logging import get_logger
from ..models.events import Event

_log = get_logger()


class EventLog:
    """Append-only log of exchange events.

    Readers poll with ``since``. Rolling back a checkpoint drops events
    appended since, so a failed operation leaves no trace in the log.
    """

    def __init__(self) -> None:
        self._events: list[Event] = []

    def __len__(self) -> int:
        return len(self._events)

    def emit(self, event: Event) -> Event:
        recorded = event.model_copy(update={"seq": len(self._events)})
        self._events.append(recorded)
        _log.info("event_emitted", **recorded.model_dump())
        return recorded

    def since(self, offset: int = 0) -> list[Event]:
        return list(self._events[max(0, offset):])

    def checkpoint(self) -> Any:
        return len(self._events)

    def restore(self, state: Any) -> None:
        del self._events[int(state):]
