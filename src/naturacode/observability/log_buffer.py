"""
Lightweight in-memory event buffer for the HTTP server.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Deque, List

log = logging.getLogger(__name__)


class LogBuffer:
    def __init__(self, max_events: int = 300) -> None:
        self.max_events = max_events
        self._events: Deque[dict] = deque(maxlen=max_events)
        self._lock = threading.Lock()
        self._seq = 0

    def append(self, event: str, level: str = "info", **details) -> dict:
        with self._lock:
            self._seq += 1
            payload = {
                "id": self._seq,
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
                "level": level,
                "event": event,
                "details": details or {},
            }
            self._events.append(payload)
        log.log(logging.WARNING if level in {"warn", "error"} else logging.DEBUG, "%s %s", event, details)
        return payload

    def history(self, limit: int | None = None) -> List[dict]:
        with self._lock:
            events = list(self._events)
        if limit is None or limit <= 0:
            return events
        return events[-limit:]


def log_event(buffer: LogBuffer, event: str, level: str = "info", **details) -> dict:
    return buffer.append(event, level=level, **details)
