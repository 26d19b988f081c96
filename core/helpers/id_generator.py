"""Timestamp based entity ids (``s-1712345678901``, ``q-...``, ``log-...``)."""
from __future__ import annotations

import threading
import time


class IdGenerator:
    """Millisecond ids, strictly increasing within one process."""

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_value(self) -> int:
        with self._lock:
            value = int(self._clock() * 1000)
            if value <= self._last:
                value = self._last + 1
            self._last = value
            return value

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{self.next_value()}"


id_generator = IdGenerator()


def new_id(prefix: str) -> str:
    return id_generator.next_id(prefix)
