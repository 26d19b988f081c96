"""
core/common/latency.py
======================

Operation latency. Handlers call ``pause(operation)`` once before they act;
the call blocks synchronously and cannot be cancelled. Production wiring uses
``NoLatency`` unless ``[Workflow] simulate_latency`` is enabled.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class OperationLatency(Protocol):
    def pause(self, operation: str) -> None:
        ...


class NoLatency:
    """Completes every operation immediately."""

    def pause(self, operation: str) -> None:
        return None


class SimulatedLatency:
    """Sleeps a fixed number of milliseconds per operation."""

    def __init__(
        self,
        default_ms: int = 800,
        overrides: Optional[Mapping[str, int]] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if default_ms < 0:
            raise ValueError("default_ms must not be negative")
        self._default_ms = default_ms
        self._overrides: Dict[str, int] = dict(overrides or {})
        self._sleep = sleep

    def delay_ms(self, operation: str) -> int:
        return self._overrides.get(operation, self._default_ms)

    def pause(self, operation: str) -> None:
        ms = self.delay_ms(operation)
        logger.debug("simulated latency %s: %d ms", operation, ms)
        if ms:
            self._sleep(ms / 1000.0)
