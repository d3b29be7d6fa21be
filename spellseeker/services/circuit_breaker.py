"""
Circuit breaker around the generative tier.

After ``failure_threshold`` consecutive failures the circuit opens and
model calls are skipped until ``reset_seconds`` have passed since the
last failure. The first call after that is a half-open trial: success
closes the circuit, failure re-opens it.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreaker:
    """Consecutive-failure circuit breaker with an injectable clock."""

    failure_threshold: int = 5
    reset_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic

    _failures: int = 0
    _last_failure: float = 0.0
    _open: bool = False
    _lock: Lock = field(default_factory=Lock)

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state()

    def _state(self) -> CircuitState:
        if not self._open:
            return CircuitState.CLOSED
        if self.clock() - self._last_failure >= self.reset_seconds:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    def allow_request(self) -> bool:
        """True unless the circuit is open and still cooling down."""
        with self._lock:
            state = self._state()
            if state == CircuitState.HALF_OPEN:
                logger.info("CIRCUIT_HALF_OPEN", extra={"failures": self._failures})
            return state != CircuitState.OPEN

    def record_success(self) -> None:
        with self._lock:
            if self._open or self._failures:
                logger.info("CIRCUIT_RESET", extra={"failures": self._failures})
            self._failures = 0
            self._open = False

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._last_failure = self.clock()
            if self._failures >= self.failure_threshold and not self._open:
                self._open = True
                logger.warning(
                    "CIRCUIT_OPENED",
                    extra={
                        "failures": self._failures,
                        "reset_seconds": self.reset_seconds,
                    },
                )
