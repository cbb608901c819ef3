"""Circuit breaker guarding the remote embedding provider."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CircuitBreaker:
    """Stops calling a failing service for a while.

    ``max_failures`` failures inside ``window_seconds`` open the circuit;
    after ``cooldown_seconds`` one trial call is let through (half-open)
    and its outcome closes or re-opens it.
    """

    def __init__(
        self,
        name: str = "remote",
        max_failures: int = 3,
        window_seconds: float = 60.0,
        cooldown_seconds: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._failures: list[float] = []
        self._opened_at: float | None = None
        self._trial = False

    @property
    def state(self) -> str:
        if self._opened_at is None:
            return "closed"
        if self._clock() - self._opened_at >= self.cooldown_seconds:
            return "half_open"
        return "open"

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        self._failures = [t for t in self._failures if t >= cutoff]

    def allow_call(self) -> bool:
        state = self.state
        if state == "open":
            return False
        if state == "half_open":
            if self._trial:
                return False
            self._trial = True
        return True

    def record_success(self) -> None:
        if self._opened_at is not None:
            logger.info("Circuit %s closed", self.name)
        self._failures.clear()
        self._opened_at = None
        self._trial = False

    def record_failure(self) -> None:
        now = self._clock()
        if self._trial:
            # Trial call failed; start a fresh cooldown
            self._opened_at = now
            self._trial = False
            logger.warning("Circuit %s re-opened after trial failure", self.name)
            return
        self._prune(now)
        self._failures.append(now)
        if self._opened_at is None and len(self._failures) >= self.max_failures:
            self._opened_at = now
            logger.warning(
                "Circuit %s opened after %d failures in %.0fs",
                self.name,
                len(self._failures),
                self.window_seconds,
            )

    def status(self) -> dict:
        self._prune(self._clock())
        return {
            "name": self.name,
            "state": self.state,
            "recent_failures": len(self._failures),
            "max_failures": self.max_failures,
        }
