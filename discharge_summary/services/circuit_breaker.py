from enum import Enum
from typing import Callable
import logging
import time

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"  # Remote calls allowed
    OPEN = "open"  # Remote calls skipped
    HALF_OPEN = "half_open"  # Next call is a trial


class CircuitBreaker:
    """Process-wide guard around the remote inference API.

    After `failure_threshold` consecutive failures the breaker opens and
    callers go straight to the local fallback. Once `recovery_timeout_seconds`
    have passed, one trial call is let through: success closes the breaker,
    failure opens it again for another full interval.

    State is shared by concurrent requests without locking; two requests
    recording a failure at once only costs a redundant remote call.
    """

    def __init__(
        self,
        failure_threshold: int = 1,
        recovery_timeout_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        if recovery_timeout_seconds < 0:
            raise ValueError("recovery_timeout_seconds must not be negative")

        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout_seconds
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at = 0.0

    @property
    def state(self) -> CircuitState:
        if self._state == CircuitState.OPEN:
            elapsed = self._clock() - self._opened_at
            if elapsed >= self.recovery_timeout:
                self._state = CircuitState.HALF_OPEN
                logger.info("Circuit breaker -> HALF_OPEN (recovery timeout elapsed)")
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def retry_after(self) -> float:
        """Seconds until a trial call is allowed; 0 when calls are allowed now."""
        if self.state != CircuitState.OPEN:
            return 0.0
        return max(0.0, self.recovery_timeout - (self._clock() - self._opened_at))

    def allow_request(self) -> bool:
        return self.state != CircuitState.OPEN

    def record_success(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker -> CLOSED (trial call succeeded)")
        self._failure_count = 0
        self._state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self._failure_count += 1
        if (
            self.state == CircuitState.HALF_OPEN
            or self._failure_count >= self.failure_threshold
        ):
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
            logger.warning(
                f"Circuit breaker -> OPEN after {self._failure_count} failure(s); "
                f"retrying in {self.recovery_timeout}s"
            )

    def reset(self) -> None:
        """Manually reset the circuit breaker to CLOSED."""
        self._failure_count = 0
        self._opened_at = 0.0
        self._state = CircuitState.CLOSED
