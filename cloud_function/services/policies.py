"""
Retry and throttle policies for calls to the AI service.

The two are independent: RetryPolicy decides how long to wait after a
rate-limited attempt, ThrottlePolicy keeps a minimum gap between any two
calls regardless of retry state.
"""
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 0.5
    backoff_multiplier: float = 2.0

    def delay_after(self, attempt: int) -> float:
        """Seconds to wait after failed attempt `attempt` (0-indexed)."""
        return self.base_delay * (self.backoff_multiplier ** attempt)

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts - 1


@dataclass
class ThrottlePolicy:
    """Enforces `min_spacing` seconds between consecutive calls."""
    min_spacing: float = 0.5
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    _last_call: Optional[float] = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def wait(self) -> float:
        """
        Blocks until the spacing since the previous call has elapsed, then
        records the new call time. Returns the seconds slept.
        """
        with self._lock:
            waited = 0.0
            if self._last_call is not None:
                elapsed = self.clock() - self._last_call
                if elapsed < self.min_spacing:
                    waited = self.min_spacing - elapsed
                    self.sleep(waited)
            self._last_call = self.clock()
            return waited
