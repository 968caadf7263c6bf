"""Fixed-window request limiter."""
import time
from typing import Callable, Dict, Tuple


class FixedWindowRateLimiter:
    """Allow at most ``max_requests`` per ``window_seconds`` for each key."""

    def __init__(
        self,
        max_requests: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}

    def allow(self, key: str) -> bool:
        now = self._clock()
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0
        if count >= self.max_requests:
            self._windows[key] = (start, count)
            return False
        self._windows[key] = (start, count + 1)
        self._prune(now)
        return True

    def retry_after(self, key: str) -> int:
        """Seconds until ``key`` gets a fresh window."""
        start, _ = self._windows.get(key, (self._clock(), 0))
        remaining = self.window_seconds - (self._clock() - start)
        return max(1, int(remaining + 0.999))

    def _prune(self, now: float) -> None:
        if len(self._windows) < 1024:
            return
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for k in expired:
            del self._windows[k]

    def reset(self) -> None:
        self._windows.clear()
