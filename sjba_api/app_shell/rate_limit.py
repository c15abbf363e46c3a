from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Protocol

from sjba_api.rules.models import RateLimitRules


class TimePort(Protocol):
    """Protocol for time operations (enables testing with deterministic time)."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...


class SystemTimeAdapter:
    """Production time adapter using system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass
class _Window:
    started_at: datetime
    count: int = 0


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_seconds: int


class RateLimiter:
    """
    Fixed-window request counter keyed by client.

    Each key gets a window that starts at its first request; the counter
    resets once the window has elapsed.
    """

    def __init__(
        self,
        rules: RateLimitRules,
        time_port: TimePort | None = None,
    ):
        self.rules = rules
        self._time = time_port if time_port is not None else SystemTimeAdapter()
        self._windows: dict[str, _Window] = {}
        self._lock = Lock()

    def _cleanup(self, now: datetime, window: int) -> None:
        cutoff = now - timedelta(seconds=window)
        expired = [k for k, w in self._windows.items() if w.started_at <= cutoff]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str, window: int, limit: int) -> RateLimitDecision:
        """Record one request for ``key`` and report whether it is allowed."""
        with self._lock:
            now = self._time.now()
            self._cleanup(now, window)

            current = self._windows.get(key)
            if current is None:
                current = _Window(started_at=now)
                self._windows[key] = current

            elapsed = (now - current.started_at).total_seconds()
            reset = max(0, int(window - elapsed))

            if limit <= 0 or current.count >= limit:
                return RateLimitDecision(False, limit, 0, reset)

            current.count += 1
            return RateLimitDecision(True, limit, limit - current.count, reset)

    def check_api(self, client_ip: str) -> RateLimitDecision:
        cfg = self.rules.api
        return self.hit(f"api:{client_ip}", cfg.window_seconds, cfg.max_requests)
