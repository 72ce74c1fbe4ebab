"""
In-process fixed-window rate limiting.

Counters live in memory and reset on restart; a multi-instance deployment
gets one budget per process.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

_CLEANUP_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class RateLimitConfig:
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int
    reset_at: float

    def retry_after_seconds(self, now: Optional[float] = None) -> int:
        current = time.time() if now is None else now
        return max(1, int(round(self.reset_at - current)))


class RATE_LIMITS:
    # Public form submissions per IP
    FORM_SUBMIT = RateLimitConfig(limit=5, window_seconds=60)
    SUBSCRIBE = RateLimitConfig(limit=3, window_seconds=60)
    CONTACT = RateLimitConfig(limit=3, window_seconds=5 * 60)
    POPUP = RateLimitConfig(limit=5, window_seconds=60)
    # Admin API per session
    ADMIN = RateLimitConfig(limit=100, window_seconds=60)
    ADMIN_WRITE = RateLimitConfig(limit=30, window_seconds=60)


@dataclass
class _Record:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window counter keyed by an arbitrary string."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._records: Dict[str, _Record] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def hit(self, key: str, limit: int, window_seconds: float) -> RateLimitResult:
        now = self._clock()
        with self._lock:
            self._maybe_cleanup(now)
            record = self._records.get(key)
            if record is None or now > record.reset_at:
                reset_at = now + window_seconds
                self._records[key] = _Record(count=1, reset_at=reset_at)
                return RateLimitResult(success=True, remaining=limit - 1, reset_at=reset_at)
            if record.count >= limit:
                return RateLimitResult(success=False, remaining=0, reset_at=record.reset_at)
            record.count += 1
            return RateLimitResult(success=True, remaining=limit - record.count, reset_at=record.reset_at)

    def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        return self.hit(key, config.limit, config.window_seconds)

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup < _CLEANUP_INTERVAL_SECONDS:
            return
        expired = [key for key, record in self._records.items() if now > record.reset_at]
        for key in expired:
            del self._records[key]
        self._last_cleanup = now

    def __len__(self) -> int:
        return len(self._records)

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
            self._last_cleanup = self._clock()


limiter = RateLimiter()


def rate_limit(key: str, limit: int, window_seconds: float) -> RateLimitResult:
    return limiter.hit(key, limit, window_seconds)


def admin_rate_limit(session_id: str, is_write_operation: bool = False) -> RateLimitResult:
    """Admin budgets are keyed by session rather than IP."""
    config = RATE_LIMITS.ADMIN_WRITE if is_write_operation else RATE_LIMITS.ADMIN
    key = f"admin:{'write' if is_write_operation else 'read'}:{session_id}"
    return limiter.check(key, config)


def get_client_ip(headers, fallback: Optional[str] = None) -> str:
    """Resolve the caller IP from proxy headers (first hop wins)."""
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip
    cf_ip = headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip
    return fallback or "unknown"
