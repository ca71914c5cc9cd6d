"""
Request guards for the stream-avatar service: an optional shared API key and
a per-client-IP rate limit.
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Header, HTTPException, Request

from .config import settings


@dataclass
class _Allowance:
    tokens: float
    seen: float


class TokenBucket:
    """
    In-memory token bucket keyed by client IP.

    A client idle for ``burst / rps`` seconds is back at a full bucket, so its
    entry carries no information and is dropped on the next sweep. Sweeps run
    at most once per ``sweep_every`` seconds from inside ``allow``.
    """

    def __init__(
        self,
        rps: float,
        burst: int,
        sweep_every: float = 60.0,
    ):
        self.rps = max(rps, 0.1)
        self.burst = float(max(burst, 1))
        self.sweep_every = sweep_every
        self.clients: Dict[str, _Allowance] = {}
        self._last_sweep = time.time()

    @property
    def refill_seconds(self) -> float:
        return self.burst / self.rps

    def allow(self, key: str) -> bool:
        now = time.time()
        if now - self._last_sweep >= self.sweep_every:
            self.prune(now)

        entry = self.clients.get(key)
        if entry is None:
            entry = self.clients[key] = _Allowance(tokens=self.burst, seen=now)
        else:
            entry.tokens = min(self.burst, entry.tokens + (now - entry.seen) * self.rps)
            entry.seen = now

        if entry.tokens < 1.0:
            return False
        entry.tokens -= 1.0
        return True

    def prune(self, now: Optional[float] = None) -> int:
        """Forget clients whose bucket has refilled; returns how many were dropped."""
        now = time.time() if now is None else now
        idle = [k for k, e in self.clients.items() if now - e.seen >= self.refill_seconds]
        for k in idle:
            del self.clients[k]
        self._last_sweep = now
        return len(idle)


bucket = TokenBucket(settings.RATE_LIMIT_RPS, settings.RATE_LIMIT_BURST)


def require_api_key(x_api_key: Optional[str]) -> None:
    """401 unless the configured key (if any) was sent."""
    if settings.STREAM_AVATAR_API_KEY and x_api_key != settings.STREAM_AVATAR_API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


async def enforce_security(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> None:
    """
    Dependency for every /v1 route.

    Raises:
        HTTPException: 401 for a bad API key, 429 when the client IP is over its limit
    """
    require_api_key(x_api_key)

    client_ip = request.client.host if request.client else "unknown"
    if not bucket.allow(client_ip):
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
