"""In-memory sliding-window rate limiting for the simulation endpoint."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable

from fastapi import HTTPException, Request, status

from app.config import settings


class RateLimiter:
    """Allow at most ``max_requests`` per client within ``window_seconds``.

    ``check`` is called from threadpool workers, so all bookkeeping happens
    under a lock.  Clients idle for a whole window are dropped on the next
    sweep.  ``X-Forwarded-For`` is only honoured when ``trust_forwarded`` is
    set, i.e. when the service sits behind a proxy that overwrites it.
    State lives in the process; each worker keeps its own counters.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: int = 60,
        trust_forwarded: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.trust_forwarded = trust_forwarded
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def client_key(self, request: Request) -> str:
        if self.trust_forwarded:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def check(self, request: Request) -> None:
        """Record the request, or raise 429 with a ``Retry-After`` hint."""
        key = self.client_key(request)
        with self._lock:
            now = self._clock()
            cutoff = now - self.window_seconds
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            recent = [t for t in self._requests.get(key, ()) if t > cutoff]
            if len(recent) >= self.max_requests:
                self._requests[key] = recent
                retry_after = max(1, math.ceil(recent[0] + self.window_seconds - now))
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit exceeded. Max {self.max_requests} simulations per {self.window_seconds}s.",
                    headers={"Retry-After": str(retry_after)},
                )
            recent.append(now)
            self._requests[key] = recent

    def _sweep(self, cutoff: float) -> None:
        stale = [key for key, stamps in self._requests.items() if not stamps or stamps[-1] <= cutoff]
        for key in stale:
            del self._requests[key]

    @property
    def tracked_clients(self) -> int:
        return len(self._requests)

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
            self._last_sweep = self._clock()


simulation_limiter = RateLimiter(
    max_requests=settings.simulate_rate_limit,
    window_seconds=settings.simulate_rate_window_seconds,
    trust_forwarded=settings.trust_forwarded_for,
)
