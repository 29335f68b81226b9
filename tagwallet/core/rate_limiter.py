"""In-process fixed-window limiter for the credential endpoints."""
from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request


class FixedWindowLimiter:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def hit(self, key: str, limit: int, window_seconds: int) -> float:
        """
        Count one request for `key`. Returns 0 when allowed, otherwise the
        seconds left until the window resets.
        """
        if limit <= 0:
            return 0
        now = self._clock()
        with self._lock:
            # Expired windows are dropped so the map only holds active clients.
            self._windows = {k: v for k, v in self._windows.items() if v[1] > now}
            count, resets_at = self._windows.get(key, (0, now + window_seconds))
            count += 1
            self._windows[key] = (count, resets_at)
        return max(resets_at - now, 0.001) if count > limit else 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter = FixedWindowLimiter()


def _client_ip(request: Request, trust_proxy: bool = False) -> str:
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(
    request: Request,
    scope: str,
    *,
    limit: int,
    window_seconds: int,
    trust_proxy: bool = False,
) -> None:
    key = f"{scope}:{_client_ip(request, trust_proxy)}"
    retry_after = _limiter.hit(key, limit, window_seconds)
    if retry_after:
        raise HTTPException(
            429,
            "Too many requests, try again shortly",
            headers={"Retry-After": str(math.ceil(retry_after))},
        )


def reset_rate_limits() -> None:
    _limiter.clear()
