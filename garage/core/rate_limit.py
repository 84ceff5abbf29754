"""Limiteur de débit en mémoire (par processus, fenêtre fixe par IP)."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request

from garage.core.errors import TooManyRequests


@dataclass
class Window:
    started_at: float
    count: int


class FixedWindowLimiter:
    """
    `max_requests` requêtes par clé et par fenêtre de `window_seconds`.
    La fenêtre démarre à la première requête de la clé. Les fenêtres expirées
    sont purgées au plus une fois par période, pour borner la mémoire.
    """

    def __init__(self, *, window_seconds: float, max_requests: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.window_seconds = max(float(window_seconds), 1.0)
        self.max_requests = max(int(max_requests), 1)
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, Window] = {}
        self._last_sweep = clock()

    def allow(self, key: str) -> tuple[bool, float]:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = Window(started_at=now, count=0)
                self._windows[key] = window
            if window.count < self.max_requests:
                window.count += 1
                return True, 0.0
            retry_after = self.window_seconds - (now - window.started_at)
            return False, max(retry_after, 1.0)

    def _sweep(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for k in expired:
            del self._windows[k]
        self._last_sweep = now

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimit:
    """
    Dépendance FastAPI. Le limiteur est construit à la demande depuis
    `request.app.state.settings`, puis mis en cache sur `app.state`.
    """

    def __init__(self, scope: str, *, max_requests_setting: str):
        self.scope = scope
        self.max_requests_setting = max_requests_setting

    def _limiter(self, request: Request) -> Optional[FixedWindowLimiter]:
        settings = request.app.state.settings
        if not settings.RATE_LIMIT_ENABLED:
            return None
        limiters = request.app.state.rate_limiters
        limiter = limiters.get(self.scope)
        if limiter is None:
            limiter = FixedWindowLimiter(
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
                max_requests=getattr(settings, self.max_requests_setting),
            )
            limiters[self.scope] = limiter
        return limiter

    def __call__(self, request: Request) -> None:
        limiter = self._limiter(request)
        if limiter is None:
            return
        allowed, retry_after = limiter.allow(f"{_client_ip(request)}:{self.scope}")
        if not allowed:
            raise TooManyRequests(headers={"Retry-After": str(int(retry_after))})


global_rate_limit = RateLimit("global", max_requests_setting="RATE_LIMIT_MAX_REQUESTS")
auth_rate_limit = RateLimit("auth", max_requests_setting="AUTH_RATE_LIMIT_MAX_REQUESTS")
