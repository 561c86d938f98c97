# api/utils/rate_limit.py
"""
Rate limiting por janela fixa, em memória do processo, por endereço do cliente.

Políticas (config.py): login 5/15min, troca de senha 3/60min, geral 100/15min.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from functools import wraps
from typing import Callable

from flask import current_app, request

from errors import AppError

logger = logging.getLogger(__name__)

POLICY_CONFIG_KEYS = {
    "login": "RATELIMIT_LOGIN",
    "password_change": "RATELIMIT_PASSWORD_CHANGE",
    "general": "RATELIMIT_GENERAL",
}


class RateLimitExceeded(AppError):
    def __init__(self, retry_after: int):
        super().__init__(
            "Muitas requisições. Tente novamente mais tarde.",
            429,
            "RATE_LIMIT_EXCEEDED",
            {"retry_after": retry_after},
        )
        self.retry_after = retry_after

    @property
    def headers(self) -> dict:
        return {"Retry-After": str(self.retry_after)}


class FixedWindowRateLimiter:
    """
    Contador por chave dentro de uma janela fixa de window_seconds. A janela
    começa no primeiro hit da chave e é zerada quando expira.

    Janelas expiradas são descartadas numa varredura feita no máximo uma vez
    por window_seconds, então a memória acompanha só as chaves recentes.
    """

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        expired = [k for k, (started_at, _) in self._windows.items() if now - started_at >= self.window_seconds]
        for k in expired:
            del self._windows[k]
        self._last_sweep = now
        if expired:
            logger.debug("Rate limiter: %d janelas expiradas removidas", len(expired))

    def hit(self, key: str) -> tuple[bool, int]:
        """Registra um hit. Retorna (permitido, segundos até a janela reabrir)."""
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            started_at, count = self._windows.get(key, (now, 0))
            if now - started_at >= self.window_seconds:
                started_at, count = now, 0

            retry_after = max(1, math.ceil(self.window_seconds - (now - started_at)))
            if count >= self.limit:
                return False, retry_after

            self._windows[key] = (started_at, count + 1)
            return True, retry_after

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


def get_limiter(policy: str) -> FixedWindowRateLimiter:
    app = current_app._get_current_object()
    limiters = app.extensions.setdefault("rate_limiters", {})
    limiter = limiters.get(policy)
    if limiter is None:
        limit, window = app.config[POLICY_CONFIG_KEYS[policy]]
        clock = app.config.get("RATELIMIT_CLOCK") or time.monotonic
        limiter = FixedWindowRateLimiter(limit, window, clock=clock)
        limiters[policy] = limiter
    return limiter


def check_rate_limit(policy: str) -> None:
    if not current_app.config.get("RATELIMIT_ENABLED", True):
        return
    key = request.remote_addr or "unknown"
    allowed, retry_after = get_limiter(policy).hit(key)
    if not allowed:
        logger.warning("Rate limit '%s' excedido para %s em %s", policy, key, request.path)
        raise RateLimitExceeded(retry_after)


def rate_limited(policy: str):
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            check_rate_limit(policy)
            return f(*args, **kwargs)
        return wrapper
    return decorator


def init_rate_limiting(app) -> None:
    """Aplica a política geral a todas as rotas da API."""

    @app.before_request
    def _general_rate_limit():
        if request.path.startswith("/api/"):
            check_rate_limit("general")
