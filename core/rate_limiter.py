# core/rate_limiter.py

from typing import Dict, Optional, Tuple
from threading import Lock
import time

from fastapi import HTTPException, Request


# In-memory sliding window, per process.
# Keys look like "login:user:alice@example.com".
_rate_limit_store: Dict[str, list] = {}
_key_windows: Dict[str, int] = {}
_lock = Lock()
_last_sweep = 0.0

# Idle keys are dropped at most this often
SWEEP_INTERVAL_SECONDS = 60


def _sweep_expired(now: float):
    """Forget keys whose newest hit has left its window. Caller holds the lock."""
    global _last_sweep
    if now - _last_sweep < SWEEP_INTERVAL_SECONDS:
        return
    _last_sweep = now

    for key, hits in list(_rate_limit_store.items()):
        if not hits or hits[-1] <= now - _key_windows.get(key, 0):
            del _rate_limit_store[key]
            _key_windows.pop(key, None)


def check_rate_limit(key: str, max_requests: int, window_seconds: int) -> Tuple[bool, int]:
    """
    Record one hit for `key` and report whether it is within the limit.

    Returns:
        Tuple of (allowed, remaining)
    """
    now = time.time()
    window_start = now - window_seconds

    with _lock:
        _sweep_expired(now)

        hits = [ts for ts in _rate_limit_store.get(key, []) if ts > window_start]
        _key_windows[key] = window_seconds

        if len(hits) >= max_requests:
            _rate_limit_store[key] = hits
            return False, 0

        hits.append(now)
        _rate_limit_store[key] = hits
        return True, max_requests - len(hits)


def get_rate_limit_identifier(request: Request, user_id: Optional[str] = None) -> str:
    """Prefer the (normalized) account identifier, otherwise the client IP."""
    if user_id:
        return f"user:{user_id}"

    client_ip = request.client.host if request.client else "unknown"

    # Behind a proxy the first forwarded address is the real client
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()

    return f"ip:{client_ip}"


def require_rate_limit(
    request: Request,
    scope: str,
    identifier: Optional[str] = None,
    max_requests: int = 10,
    window_seconds: int = 60,
) -> int:
    """
    Raise 429 once `identifier` exceeds `max_requests` within the window.
    Different scopes (login, password_reset) are counted separately.
    """
    if identifier is None:
        identifier = get_rate_limit_identifier(request)

    allowed, remaining = check_rate_limit(f"{scope}:{identifier}", max_requests, window_seconds)

    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds.",
            headers={
                "X-RateLimit-Limit": str(max_requests),
                "X-RateLimit-Window": str(window_seconds),
                "Retry-After": str(window_seconds),
            },
        )

    return remaining


def reset_rate_limits():
    global _last_sweep
    with _lock:
        _rate_limit_store.clear()
        _key_windows.clear()
        _last_sweep = 0.0
