# ensport_backend/core/rate_limit.py
# Sliding-window rate limiting behind a swappable store

import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from fastapi import Depends, HTTPException, Request

from ensport_backend.core.config import RATE_LIMITS


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float   # Epoch seconds


class RateLimitStore(Protocol):
    """Anything that can count hits per key over a sliding window (memory, Redis, ...)."""

    def hit(self, key: str, max_requests: int, window_seconds: float,
            now: Optional[float] = None) -> RateLimitResult:
        ...


class InMemoryRateLimitStore:
    """Per-process store. One lock guards the whole map."""

    def __init__(self):
        self._hits: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, max_requests: int, window_seconds: float,
            now: Optional[float] = None) -> RateLimitResult:
        now = time.time() if now is None else now
        window_start = now - window_seconds

        with self._lock:
            # Drop hits older than the window
            hits = [t for t in self._hits.get(key, []) if t > window_start]
            allowed = len(hits) < max_requests
            if allowed:
                hits.append(now)
            self._hits[key] = hits
            remaining = max(0, max_requests - len(hits))

        return RateLimitResult(allowed=allowed, remaining=remaining, reset_at=now + window_seconds)

    def reset(self):
        with self._lock:
            self._hits.clear()


_default_store = InMemoryRateLimitStore()


def get_rate_limit_store() -> RateLimitStore:
    """FastAPI dependency: swap this out for a shared store when running several instances."""
    return _default_store


def client_address(request: Request) -> str:
    """Best guess at the caller's address, honouring the usual proxy headers."""
    for header in ("x-forwarded-for", "x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def rate_limit(config_name: str):
    """
    Build a dependency enforcing RATE_LIMITS[config_name] per client address and path.
    Each limit counts in its own bucket, so a route can carry "general" and a stricter one.
    Rejected calls get a 429 with Retry-After and X-RateLimit-* headers.
    """
    config = RATE_LIMITS[config_name]

    def dependency(request: Request, store: RateLimitStore = Depends(get_rate_limit_store)):
        key = f"{config_name}:{client_address(request)}:{request.url.path}"
        result = store.hit(key, config["max"], config["window_seconds"])
        if not result.allowed:
            raise HTTPException(
                status_code=429,
                detail="Too many requests",
                headers={
                    "X-RateLimit-Limit": str(config["max"]),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(int(result.reset_at)),
                    "Retry-After": str(int(config["window_seconds"])),
                },
            )
        return result

    return dependency
