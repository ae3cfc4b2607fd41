from __future__ import annotations

import logging
import threading
from typing import Any

import anyio
import httpx

from priority_gate_service.core.config import get_settings
from priority_gate_service.limiter.rate_limiter import PriorityRateLimiter
from priority_gate_service.services.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)

_limiter_lock = threading.Lock()
_limiter: PriorityRateLimiter | None = None
_limiter_cfg: tuple[int, float | None, float, int] | None = None
_waiters: anyio.CapacityLimiter | None = None


def reset_limiter() -> None:
    """
    Test helper. Drops the shared limiter so the next call rebuilds it from settings.
    """
    global _limiter, _limiter_cfg, _waiters
    with _limiter_lock:
        _limiter = None
        _limiter_cfg = None
        _waiters = None


def waiter_threads() -> anyio.CapacityLimiter:
    """
    Worker-thread budget for HTTP callers blocked in acquire().

    Kept apart from the default thread pool so blocked admissions never hold
    the threads other handlers run on. Must be called from the event loop.
    """
    total = get_settings().gate_http_waiters

    global _waiters
    with _limiter_lock:
        if _waiters is None or _waiters.total_tokens != total:
            _waiters = anyio.CapacityLimiter(total)
        return _waiters


def get_limiter() -> PriorityRateLimiter:
    """
    Process-wide limiter guarding the upstream.

    Rebuilt only when the GATE_* settings change; values tuned at runtime
    through adjust_limit()/adjust_timeout() survive until then.
    """
    settings = get_settings()
    cfg = (
        settings.gate_throughput,
        settings.gate_timeout_s,
        settings.gate_window_s,
        settings.gate_baseline_priority,
    )

    global _limiter, _limiter_cfg
    with _limiter_lock:
        if _limiter is None or _limiter_cfg != cfg:
            throughput, timeout_s, window_s, baseline = cfg
            logger.info(
                "Building limiter throughput=%s timeout_s=%s window_s=%s baseline=%s",
                throughput,
                timeout_s,
                window_s,
                baseline,
            )
            _limiter = PriorityRateLimiter(
                throughput,
                timeout_s,
                window_s=window_s,
                baseline_priority=baseline,
            )
            _limiter_cfg = cfg
        return _limiter


def fetch_json(path: str, *, priority: int | None = None, params: dict[str, str] | None = None) -> Any:
    """
    GET an upstream JSON resource once the shared limiter admits the call.

    AdmissionTimedOut propagates to the caller; so do httpx errors.
    """
    client = UpstreamClient()
    get_limiter().acquire(priority)

    try:
        return client.get_json(path, params=params).data
    except (httpx.HTTPError, ValueError):
        logger.exception("Upstream failure path=%s priority=%s", path, priority)
        raise
