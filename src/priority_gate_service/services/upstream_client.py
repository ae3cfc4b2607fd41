from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from priority_gate_service.core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    data: Any


class UpstreamClient:
    """
    Thin client for the guarded upstream API. Callers throttle it through the gateway.
    """

    def __init__(self) -> None:
        settings = get_settings()

        if not settings.upstream_user_agent:
            raise RuntimeError("UPSTREAM_USER_AGENT is not set.")

        self._base_url = settings.upstream_base_url.rstrip("/")
        self._timeout = httpx.Timeout(
            settings.read_timeout_s,
            connect=settings.connect_timeout_s,
        )
        self._headers = {
            "User-Agent": settings.upstream_user_agent,
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
        }

    def get_json(self, path: str, *, params: dict[str, str] | None = None) -> UpstreamResponse:
        url = f"{self._base_url}/{path.lstrip('/')}"

        logger.info("Upstream request: %s params=%s", url, params)

        with httpx.Client(
                headers=self._headers,
                timeout=self._timeout,
                follow_redirects=True,
        ) as client:
            resp = client.get(url, params=params)

        logger.info("Upstream response: status=%s", resp.status_code)
        resp.raise_for_status()

        # invalid JSON surfaces as ValueError
        return UpstreamResponse(status_code=resp.status_code, data=resp.json())
