from __future__ import annotations

import functools
import logging
from typing import Annotated, Any

import anyio.to_thread
import httpx
from fastapi import APIRouter, HTTPException, Query

from priority_gate_service.limiter.errors import AdmissionTimedOut
from priority_gate_service.services.gateway import fetch_json, waiter_threads

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1", tags=["upstream"])


@router.get(
    "/upstream/{path:path}",
    summary="Throttled upstream GET",
    description=(
            "Forwards a GET to the guarded upstream API once the shared limiter "
            "admits it and returns the upstream JSON body unchanged."
    ),
    responses={
        429: {"description": "Too many requests (not admitted before the configured timeout)."},
        500: {"description": "Service misconfiguration (e.g. UPSTREAM_USER_AGENT missing)."},
        502: {"description": "Upstream/network error."},
    },
)
async def upstream_get(
        path: str,
        priority: Annotated[
            int | None,
            Query(description="Admission priority; defaults to the baseline priority.", examples=[5]),
        ] = None,
) -> Any:
    logger.info("Request /v1/upstream/%s priority=%s", path, priority)

    try:
        fetch = functools.partial(fetch_json, path, priority=priority)
        return await anyio.to_thread.run_sync(fetch, limiter=waiter_threads())

    except RuntimeError as exc:
        logger.exception("Service misconfiguration in /v1/upstream")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    except AdmissionTimedOut as exc:
        logger.warning("Admission timed out in /v1/upstream path=%s priority=%s", path, priority)
        raise HTTPException(status_code=429, detail="Too many requests") from exc

    except (httpx.HTTPError, ValueError) as exc:
        raise HTTPException(status_code=502, detail="Upstream error") from exc
