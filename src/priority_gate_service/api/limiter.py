from __future__ import annotations

import logging
import time
from typing import Annotated

import anyio.to_thread
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from priority_gate_service.limiter.errors import AdmissionTimedOut
from priority_gate_service.limiter.rate_limiter import LimiterSnapshot
from priority_gate_service.services.gateway import get_limiter, waiter_threads

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/limiter", tags=["limiter"])


class LimiterState(BaseModel):
    throughput: int = Field(
        ...,
        description="Maximum admissions per window.",
        json_schema_extra={"example": 10},
    )
    timeout_s: float | None = Field(
        ...,
        description="Maximum time a single acquire may block; null waits indefinitely.",
        json_schema_extra={"example": 5.0},
    )
    window_s: float = Field(..., json_schema_extra={"example": 1.0})
    admitted_count: int = Field(
        ...,
        description="Admissions granted in the current window.",
        json_schema_extra={"example": 3},
    )
    pending_count: int = Field(
        ...,
        description="Callers currently blocked waiting for admission.",
        json_schema_extra={"example": 0},
    )


class ThroughputUpdate(BaseModel):
    throughput: int = Field(..., ge=0, json_schema_extra={"example": 20})


class TimeoutUpdate(BaseModel):
    timeout_s: float | None = Field(..., gt=0, json_schema_extra={"example": 2.5})


class AcquireResponse(BaseModel):
    admitted: bool
    priority: int
    waited_s: float


def _state(snap: LimiterSnapshot) -> LimiterState:
    return LimiterState(
        throughput=snap.throughput,
        timeout_s=snap.timeout_s,
        window_s=snap.window_s,
        admitted_count=snap.admitted_count,
        pending_count=snap.pending_count,
    )


@router.get("", response_model=LimiterState, summary="Current limiter state")
async def limiter_state() -> LimiterState:
    return _state(get_limiter().snapshot())


@router.put("/throughput", response_model=LimiterState, summary="Set admissions per window")
async def update_throughput(body: ThroughputUpdate) -> LimiterState:
    logger.info("Request PUT /v1/limiter/throughput throughput=%s", body.throughput)
    limiter = get_limiter()
    limiter.adjust_limit(body.throughput)
    return _state(limiter.snapshot())


@router.put("/timeout", response_model=LimiterState, summary="Set per-call acquire timeout")
async def update_timeout(body: TimeoutUpdate) -> LimiterState:
    logger.info("Request PUT /v1/limiter/timeout timeout_s=%s", body.timeout_s)
    limiter = get_limiter()
    limiter.adjust_timeout(body.timeout_s)
    return _state(limiter.snapshot())


@router.post(
    "/acquire",
    response_model=AcquireResponse,
    summary="Wait for one admission",
    description=(
            "Blocks until the shared limiter admits the call. "
            "Higher priority values are admitted first when capacity is scarce."
    ),
    responses={
        429: {"description": "Too many requests (not admitted before the configured timeout)."},
    },
)
async def acquire(
        priority: Annotated[
            int | None,
            Query(description="Admission priority; defaults to the baseline priority.", examples=[5]),
        ] = None,
) -> AcquireResponse:
    limiter = get_limiter()
    if priority is None:
        priority = limiter.baseline_priority

    started = time.monotonic()
    try:
        await anyio.to_thread.run_sync(limiter.acquire, priority, limiter=waiter_threads())
    except AdmissionTimedOut as exc:
        logger.warning("Admission timed out in /v1/limiter/acquire priority=%s", priority)
        raise HTTPException(status_code=429, detail="Too many requests") from exc

    return AcquireResponse(
        admitted=True,
        priority=priority,
        waited_s=round(time.monotonic() - started, 6),
    )
