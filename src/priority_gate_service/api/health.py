import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field

from priority_gate_service.services.gateway import get_limiter

logger = logging.getLogger(__name__)
router = APIRouter(tags=["service"])


class HealthResponse(BaseModel):
    status: str = Field(
        ...,
        json_schema_extra={"example": "ok"},
    )


class HealthLimiterResponse(BaseModel):
    status: str = Field(..., json_schema_extra={"example": "ok"})
    saturated: bool = Field(
        ...,
        description="True when the current window has no free admissions left.",
        json_schema_extra={"example": False},
    )


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/health/limiter",
    response_model=HealthLimiterResponse,
    summary="Limiter health",
    description="Reports whether the shared limiter still has capacity in the current window.",
)
async def health_limiter() -> HealthLimiterResponse:
    snap = get_limiter().snapshot()
    return HealthLimiterResponse(
        status="ok",
        saturated=snap.admitted_count >= snap.throughput,
    )
