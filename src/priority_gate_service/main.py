from fastapi import FastAPI

from priority_gate_service.api.health import router as health_router
from priority_gate_service.api.limiter import router as limiter_router
from priority_gate_service.api.upstream import router as upstream_router
from priority_gate_service.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title="Priority Gate Service",
    version="0.1.0",
    description="Priority-aware rate limiter guarding calls to a downstream API.",
)
app.include_router(health_router)
app.include_router(limiter_router)
app.include_router(upstream_router)
