from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(prefix="/api", tags=["health"])

_STARTED = time.monotonic()


class HealthStatus(BaseModel):
    status: str
    timestamp: str
    uptime: float


class ReadinessStatus(BaseModel):
    ready: bool
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    return HealthStatus(
        status="healthy", timestamp=_now(), uptime=time.monotonic() - _STARTED
    )


@router.get("/health/ready", response_model=ReadinessStatus)
async def ready() -> ReadinessStatus:
    return ReadinessStatus(ready=True, timestamp=_now())
