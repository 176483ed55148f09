# bookdigest/api/routes/health.py
"""Liveness endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from bookdigest.api.models.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the service is up, with the current server time."""
    now = datetime.now(timezone.utc).replace(microsecond=0)
    return HealthResponse(status="ok", time=now.isoformat())
