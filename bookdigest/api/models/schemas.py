# bookdigest/api/models/schemas.py
"""Pydantic models for API responses."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service liveness."""

    status: str = Field("ok", description="Always 'ok' while the service is up")
    time: str = Field(..., description="Server time, ISO-8601 with UTC offset")


class ConvertResponse(BaseModel):
    """Result of converting an e-book into chapters."""

    chapters: List[str] = Field(default_factory=list, description="Chapter texts in reading order")
    toc: List[str] = Field(default_factory=list, description="Table of contents labels")
