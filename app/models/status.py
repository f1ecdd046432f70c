"""Pydantic models for the status and health endpoints."""

from pydantic import BaseModel
from typing import List, Literal


class ServiceStatus(BaseModel):
    """Payload of the root status endpoint."""

    status: str
    service: str
    timestamp: str
    openrouter: Literal["configured", "not_configured"]
    endpoints: List[str]


class HealthStatus(BaseModel):
    status: str = "healthy"
    service: str
    timestamp: str
    openrouter: Literal["configured", "not_configured"]
