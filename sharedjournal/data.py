"""
Pydantic schemas for the shared journals HTTP API
"""
from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Schema for health check response.
    """

    success: bool = True
    status: str
    timestamp: datetime
    service: str
    version: str


class VersionResponse(BaseModel):
    """
    Schema for responses on /version endpoint.
    """

    version: str

