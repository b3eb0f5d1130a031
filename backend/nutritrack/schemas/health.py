"""
NutriTrack Backend — Health Response Schema
============================================

What:  Body of GET /health.
Why:   A backend that cannot reach Firestore is down for every endpoint, so
       the probe reports store connectivity alongside process uptime.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    document_store: str = Field(description="Firestore connectivity: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the process started")
