# backend/app/schemas/main_responses.py
"""Responses for root-level endpoints."""

from ._strict_base import StrictModel


class HealthResponse(StrictModel):
    status: str
    service: str
    version: str
    environment: str
    timestamp: str
    database: str
