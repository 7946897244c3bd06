"""Pydantic models for the HTTP API."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class WebhookAck(BaseModel):
    """Acknowledgement of a webhook delivery."""

    event: str
    action: str | None = None
    accepted: bool


class DispatchStatsResponse(BaseModel):
    """Response model for event dispatcher counters."""

    model_config = ConfigDict(from_attributes=True)

    submitted: int
    succeeded: int
    failed: int
    timed_out: int
    rejected: int
    pending: int
