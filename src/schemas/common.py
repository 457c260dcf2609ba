"""Common schemas used across the application."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Response schema for basic health check endpoint.

    Used for liveness probes to verify the service is running.
    """

    model_config = ConfigDict(from_attributes=True)

    status: HealthStatus = Field(description="Current health status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    version: str = Field(default="0.1.0", description="API version")


class CheckResult(BaseModel):
    """Result of an individual dependency check."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(description="Name of the dependency being checked")
    healthy: bool = Field(description="Whether the dependency is healthy")
    latency_ms: float | None = Field(default=None, description="Response time in milliseconds")
    error: str | None = Field(default=None, description="Error message if unhealthy")


class ReadinessResponse(BaseModel):
    """Response schema for readiness check endpoint."""

    model_config = ConfigDict(from_attributes=True)

    status: HealthStatus = Field(description="Overall readiness status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    checks: list[CheckResult] = Field(default_factory=list, description="Individual check results")


class ErrorDetail(BaseModel):
    """A single error message, optionally tied to a request field."""

    model_config = ConfigDict(from_attributes=True)

    msg: str = Field(description="Human-readable error message")
    param: str | None = Field(default=None, description="Request field the error refers to")


class ErrorResponse(BaseModel):
    """Error body for authentication failures: ``{"errors": {"msg": ...}}``."""

    errors: ErrorDetail


class ErrorListResponse(BaseModel):
    """Error body for validation failures: ``{"errors": [...]}``."""

    errors: list[ErrorDetail] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """Plain message body used for not-found results and confirmations."""

    msg: str = Field(description="Human-readable message")
