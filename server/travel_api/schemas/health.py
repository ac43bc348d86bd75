"""Schemas for the RPC-style liveness ping."""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import Field

from .common import CamelModel


class HealthStatus(str, Enum):
    HEALTHY = "healthy"


class WorkerState(CamelModel):
    """Snapshot of one background worker."""

    running: bool
    iterations: int = 0
    failures: int = 0
    last_run_at: Optional[datetime] = None
    last_error: Optional[str] = None


class PingResponse(CamelModel):
    """
    Liveness answer plus the integrations this instance was started with.

    ``status`` only says the process is serving requests; readiness (database
    reachability) lives at ``/ready``.
    """

    status: HealthStatus = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current server time (ISO 8601)")
    version: str = Field(..., description="API version")
    payments: str = Field(..., description="configured or not_configured")
    email: str = Field(..., description="configured or not_configured")
    token_store: str = Field(..., description="Bearer token backend")
    workers: Dict[str, WorkerState] = Field(default_factory=dict)
