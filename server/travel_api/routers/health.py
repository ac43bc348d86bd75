"""RPC-style liveness ping."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.observability import SERVICE_VERSION
from ..schemas.health import HealthStatus, PingResponse, WorkerState
from ..workers.manager import worker_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/health", tags=["health"])


def _configured(enabled: bool) -> str:
    return "configured" if enabled else "not_configured"


@router.post("/ping", response_model=PingResponse)
async def health_ping() -> JSONResponse:
    """Report liveness, the configured integrations and background worker state."""
    response_data = PingResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.now(timezone.utc),
        version=SERVICE_VERSION,
        payments=_configured(settings.payments_enabled),
        email=_configured(settings.email_enabled),
        token_store=settings.token_store_backend,
        workers={
            name: WorkerState(**state)
            for name, state in worker_manager.describe().items()
        },
    )

    logger.debug(
        "Health ping",
        extra={
            "payments": response_data.payments,
            "email": response_data.email,
            "workers_running": sum(w.running for w in response_data.workers.values())
        }
    )

    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json", by_alias=True)
    )
