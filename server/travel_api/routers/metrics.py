"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Depends, Response

from ..core.observability import get_prometheus_metrics, metrics_collector
from ..core.tokens import TokenStore, get_token_store

router = APIRouter()


@router.get(
    "/metrics",
    summary="Prometheus Metrics",
    description="Endpoint for Prometheus to scrape metrics",
    response_class=Response,
    tags=["Observability"]
)
async def metrics(token_store: TokenStore = Depends(get_token_store)):
    """
    Render every registered metric in the text exposition format.

    The live-token gauge is refreshed on each scrape so it does not lag a
    full sweep interval behind logins and logouts.
    """
    metrics_collector.set_active_tokens(await token_store.count())
    return Response(
        content=get_prometheus_metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )
