"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes dialogue_transitions_total{flow, outcome},
    dialogue_rejections_total{flow, step, reason},
    search_requests_total{kind, outcome} and search_latency_ms{kind},
    plus the store and notification failure counters.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
