"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - checkout_transitions_total{from_step, to_step}
    - checkout_blocked_transitions_total{step, code}
    - reservation_submissions_total{outcome}
    - reservation_submission_latency_ms{outcome}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
