"""Prometheus metrics endpoint."""
from fastapi import APIRouter, Response

from issuetrack.utils.observability import get_metrics, get_metrics_content_type

router = APIRouter(tags=["metrics"])


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics for monitoring and alerting",
)
async def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Metrics categories:
    - Domain: issues created, creation rollbacks, authorization denials
    - HTTP: request counts, durations by endpoint

    Returns:
        Prometheus metrics in text format
    """
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
