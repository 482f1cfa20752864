"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from issuetrack import __version__
from issuetrack.api.models import HealthCheckResponse
from issuetrack.api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthCheckResponse)
async def health_check(state: AppState = Depends(get_app_state)) -> JSONResponse:
    """
    Report liveness and database connectivity.

    Returns 200 when the database answers ``SELECT 1`` and 503 otherwise.
    """
    try:
        await state.database.ping()
        db_status, status_code = "connected", 200
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        db_status, status_code = "disconnected", 503

    body = HealthCheckResponse(
        status="ok",
        db=db_status,
        version=__version__,
        uptime_seconds=round(state.uptime_seconds, 2),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))
