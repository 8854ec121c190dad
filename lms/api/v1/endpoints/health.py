"""Health check endpoint. Used for liveness probes; reports cache reachability."""

from fastapi import APIRouter, Request

from lms.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok plus the cache state. The service stays healthy with the cache down."""
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        return HealthResponse(cache="disabled")
    return HealthResponse(cache="up" if cache.is_available() else "down")
