"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """Basic health check endpoint; reports whether data has finished loading."""
    ready = getattr(request.app.state, "store", None) is not None
    return {
        "status": "healthy" if ready else "loading",
        "timestamp": datetime.now(UTC).isoformat(),
    }
