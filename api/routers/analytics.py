"""Analytics API endpoints."""

from fastapi import APIRouter

from api.dependencies import StoreDep
from contribution_search.analytics import compute_analytics

router = APIRouter(tags=["analytics"])


@router.get("/analytics")
def get_analytics(store: StoreDep) -> dict:
    """Aggregated statistics over the entire dataset."""
    return compute_analytics(store.records).to_dict()
