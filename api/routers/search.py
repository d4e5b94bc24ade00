"""Single-name search API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from api.dependencies import StoreDep
from contribution_search.filters import SearchFilters
from contribution_search.search import search_contributions

router = APIRouter(tags=["search"])


def is_truthy(value: str | None) -> bool:
    """Query-string flag parsing: "1" and "true" enable."""
    return (value or "").strip().lower() in ("1", "true")


@router.get("/search")
def search(
    store: StoreDep,
    name: str | None = None,
    fuzzy: str | None = None,
    city: str | None = None,
    state: str | None = None,
    min_amount: Annotated[str | None, Query(alias="minAmount")] = None,
    max_amount: Annotated[str | None, Query(alias="maxAmount")] = None,
    start_date: Annotated[str | None, Query(alias="startDate")] = None,
    end_date: Annotated[str | None, Query(alias="endDate")] = None,
    limit: int | None = None,
    offset: int | None = None,
) -> dict:
    """Search contributions by contributor name with optional filters."""
    filters = SearchFilters.from_params(
        {
            "city": city,
            "state": state,
            "min_amount": min_amount,
            "max_amount": max_amount,
            "start_date": start_date,
            "end_date": end_date,
        }
    )
    result = search_contributions(
        store.index,
        name,
        filters=filters,
        fuzzy=is_truthy(fuzzy),
        limit=limit,
        offset=offset,
    )
    return result.to_dict()


@router.get("/search/stats")
def search_stats(store: StoreDep) -> dict:
    """Summary statistics for the loaded dataset."""
    return store.stats.to_dict()
