"""CSV export API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, Response

from api.dependencies import StoreDep
from contribution_search.exporter import (
    FILTERED_EXPORT_FILENAME,
    bulk_export_filename,
    export_cached,
    export_filtered,
)
from contribution_search.filters import SearchFilters

router = APIRouter(tags=["export"])


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export")
def export_contributions(
    store: StoreDep,
    name: str | None = None,
    city: str | None = None,
    state: str | None = None,
    min_amount: Annotated[str | None, Query(alias="minAmount")] = None,
    max_amount: Annotated[str | None, Query(alias="maxAmount")] = None,
    start_date: Annotated[str | None, Query(alias="startDate")] = None,
    end_date: Annotated[str | None, Query(alias="endDate")] = None,
) -> Response:
    """Export every contribution matching the name and filters as CSV."""
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
    return csv_response(export_filtered(store.index, name, filters), FILTERED_EXPORT_FILENAME)


@router.get("/export/{search_id}")
def export_bulk_results(store: StoreDep, search_id: str) -> Response:
    """Export a cached bulk search as CSV; 404 once the results have expired."""
    return csv_response(export_cached(store.cache, search_id), bulk_export_filename(search_id))
