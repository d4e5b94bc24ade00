"""Bulk search API endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import StoreDep
from contribution_search.bulk import BulkSearchOrchestrator, clean_names
from contribution_search.filters import SearchFilters

router = APIRouter(tags=["bulk-search"])


class BulkFilters(BaseModel):
    """Filters shared by every name in a bulk request."""

    model_config = ConfigDict(populate_by_name=True)

    city: str | None = None
    state: str | None = None
    # Left loose so malformed bounds reach the engine's own validation
    min_amount: float | str | None = Field(default=None, alias="minAmount")
    max_amount: float | str | None = Field(default=None, alias="maxAmount")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    fuzzy: bool = False


class BulkSearchRequest(BaseModel):
    names: list[str] | None = None
    filters: BulkFilters = Field(default_factory=BulkFilters)


@router.post("/bulk-search")
def bulk_search(store: StoreDep, body: BulkSearchRequest) -> dict:
    """Search up to 1,000 names at once and cache the matches for export."""
    names = clean_names(body.names)
    filters = SearchFilters.from_params(body.filters.model_dump(exclude={"fuzzy"}))
    orchestrator = BulkSearchOrchestrator(store.index, store.cache)
    return orchestrator.run(names, filters, fuzzy=body.filters.fuzzy).to_dict()
