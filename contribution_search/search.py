"""Single-name contribution search with filtering and pagination."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .filters import SearchFilters
from .index import SearchIndex
from .schema import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Contribution

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """One page of matched contributions plus the pre-pagination total."""

    contributions: list[Contribution] = field(default_factory=list)
    total: int = 0
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": {
                "contributions": [c.to_dict() for c in self.contributions],
                "total": self.total,
            },
            "limit": self.limit,
            "offset": self.offset,
        }


def clamp_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Clamp paging parameters to limit in [1, MAX_PAGE_SIZE] and offset >= 0."""
    limit = max(1, min(limit or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE))
    offset = max(0, offset or 0)
    return limit, offset


def sort_newest_first(records: list[Contribution]) -> list[Contribution]:
    """Sort by raw date string descending, then amount descending."""
    return sorted(records, key=lambda c: (c.date, c.amount), reverse=True)


def find_candidates(
    index: SearchIndex,
    name: str | None,
    filters: SearchFilters | None = None,
    *,
    fuzzy: bool = False,
) -> list[Contribution]:
    """Look up ``name`` (or take every record when absent) and apply filters."""
    candidates = index.lookup(name, fuzzy=fuzzy) if name else list(index.records)
    if filters is not None and not filters.is_empty:
        candidates = filters.apply(candidates)
    return candidates


def search_contributions(
    index: SearchIndex,
    name: str | None = None,
    *,
    filters: SearchFilters | None = None,
    fuzzy: bool = False,
    limit: int | None = DEFAULT_PAGE_SIZE,
    offset: int | None = 0,
) -> SearchResult:
    """
    Search contributions by contributor name.

    Args:
        index: Search index over the loaded record set
        name: Contributor name; when empty every record is a candidate
        filters: Optional city/state/amount/date constraints
        fuzzy: Use per-token approximate matching instead of substring matching
        limit: Page size, clamped to 1-1000
        offset: Number of sorted results to skip

    Returns:
        SearchResult holding the requested page and the total match count
    """
    limit, offset = clamp_page(limit, offset)
    matched = sort_newest_first(find_candidates(index, name, filters, fuzzy=fuzzy))
    logger.debug("Search %r (fuzzy=%s) matched %d contributions", name, fuzzy, len(matched))
    return SearchResult(
        contributions=matched[offset : offset + limit],
        total=len(matched),
        limit=limit,
        offset=offset,
    )
