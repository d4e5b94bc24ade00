"""Bulk contribution search across many input names."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from .aggregation import AggregateResult, aggregate
from .cache import ResultCache, new_search_id
from .exceptions import InternalError, ValidationError
from .filters import SearchFilters
from .index import SearchIndex
from .schema import BULK_SEARCH_WORKERS, MAX_BULK_NAMES, Contribution
from .search import find_candidates

logger = logging.getLogger(__name__)


@dataclass
class BulkSummary:
    """Cross-name totals for a bulk search."""

    total_names: int = 0
    names_with_results: int = 0
    total_contributions: int = 0
    total_amount: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalNames": self.total_names,
            "namesWithResults": self.names_with_results,
            "totalContributions": self.total_contributions,
            "totalAmount": self.total_amount,
        }


@dataclass
class BulkSearchResult:
    """Per-name aggregates keyed by input name, plus summary and cache id."""

    results: dict[str, AggregateResult] = field(default_factory=dict)
    summary: BulkSummary = field(default_factory=BulkSummary)
    search_id: str = ""

    @property
    def all_contributions(self) -> list[Contribution]:
        """Flattened union of every entry's matched records, in mapping order."""
        return [c for entry in self.results.values() for c in entry.contributions]

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": {name: entry.to_dict() for name, entry in self.results.items()},
            "summary": self.summary.to_dict(),
            "searchId": self.search_id,
        }


def clean_names(names: Iterable[Any] | None) -> list[str]:
    """
    Trim input names and drop blanks.

    Raises:
        ValidationError: If names is missing, holds more than MAX_BULK_NAMES
            entries, or has no non-blank name
    """
    if names is None or isinstance(names, str):
        raise ValidationError(
            message="Names array is required and must not be empty",
            field_name="names",
            value=names,
        )
    names = list(names)
    if not names:
        raise ValidationError(
            message="Names array is required and must not be empty",
            field_name="names",
            value=names,
        )
    if len(names) > MAX_BULK_NAMES:
        raise ValidationError(
            message=f"Maximum {MAX_BULK_NAMES} names allowed per bulk search",
            field_name="names",
            value=len(names),
        )
    cleaned = [str(n).strip() for n in names if n is not None and str(n).strip()]
    if not cleaned:
        raise ValidationError(message="No valid names provided", field_name="names", value=names)
    return cleaned


def summarize(names: Sequence[str], results: dict[str, AggregateResult]) -> BulkSummary:
    """Summary over a bulk result mapping; total_names counts the raw input list."""
    return BulkSummary(
        total_names=len(names),
        names_with_results=sum(1 for entry in results.values() if entry.count > 0),
        total_contributions=sum(entry.count for entry in results.values()),
        total_amount=sum(entry.total_amount for entry in results.values()),
    )


class BulkSearchOrchestrator:
    """
    Runs one search per input name and merges the outcomes.

    Each name goes through normalize, lookup (one mode for the whole
    request), the shared filter set and aggregation. Sub-searches run on a
    thread pool over the read-only index; the merged mapping keeps input
    order, and a repeated input name overwrites its own earlier entry. The
    flattened matches are stored in the result cache under a fresh id.
    """

    def __init__(
        self,
        index: SearchIndex,
        cache: ResultCache,
        *,
        max_workers: int = BULK_SEARCH_WORKERS,
    ) -> None:
        self.index = index
        self.cache = cache
        self.max_workers = max(1, max_workers)

    def search_one(
        self, name: str, filters: SearchFilters | None = None, *, fuzzy: bool = False
    ) -> AggregateResult:
        """Aggregate the filtered matches for a single input name."""
        return aggregate(find_candidates(self.index, name, filters, fuzzy=fuzzy))

    def run(
        self,
        names: Sequence[str],
        filters: SearchFilters | None = None,
        *,
        fuzzy: bool = False,
    ) -> BulkSearchResult:
        """
        Search every name in ``names`` and cache the combined matches.

        Args:
            names: Trimmed, non-empty input names (see clean_names)
            filters: Filters applied identically to every name
            fuzzy: Lookup mode for the whole request

        Returns:
            BulkSearchResult with per-name entries, summary and search id

        Raises:
            InternalError: If any per-name search fails
        """
        filters = filters or SearchFilters()
        logger.info(
            "Bulk search: %d name(s), fuzzy=%s, filters: %s",
            len(names),
            fuzzy,
            filters.build().describe(),
        )

        try:
            if self.max_workers == 1 or len(names) <= 1:
                entries = [self.search_one(n, filters, fuzzy=fuzzy) for n in names]
            else:
                with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                    entries = list(
                        pool.map(lambda n: self.search_one(n, filters, fuzzy=fuzzy), names)
                    )
        except Exception as e:
            logger.exception("Bulk search failed")
            raise InternalError(message=f"Bulk search failed: {e}") from e

        results: dict[str, AggregateResult] = {}
        for name, entry in zip(names, entries):
            results[name] = entry

        result = BulkSearchResult(
            results=results,
            summary=summarize(names, results),
            search_id=new_search_id(),
        )
        self.cache.put(result.search_id, result.all_contributions)

        logger.info(
            "Bulk search %s: %d/%d name(s) matched, %d contribution(s)",
            result.search_id,
            result.summary.names_with_results,
            result.summary.total_names,
            result.summary.total_contributions,
        )
        return result
