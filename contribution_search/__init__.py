"""Contribution search engine over FEC individual contribution records.

This package provides:
- Name normalization shared by loading and querying
- Exact and fuzzy name lookup over an immutable record set
- Composable city/state/amount/date filters
- Per-name aggregation and bulk search across up to 1,000 names
- An expiring result cache and CSV export of cached results
- Dataset-wide analytics
"""

from .aggregation import AggregateResult, NameMatch, aggregate
from .analytics import AnalyticsReport, DatasetStats, compute_analytics, dataset_stats
from .bulk import BulkSearchOrchestrator, BulkSearchResult, BulkSummary, clean_names
from .cache import ResultCache, new_search_id
from .exceptions import (
    ContributionSearchError,
    DataDirectoryError,
    InternalError,
    NotFoundError,
    SourceReadError,
    ValidationError,
)
from .exporter import (
    contributions_to_csv,
    contributions_to_fec_csv,
    export_cached,
    export_filtered,
)
from .filters import (
    AmountFilter,
    CityFilter,
    CompositeFilter,
    DateFilter,
    Filter,
    SearchFilters,
    StateFilter,
)
from .index import SearchIndex
from .loader import ContributionStore, build_store, load_contributions, load_store
from .normalization import normalize_name
from .schema import (
    BULK_CSV_COLUMNS,
    CACHE_TTL_SECONDS,
    FEC_COLUMNS,
    FILTERED_CSV_COLUMNS,
    FUZZY_MATCH_LIMIT,
    MAX_BULK_NAMES,
    Contribution,
    RecordSet,
)
from .search import SearchResult, search_contributions

__all__ = [
    # Records
    "Contribution",
    "RecordSet",
    "normalize_name",
    # Lookup and filtering
    "SearchIndex",
    "Filter",
    "CityFilter",
    "StateFilter",
    "AmountFilter",
    "DateFilter",
    "CompositeFilter",
    "SearchFilters",
    # Search
    "search_contributions",
    "SearchResult",
    "aggregate",
    "AggregateResult",
    "NameMatch",
    "BulkSearchOrchestrator",
    "BulkSearchResult",
    "BulkSummary",
    "clean_names",
    # Cache and export
    "ResultCache",
    "new_search_id",
    "contributions_to_csv",
    "contributions_to_fec_csv",
    "export_cached",
    "export_filtered",
    # Analytics
    "compute_analytics",
    "dataset_stats",
    "AnalyticsReport",
    "DatasetStats",
    # Loading
    "load_contributions",
    "load_store",
    "build_store",
    "ContributionStore",
    # Constants
    "FEC_COLUMNS",
    "FILTERED_CSV_COLUMNS",
    "BULK_CSV_COLUMNS",
    "FUZZY_MATCH_LIMIT",
    "MAX_BULK_NAMES",
    "CACHE_TTL_SECONDS",
    # Exceptions
    "ContributionSearchError",
    "ValidationError",
    "NotFoundError",
    "InternalError",
    "SourceReadError",
    "DataDirectoryError",
]
