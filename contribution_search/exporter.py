"""CSV rendering of contribution result sets.

Two layouts exist. Filtered exports carry the eleven display fields
(FILTERED_CSV_COLUMNS); cached bulk exports carry the full source row
(BULK_CSV_COLUMNS, the FEC column order).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence

from .cache import ResultCache
from .filters import SearchFilters
from .index import SearchIndex
from .schema import BULK_CSV_COLUMNS, FILTERED_CSV_COLUMNS, Contribution
from .search import find_candidates


def escape_csv_field(value: object) -> str:
    """
    Render one CSV field.

    Fields containing a comma or double quote are wrapped in double quotes
    with inner quotes doubled; everything else is emitted as-is.
    """
    text = "" if value is None else str(value)
    if "," in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def format_amount(amount: float | str) -> str:
    """Whole amounts render without a decimal point; source text passes through."""
    if isinstance(amount, str):
        return amount
    return str(int(amount)) if float(amount).is_integer() else repr(float(amount))


def csv_row(record: Contribution) -> list[str]:
    """Field values for ``record`` in FILTERED_CSV_COLUMNS order."""
    return [
        record.committee_id,
        record.name,
        record.city,
        record.state,
        record.zip_code,
        record.employer,
        record.occupation,
        record.date,
        format_amount(record.amount),
        record.entity_type,
        record.transaction_type,
    ]


def fec_csv_row(record: Contribution) -> list[str]:
    """Field values for ``record`` in BULK_CSV_COLUMNS (source) order."""
    row = record.fec_row()
    row["transaction_amt"] = format_amount(row["transaction_amt"])
    return [str(row[column]) for column in BULK_CSV_COLUMNS]


def iter_csv_lines(
    records: Iterable[Contribution],
    columns: Sequence[str] = FILTERED_CSV_COLUMNS,
    row: Callable[[Contribution], list[str]] = csv_row,
) -> Iterator[str]:
    """Yield the header line then one line per record, without terminators."""
    yield ",".join(columns)
    for record in records:
        yield ",".join(escape_csv_field(v) for v in row(record))


def contributions_to_csv(records: Iterable[Contribution]) -> str:
    """Render records as newline-separated CSV text in the filtered layout."""
    return "\n".join(iter_csv_lines(records))


def contributions_to_fec_csv(records: Iterable[Contribution]) -> str:
    """Render records as newline-separated CSV text in the source-row layout."""
    return "\n".join(iter_csv_lines(records, BULK_CSV_COLUMNS, fec_csv_row))


def export_cached(cache: ResultCache, search_id: str) -> str:
    """
    CSV for a cached bulk search, one full source row per record.

    Raises:
        NotFoundError: If the search id is unknown or has expired
    """
    return contributions_to_fec_csv(cache.require(search_id))


def export_filtered(
    index: SearchIndex,
    name: str | None = None,
    filters: SearchFilters | None = None,
) -> str:
    """CSV of every record matching ``name`` (substring mode) and ``filters``."""
    return contributions_to_csv(find_candidates(index, name, filters))


def bulk_export_filename(search_id: str) -> str:
    """Download filename for a cached bulk search export."""
    return f"bulk_search_results_{search_id}.csv"


FILTERED_EXPORT_FILENAME = "contributions.csv"
