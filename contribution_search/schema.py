"""Record schema and engine constants for contribution search."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Final

import pyarrow as pa

from .normalization import normalize_name

# =============================================================================
# SOURCE FORMAT
# =============================================================================

# Column order of the pipe-delimited FEC individual contribution files
FEC_COLUMNS: Final[list[str]] = [
    "cmte_id",
    "amndt_ind",
    "rpt_tp",
    "transaction_pgi",
    "image_num",
    "transaction_tp",
    "entity_tp",
    "name",
    "city",
    "state",
    "zip_code",
    "employer",
    "occupation",
    "transaction_dt",
    "transaction_amt",
    "other_id",
    "tran_id",
    "file_num",
    "memo_cd",
    "memo_text",
    "sub_id",
]

SOURCE_SEPARATOR: Final = "|"
SOURCE_FILE_PATTERN: Final = "*.txt"

# Packed MMDDYYYY transaction date
DATE_FORMAT: Final = "%m%d%Y"
DATE_LENGTH: Final = 8

# =============================================================================
# SEARCH CONFIGURATION
# =============================================================================

# Fuzzy lookup: 0.0 requires a perfect match, 1.0 matches anything
FUZZY_THRESHOLD: Final = 0.3
FUZZY_MIN_TOKEN_LENGTH: Final = 2
# Hard cap on fuzzy candidates, applied before any filter
FUZZY_MATCH_LIMIT: Final = 1000

DEFAULT_PAGE_SIZE: Final = 50
MAX_PAGE_SIZE: Final = 1000

MAX_BULK_NAMES: Final = 1000
BULK_SEARCH_WORKERS: Final = int(os.environ.get("BULK_SEARCH_WORKERS", "8"))

# Bulk results stay exportable for 10 minutes
CACHE_TTL_SECONDS: Final = float(os.environ.get("SEARCH_CACHE_TTL_SECONDS", "600"))

# =============================================================================
# ANALYTICS CONFIGURATION
# =============================================================================

HIGH_RISK_AVERAGE: Final = 5000.0
MEDIUM_RISK_AVERAGE: Final = 1000.0
TOP_CONTRIBUTIONS_LIMIT: Final = 10
UNKNOWN_STATE: Final = "Unknown"

# =============================================================================
# EXPORT FORMAT
# =============================================================================

# Filtered export: the display fields of each record
FILTERED_CSV_COLUMNS: Final[list[str]] = [
    "committee_id",
    "name",
    "city",
    "state",
    "zip",
    "employer",
    "occupation",
    "date",
    "amount",
    "entity_type",
    "transaction_type",
]

# Bulk export: the full source row, in source column order
BULK_CSV_COLUMNS: Final[list[str]] = FEC_COLUMNS

# =============================================================================
# RECORDS
# =============================================================================


def parse_amount(raw: str | None) -> float:
    """Parse a source amount, falling back to 0.0 when it is not a number."""
    try:
        return float(raw) if raw else 0.0
    except ValueError:
        return 0.0


@dataclass(frozen=True)
class Contribution:
    """
    A single contribution record. Immutable once loaded.

    Carries every source column so a record can be written back out as the
    row it was read from (see ``fec_row``).
    """

    committee_id: str
    name: str
    city: str
    state: str
    zip_code: str
    employer: str
    occupation: str
    date: str
    amount: float
    entity_type: str = ""
    transaction_type: str = ""
    transaction_id: str = ""
    sub_id: str = ""
    amendment_indicator: str = ""
    report_type: str = ""
    primary_general_indicator: str = ""
    image_number: str = ""
    other_id: str = ""
    file_number: str = ""
    memo_code: str = ""
    memo_text: str = ""
    # transaction_amt exactly as read; empty for records not built from a source row
    amount_text: str = ""
    name_normalized: str = ""

    @classmethod
    def create(cls, **fields: Any) -> Contribution:
        """Build a contribution, deriving name_normalized from name."""
        fields["name_normalized"] = normalize_name(fields.get("name"))
        return cls(**fields)

    @classmethod
    def from_fec_row(cls, row: dict[str, str | None]) -> Contribution:
        """Build a contribution from a raw FEC row keyed by FEC_COLUMNS."""

        def text(column: str) -> str:
            return row.get(column) or ""

        return cls.create(
            committee_id=text("cmte_id"),
            name=text("name"),
            city=text("city"),
            state=text("state"),
            zip_code=text("zip_code"),
            employer=text("employer"),
            occupation=text("occupation"),
            date=text("transaction_dt"),
            amount=parse_amount(row.get("transaction_amt")),
            entity_type=text("entity_tp"),
            transaction_type=text("transaction_tp"),
            transaction_id=text("tran_id"),
            sub_id=text("sub_id"),
            amendment_indicator=text("amndt_ind"),
            report_type=text("rpt_tp"),
            primary_general_indicator=text("transaction_pgi"),
            image_number=text("image_num"),
            other_id=text("other_id"),
            file_number=text("file_num"),
            memo_code=text("memo_cd"),
            memo_text=text("memo_text"),
            amount_text=text("transaction_amt"),
        )

    def fec_row(self) -> dict[str, str | float]:
        """The record keyed by FEC_COLUMNS, the inverse of from_fec_row."""
        return {
            "cmte_id": self.committee_id,
            "amndt_ind": self.amendment_indicator,
            "rpt_tp": self.report_type,
            "transaction_pgi": self.primary_general_indicator,
            "image_num": self.image_number,
            "transaction_tp": self.transaction_type,
            "entity_tp": self.entity_type,
            "name": self.name,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "employer": self.employer,
            "occupation": self.occupation,
            "transaction_dt": self.date,
            "transaction_amt": self.amount_text or self.amount,
            "other_id": self.other_id,
            "tran_id": self.transaction_id,
            "file_num": self.file_number,
            "memo_cd": self.memo_code,
            "memo_text": self.memo_text,
            "sub_id": self.sub_id,
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "committee_id": self.committee_id,
            "name": self.name,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "employer": self.employer,
            "occupation": self.occupation,
            "date": self.date,
            "amount": self.amount,
            "entity_type": self.entity_type,
            "transaction_type": self.transaction_type,
            "transaction_id": self.transaction_id,
            "sub_id": self.sub_id,
            "memo_code": self.memo_code,
            "memo_text": self.memo_text,
        }


# Immutable, load-ordered record set shared by every query
RecordSet = tuple[Contribution, ...]

# =============================================================================
# ANALYTICS TABLE SCHEMA
# =============================================================================

ANALYTICS_SCHEMA = pa.schema(
    [
        pa.field("record_index", pa.int64(), nullable=False),
        pa.field("committee_id", pa.string()),
        pa.field("name", pa.string()),
        pa.field("state", pa.string()),
        pa.field("date", pa.string()),
        pa.field("amount", pa.float64()),
    ]
)

# =============================================================================
# ANALYTICS QUERIES
# =============================================================================

# Every query reads the registered "contributions" table (ANALYTICS_SCHEMA)

SUMMARY_QUERY = """
SELECT
    COUNT(*) AS total_contributions,
    COALESCE(SUM(amount), 0) AS total_amount,
    COALESCE(AVG(amount), 0) AS average_amount,
    COUNT(DISTINCT name) AS unique_contributors,
    COUNT(DISTINCT committee_id) AS unique_recipients,
    MIN(date) FILTER (WHERE date <> '') AS min_date,
    MAX(date) FILTER (WHERE date <> '') AS max_date
FROM contributions
"""

# Year-month from packed MMDDYYYY dates; malformed dates are skipped
MONTHLY_TRENDS_QUERY = """
SELECT
    substr(date, 5, 4) || '-' || substr(date, 1, 2) AS month,
    COUNT(*) AS count,
    SUM(amount) AS amount
FROM contributions
WHERE regexp_full_match(date, '[0-9]{{{date_length}}}')
  AND substr(date, 1, 2) BETWEEN '01' AND '12'
GROUP BY month
ORDER BY month
"""

GEOGRAPHIC_DISTRIBUTION_QUERY = """
SELECT
    CASE WHEN state IS NULL OR state = '' THEN '{unknown_state}' ELSE state END AS state,
    COUNT(*) AS count,
    SUM(amount) AS amount
FROM contributions
GROUP BY 1
ORDER BY 1
"""

# Contributors bucketed by their average contribution size
RISK_ANALYSIS_QUERY = """
WITH per_contributor AS (
    SELECT name, AVG(amount) AS avg_amount
    FROM contributions
    GROUP BY name
)
SELECT
    COUNT(*) FILTER (WHERE avg_amount > {high}) AS high,
    COUNT(*) FILTER (WHERE avg_amount <= {high} AND avg_amount > {medium}) AS medium,
    COUNT(*) FILTER (WHERE avg_amount <= {medium}) AS low
FROM per_contributor
"""

TOP_CONTRIBUTIONS_QUERY = """
SELECT record_index
FROM contributions
ORDER BY amount DESC, record_index ASC
LIMIT {limit}
"""
