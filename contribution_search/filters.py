"""Filter definitions for narrowing a contribution candidate set."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .exceptions import ValidationError
from .schema import DATE_FORMAT, Contribution

logger = logging.getLogger(__name__)


class Filter(ABC):
    """Base class for contribution filters."""

    @abstractmethod
    def apply(self, record: Contribution) -> bool:
        """Return True if record should be included."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable description of the filter."""
        ...

    def select(self, records: Iterable[Contribution]) -> list[Contribution]:
        """Keep the records this filter accepts, preserving order."""
        return [r for r in records if self.apply(r)]


@dataclass
class CityFilter(Filter):
    """Case-insensitive substring match on city."""

    city: str

    def apply(self, record: Contribution) -> bool:
        return self.city.lower() in (record.city or "").lower()

    def describe(self) -> str:
        return f"city contains '{self.city}'"


@dataclass
class StateFilter(Filter):
    """Case-insensitive exact match on state."""

    state: str

    def apply(self, record: Contribution) -> bool:
        return (record.state or "").upper() == self.state.upper()

    def describe(self) -> str:
        return f"state = {self.state.upper()}"


@dataclass
class AmountFilter(Filter):
    """Filter by inclusive contribution amount range."""

    min_amount: float | None = None
    max_amount: float | None = None

    def apply(self, record: Contribution) -> bool:
        if self.min_amount is not None and record.amount < self.min_amount:
            return False
        if self.max_amount is not None and record.amount > self.max_amount:
            return False
        return True

    def describe(self) -> str:
        parts = []
        if self.min_amount is not None:
            parts.append(f"amount >= ${self.min_amount:,.2f}")
        if self.max_amount is not None:
            parts.append(f"amount <= ${self.max_amount:,.2f}")
        return " AND ".join(parts) if parts else "no amount filter"


def pack_date(value: date) -> str:
    """Render a calendar date in the packed MMDDYYYY source form."""
    return value.strftime(DATE_FORMAT)


def unpack_date(value: str) -> date | None:
    """Parse a packed MMDDYYYY string, or None when it is not a valid date."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


@dataclass
class DateFilter(Filter):
    """
    Filter by inclusive transaction date range.

    By default the bounds are packed to MMDDYYYY and compared to the record's
    raw date string lexicographically, which is how the source system has
    always compared dates. That ordering is not chronological across years
    ("01152021" < "12012020"). Pass ``chronological=True`` to compare real
    calendar dates instead; records with unparseable dates then never match.
    """

    start_date: date | None = None
    end_date: date | None = None
    chronological: bool = False

    def apply(self, record: Contribution) -> bool:
        if self.chronological:
            return self._apply_chronological(record)
        raw = record.date or ""
        if self.start_date and raw < pack_date(self.start_date):
            return False
        if self.end_date and raw > pack_date(self.end_date):
            return False
        return True

    def _apply_chronological(self, record: Contribution) -> bool:
        row_date = unpack_date(record.date)
        if row_date is None:
            return False
        if self.start_date and row_date < self.start_date:
            return False
        if self.end_date and row_date > self.end_date:
            return False
        return True

    def describe(self) -> str:
        parts = []
        if self.start_date:
            parts.append(f"date >= {self.start_date}")
        if self.end_date:
            parts.append(f"date <= {self.end_date}")
        return " AND ".join(parts) if parts else "no date filter"


@dataclass
class CompositeFilter(Filter):
    """Combine multiple filters with AND logic."""

    filters: list[Filter] = field(default_factory=list)

    def apply(self, record: Contribution) -> bool:
        return all(f.apply(record) for f in self.filters)

    def describe(self) -> str:
        if not self.filters:
            return "no filters"
        return " AND ".join(f"({f.describe()})" for f in self.filters)


# =============================================================================
# PARAMETER PARSING
# =============================================================================


def parse_amount_bound(value: Any, field_name: str) -> float | None:
    """
    Parse an amount bound supplied by a caller.

    None and blank strings mean "unconstrained". Anything else must be a
    finite number; malformed input raises ValidationError.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(
            message="Amount bound must be a number", field_name=field_name, value=value
        )
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(Decimal(str(value)))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(
            message="Amount bound must be a number", field_name=field_name, value=value
        ) from e
    if not math.isfinite(amount):
        raise ValidationError(
            message="Amount bound must be finite", field_name=field_name, value=value
        )
    return amount


def parse_date_bound(value: Any, field_name: str) -> date | None:
    """
    Parse a date bound supplied by a caller.

    Accepts date objects and ISO YYYY-MM-DD strings. Unparseable input is
    dropped (no constraint) rather than reported.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        logger.debug("Ignoring unparseable %s: %r", field_name, value)
        return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class SearchFilters:
    """
    Optional filter fields shared by single and bulk searches.

    A field left as None places no constraint. Filters compose by AND, and
    each predicate is pure, so application order never changes the result.
    """

    city: str | None = None
    state: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    chronological_dates: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> SearchFilters:
        """
        Build filters from raw request parameters.

        Accepts both camelCase (minAmount) and snake_case (min_amount) keys.

        Raises:
            ValidationError: If an amount bound is not a finite number
        """

        def pick(snake: str, camel: str) -> Any:
            return params.get(snake, params.get(camel))

        return cls(
            city=_text(pick("city", "city")),
            state=_text(pick("state", "state")),
            min_amount=parse_amount_bound(pick("min_amount", "minAmount"), "minAmount"),
            max_amount=parse_amount_bound(pick("max_amount", "maxAmount"), "maxAmount"),
            start_date=parse_date_bound(pick("start_date", "startDate"), "startDate"),
            end_date=parse_date_bound(pick("end_date", "endDate"), "endDate"),
        )

    @property
    def is_empty(self) -> bool:
        return not self.build().filters

    def build(self) -> CompositeFilter:
        """Compose the concrete filters for the fields that are set."""
        filters: list[Filter] = []
        if self.city:
            filters.append(CityFilter(city=self.city))
        if self.state:
            filters.append(StateFilter(state=self.state))
        if self.min_amount is not None or self.max_amount is not None:
            filters.append(AmountFilter(min_amount=self.min_amount, max_amount=self.max_amount))
        if self.start_date or self.end_date:
            filters.append(
                DateFilter(
                    start_date=self.start_date,
                    end_date=self.end_date,
                    chronological=self.chronological_dates,
                )
            )
        return CompositeFilter(filters=filters)

    def apply(self, records: Iterable[Contribution]) -> list[Contribution]:
        """Apply every set filter to ``records``, preserving order."""
        return self.build().select(records)
