"""Shared pytest fixtures for contribution search tests."""

from collections.abc import Callable

import pytest

from contribution_search.index import SearchIndex
from contribution_search.loader import ContributionStore, build_store
from contribution_search.schema import FEC_COLUMNS, Contribution


def make_contribution(
    name: str,
    *,
    amount: float = 100.0,
    date: str = "01152020",
    city: str = "NEW YORK",
    state: str = "NY",
    committee_id: str = "C00000001",
    **extra: str,
) -> Contribution:
    """Build a contribution with sensible defaults for tests."""
    return Contribution.create(
        committee_id=committee_id,
        name=name,
        city=city,
        state=state,
        zip_code=extra.pop("zip_code", "10001"),
        employer=extra.pop("employer", "ACME"),
        occupation=extra.pop("occupation", "ENGINEER"),
        date=date,
        amount=amount,
        **extra,
    )


def fec_line(**fields: str) -> str:
    """One pipe-delimited FEC source line; unspecified columns are blank."""
    return "|".join(fields.get(column, "") for column in FEC_COLUMNS)


@pytest.fixture
def contribution_factory() -> Callable[..., Contribution]:
    return make_contribution


@pytest.fixture
def smith_records() -> list[Contribution]:
    """The two-record John/Jon Smith scenario."""
    return [
        make_contribution("John Smith", state="NY", amount=100.0, date="01152020"),
        make_contribution("Jon Smith", state="NY", amount=50.0, date="02012020"),
    ]


@pytest.fixture
def sample_records() -> list[Contribution]:
    """A small mixed record set for filter, search and analytics tests."""
    return [
        make_contribution(
            "SMITH, JOHN", amount=250.0, date="01152020", city="NEW YORK", state="NY"
        ),
        make_contribution(
            "Smith, John", amount=1000.0, date="03102020", city="Brooklyn", state="NY"
        ),
        make_contribution(
            "DOE, JANE", amount=50.0, date="02012020", city="LOS ANGELES", state="CA"
        ),
        make_contribution(
            "SMYTHE, ALAN", amount=6000.0, date="12012019", city="AUSTIN", state="TX"
        ),
        make_contribution(
            "O'BRIEN, KATE", amount=2000.0, date="03152020", city="NEWARK", state="NJ"
        ),
        make_contribution("NO STATE, PAT", amount=0.0, date="", city="", state=""),
    ]


@pytest.fixture
def sample_index(sample_records: list[Contribution]) -> SearchIndex:
    return SearchIndex(sample_records)


@pytest.fixture
def sample_store(sample_records: list[Contribution]) -> ContributionStore:
    return build_store(tuple(sample_records))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
