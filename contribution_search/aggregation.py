"""Per-name aggregation of matched contributions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .schema import Contribution


@dataclass
class NameMatch:
    """Contributions grouped under one literal contributor name."""

    name: str
    count: int = 0
    total_amount: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "count": self.count, "totalAmount": self.total_amount}


@dataclass
class AggregateResult:
    """
    Aggregate over a candidate set.

    Invariants: every record belongs to exactly one group in ``matches``,
    ``sum(m.count) == count`` and ``sum(m.total_amount) == total_amount``.
    """

    contributions: list[Contribution] = field(default_factory=list)
    count: int = 0
    total_amount: float = 0.0
    matches: list[NameMatch] = field(default_factory=list)

    @property
    def matched_names(self) -> list[str]:
        return [m.name for m in self.matches]

    def to_dict(self, *, include_contributions: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "matchedNames": self.matched_names,
            "count": self.count,
            "totalAmount": self.total_amount,
            "matches": [m.to_dict() for m in self.matches],
        }
        if include_contributions:
            data["contributions"] = [c.to_dict() for c in self.contributions]
        return data


def aggregate(records: Iterable[Contribution]) -> AggregateResult:
    """
    Count and total ``records``, grouped by their exact name string.

    Grouping uses the literal ``name`` field, so names that differ only by
    case or punctuation stay in separate groups. Groups appear in first-seen
    order.
    """
    contributions = list(records)
    groups: dict[str, NameMatch] = {}
    total_amount = 0.0

    for record in contributions:
        amount = record.amount or 0.0
        total_amount += amount
        group = groups.get(record.name)
        if group is None:
            group = groups[record.name] = NameMatch(name=record.name)
        group.count += 1
        group.total_amount += amount

    return AggregateResult(
        contributions=contributions,
        count=len(contributions),
        total_amount=total_amount,
        matches=list(groups.values()),
    )
