"""Whole-dataset statistics computed with DuckDB over the loaded record set."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import duckdb
import pyarrow as pa

from .schema import (
    ANALYTICS_SCHEMA,
    DATE_FORMAT,
    DATE_LENGTH,
    GEOGRAPHIC_DISTRIBUTION_QUERY,
    HIGH_RISK_AVERAGE,
    MEDIUM_RISK_AVERAGE,
    MONTHLY_TRENDS_QUERY,
    RISK_ANALYSIS_QUERY,
    SUMMARY_QUERY,
    TOP_CONTRIBUTIONS_LIMIT,
    TOP_CONTRIBUTIONS_QUERY,
    UNKNOWN_STATE,
    Contribution,
)

logger = logging.getLogger(__name__)


@dataclass
class MonthlyTotal:
    month: str
    count: int
    amount: float


@dataclass
class StateTotal:
    state: str
    count: int
    amount: float


@dataclass
class RiskAnalysis:
    """Number of contributors per average-contribution bucket."""

    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass
class AnalyticsReport:
    """Batch statistics over the full record set."""

    total_contributions: int = 0
    total_amount: float = 0.0
    average_amount: float = 0.0
    unique_contributors: int = 0
    monthly_trend: float = 100.0
    monthly_trends: list[MonthlyTotal] = field(default_factory=list)
    geographic_distribution: list[StateTotal] = field(default_factory=list)
    risk_analysis: RiskAnalysis = field(default_factory=RiskAnalysis)
    top_contributions: list[Contribution] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "monthlyTrend": self.monthly_trend,
                "activeContributors": self.unique_contributors,
                "highRisk": self.risk_analysis.high,
                "avgContribution": self.average_amount,
                "totalContributions": self.total_contributions,
                "totalAmount": self.total_amount,
            },
            "monthlyTrends": [vars(m) for m in self.monthly_trends],
            "geographicDistribution": [vars(s) for s in self.geographic_distribution],
            "riskAnalysis": {
                "highRisk": self.risk_analysis.high,
                "mediumRisk": self.risk_analysis.medium,
                "lowRisk": self.risk_analysis.low,
            },
            "topContributions": [c.to_dict() for c in self.top_contributions],
        }


@dataclass
class DatasetStats:
    """Headline numbers shown alongside single-name search."""

    total_contributions: int = 0
    total_amount: float = 0.0
    start_date: str | None = None
    end_date: str | None = None
    unique_contributors: int = 0
    unique_recipients: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalContributions": self.total_contributions,
            "totalAmount": self.total_amount,
            "dateRange": {"start": self.start_date, "end": self.end_date},
            "uniqueContributors": self.unique_contributors,
            "uniqueRecipients": self.unique_recipients,
        }


def to_arrow(records: Sequence[Contribution]) -> pa.Table:
    """Columnar view of the fields analytics needs, tagged with load position."""
    return pa.table(
        {
            "record_index": list(range(len(records))),
            "committee_id": [r.committee_id for r in records],
            "name": [r.name for r in records],
            "state": [r.state for r in records],
            "date": [r.date for r in records],
            "amount": [float(r.amount or 0.0) for r in records],
        },
        schema=ANALYTICS_SCHEMA,
    )


def percent_change(previous: float, latest: float) -> float:
    """Percentage change between two monthly amounts."""
    if previous == 0:
        return 100.0 if latest > 0 else 0.0
    return (latest - previous) / previous * 100


def _iso_date(packed: str | None) -> str | None:
    if not packed:
        return None
    try:
        return datetime.strptime(packed, DATE_FORMAT).date().isoformat()
    except ValueError:
        return None


def _connect(records: Sequence[Contribution]) -> duckdb.DuckDBPyConnection:
    conn = duckdb.connect()
    conn.register("contributions", to_arrow(records))
    return conn


def compute_analytics(records: Sequence[Contribution]) -> AnalyticsReport:
    """
    Reduce the full record set to summary analytics.

    Computes totals, monthly trends (with percent change between the last
    two months, 100 when fewer than two exist), state distribution, risk
    buckets by average contribution per contributor name (>5000 high,
    >1000 medium, otherwise low) and the ten largest contributions.
    """
    conn = _connect(records)
    try:
        total, total_amount, average, unique_names, _, _, _ = conn.execute(
            SUMMARY_QUERY
        ).fetchone()

        monthly = [
            MonthlyTotal(month=row["month"], count=row["count"], amount=row["amount"])
            for row in conn.execute(MONTHLY_TRENDS_QUERY.format(date_length=DATE_LENGTH))
            .pl()
            .iter_rows(named=True)
        ]
        trend = 100.0
        if len(monthly) >= 2:
            trend = percent_change(monthly[-2].amount, monthly[-1].amount)

        geographic = [
            StateTotal(state=row["state"], count=row["count"], amount=row["amount"])
            for row in conn.execute(
                GEOGRAPHIC_DISTRIBUTION_QUERY.format(unknown_state=UNKNOWN_STATE)
            )
            .pl()
            .iter_rows(named=True)
        ]

        high, medium, low = conn.execute(
            RISK_ANALYSIS_QUERY.format(high=HIGH_RISK_AVERAGE, medium=MEDIUM_RISK_AVERAGE)
        ).fetchone()

        top_rows = conn.execute(
            TOP_CONTRIBUTIONS_QUERY.format(limit=TOP_CONTRIBUTIONS_LIMIT)
        ).fetchall()
    finally:
        conn.close()

    report = AnalyticsReport(
        total_contributions=total,
        total_amount=float(total_amount),
        average_amount=float(average),
        unique_contributors=unique_names,
        monthly_trend=trend,
        monthly_trends=monthly,
        geographic_distribution=geographic,
        risk_analysis=RiskAnalysis(high=high, medium=medium, low=low),
        top_contributions=[records[i] for (i,) in top_rows],
    )
    logger.debug(
        "Analytics over %d contributions: %d month(s), %d state(s)",
        report.total_contributions,
        len(report.monthly_trends),
        len(report.geographic_distribution),
    )
    return report


def dataset_stats(records: Sequence[Contribution]) -> DatasetStats:
    """Totals, raw date range and distinct contributor/recipient counts."""
    conn = _connect(records)
    try:
        total, total_amount, _, unique_names, unique_recipients, min_date, max_date = (
            conn.execute(SUMMARY_QUERY).fetchone()
        )
    finally:
        conn.close()
    return DatasetStats(
        total_contributions=total,
        total_amount=float(total_amount),
        start_date=_iso_date(min_date),
        end_date=_iso_date(max_date),
        unique_contributors=unique_names,
        unique_recipients=unique_recipients,
    )
