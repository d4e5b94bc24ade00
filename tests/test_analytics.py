"""Tests for dataset analytics."""

import pytest
from conftest import make_contribution

from contribution_search.analytics import (
    MonthlyTotal,
    RiskAnalysis,
    StateTotal,
    compute_analytics,
    dataset_stats,
    percent_change,
    to_arrow,
)
from contribution_search.schema import ANALYTICS_SCHEMA


class TestComputeAnalytics:
    """Tests for compute_analytics."""

    def test_summary(self, sample_records):
        report = compute_analytics(sample_records)
        assert report.total_contributions == 6
        assert report.total_amount == pytest.approx(9300.0)
        assert report.average_amount == pytest.approx(1550.0)
        assert report.unique_contributors == 6

    def test_monthly_trends_sorted(self, sample_records):
        """Months are parsed from MMDDYYYY and sorted chronologically."""
        report = compute_analytics(sample_records)
        assert report.monthly_trends == [
            MonthlyTotal(month="2019-12", count=1, amount=6000.0),
            MonthlyTotal(month="2020-01", count=1, amount=250.0),
            MonthlyTotal(month="2020-02", count=1, amount=50.0),
            MonthlyTotal(month="2020-03", count=2, amount=3000.0),
        ]
        assert report.monthly_trend == pytest.approx(5900.0)

    def test_single_month_trend_is_100(self):
        report = compute_analytics([make_contribution("A", date="01012020")])
        assert report.monthly_trend == 100.0

    def test_malformed_dates_skipped(self):
        records = [
            make_contribution("A", date="13012020"),
            make_contribution("B", date="2020"),
            make_contribution("E", date="050520210"),
            make_contribution("C", date="ab012020"),
            make_contribution("D", date="05052021"),
        ]
        report = compute_analytics(records)
        assert [m.month for m in report.monthly_trends] == ["2021-05"]

    def test_geographic_distribution(self, sample_records):
        report = compute_analytics(sample_records)
        assert report.geographic_distribution == [
            StateTotal(state="CA", count=1, amount=50.0),
            StateTotal(state="NJ", count=1, amount=2000.0),
            StateTotal(state="NY", count=2, amount=1250.0),
            StateTotal(state="TX", count=1, amount=6000.0),
            StateTotal(state="Unknown", count=1, amount=0.0),
        ]

    def test_risk_buckets(self, sample_records):
        """Average of exactly 1000 is low; above 5000 is high."""
        report = compute_analytics(sample_records)
        assert report.risk_analysis == RiskAnalysis(high=1, medium=1, low=4)

    def test_risk_uses_average_per_name(self):
        records = [
            make_contribution("A", amount=9000.0),
            make_contribution("A", amount=1000.0),
            make_contribution("B", amount=1500.0),
        ]
        report = compute_analytics(records)
        assert report.risk_analysis == RiskAnalysis(high=0, medium=2, low=0)

    def test_top_contributions(self, sample_records):
        report = compute_analytics(sample_records)
        assert [c.amount for c in report.top_contributions] == [
            6000.0,
            2000.0,
            1000.0,
            250.0,
            50.0,
            0.0,
        ]

    def test_top_contributions_capped_at_ten(self):
        records = [make_contribution(f"P{i}", amount=float(i)) for i in range(25)]
        report = compute_analytics(records)
        assert [c.name for c in report.top_contributions] == [f"P{i}" for i in range(24, 14, -1)]

    def test_empty_record_set(self):
        report = compute_analytics([])
        assert report.total_contributions == 0
        assert report.average_amount == 0.0
        assert report.monthly_trend == 100.0
        assert report.monthly_trends == []
        assert report.top_contributions == []

    def test_to_dict_shape(self, sample_records):
        data = compute_analytics(sample_records).to_dict()
        assert data["summary"]["activeContributors"] == 6
        assert data["summary"]["highRisk"] == 1
        assert data["riskAnalysis"] == {"highRisk": 1, "mediumRisk": 1, "lowRisk": 4}
        assert data["monthlyTrends"][0] == {"month": "2019-12", "count": 1, "amount": 6000.0}
        assert len(data["topContributions"]) == 6


class TestPercentChange:
    """Tests for percent_change."""

    def test_change(self):
        assert percent_change(100.0, 150.0) == 50.0
        assert percent_change(100.0, 50.0) == -50.0

    def test_zero_previous(self):
        assert percent_change(0.0, 10.0) == 100.0
        assert percent_change(0.0, 0.0) == 0.0


class TestDatasetStats:
    """Tests for dataset_stats."""

    def test_stats(self, sample_records):
        stats = dataset_stats(sample_records)
        assert stats.total_contributions == 6
        assert stats.total_amount == pytest.approx(9300.0)
        assert stats.unique_contributors == 6
        assert stats.unique_recipients == 1

    def test_date_range_uses_raw_string_order(self, sample_records):
        """Min/max are taken over the packed strings, then rendered as ISO dates."""
        stats = dataset_stats(sample_records)
        assert stats.start_date == "2020-01-15"
        assert stats.end_date == "2019-12-01"

    def test_empty(self):
        stats = dataset_stats([])
        assert stats.total_contributions == 0
        assert stats.start_date is None
        assert stats.end_date is None


class TestToArrow:
    """Tests for to_arrow."""

    def test_schema_and_positions(self, smith_records):
        table = to_arrow(smith_records)
        assert table.schema == ANALYTICS_SCHEMA
        assert table.column("record_index").to_pylist() == [0, 1]
        assert table.column("amount").to_pylist() == [100.0, 50.0]
