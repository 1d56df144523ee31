"""Unit tests for consumption statistics and next-bill prediction"""

import math

import pytest

from billing_engine.agents.history.consumption_analyzer import (
    consumption_history,
    get_consumption_stats,
    predict_next_bill,
)
from billing_engine.models.schemas import BillStatus


def _history(make_bill, units, status=BillStatus.APPROVED, start_month=1):
    return [
        make_bill(month=f"2023-{start_month + i:02d}", units=u, status=status)
        for i, u in enumerate(units)
    ]


class TestConsumptionStats:
    """Test get_consumption_stats"""

    def test_empty_history(self):
        stats = get_consumption_stats([])
        assert stats.total_units == 0
        assert stats.average_units == 0
        assert stats.total_amount == 0
        assert stats.average_amount == 0
        assert stats.highest_consumption == 0
        assert stats.lowest_consumption == 0

    def test_no_approved_bills(self, make_bill):
        """Pending / rejected bills alone give zero stats, not NaN"""
        bills = _history(make_bill, [100, 200], status=BillStatus.PENDING)
        bills.append(make_bill(month="2023-03", units=50, status=BillStatus.REJECTED))
        stats = get_consumption_stats(bills)
        assert stats.total_units == 0
        assert stats.average_amount == 0

    def test_only_approved_bills_count(self, make_bill):
        bills = _history(make_bill, [100, 120, 80])
        bills.append(make_bill(month="2023-04", units=300, status=BillStatus.PENDING))
        stats = get_consumption_stats(bills)
        assert stats.total_units == 300
        assert stats.average_units == 100
        assert stats.total_amount == 2400
        assert stats.average_amount == 800
        assert stats.highest_consumption == 120
        assert stats.lowest_consumption == 80

    def test_accepts_camel_case_dicts(self):
        bills = [
            {"month": "2023-01", "units": 40, "amount": 200, "status": "APPROVED"},
            {"month": "2023-02", "units": 60, "amount": 300, "status": "APPROVED"},
            {"month": "2023-03", "units": 90, "amount": 450, "status": "PENDING", "ratePerUnit": 5},
        ]
        stats = get_consumption_stats(bills)
        assert stats.total_units == 100
        assert stats.average_amount == 250


class TestPredictNextBill:
    """Test predict_next_bill"""

    def test_fewer_than_three_bills(self, make_bill):
        prediction = predict_next_bill(_history(make_bill, [100, 110]), 5000, 8)
        assert prediction.predicted_units == 0
        assert prediction.predicted_amount == 0
        assert prediction.confidence == 0

    def test_uses_last_six_approved_bills(self, make_bill):
        bills = _history(make_bill, [10, 10, 100, 110, 120, 130, 140, 150])
        prediction = predict_next_bill(bills, 5000, 8)

        expected_confidence = 1 - math.sqrt(1750 / 6) / 125
        assert prediction.predicted_units == 125
        assert prediction.predicted_amount == 1000
        assert prediction.confidence == pytest.approx(expected_confidence)
        assert prediction.sample_size == 6
        assert prediction.predicted_reading == 5125

    def test_confidence_capped(self, make_bill):
        """Perfectly steady history never reports more than 95%"""
        prediction = predict_next_bill(_history(make_bill, [100, 100, 100, 100]), 0, 5)
        assert prediction.confidence == 0.95
        assert prediction.predicted_units == 100
        assert prediction.predicted_amount == 500

    def test_confidence_floor(self, make_bill):
        """Very erratic history floors at zero"""
        prediction = predict_next_bill(_history(make_bill, [1, 1, 1, 1, 1, 300]), 0, 5)
        assert prediction.confidence == 0

    def test_zero_mean_history(self, make_bill):
        prediction = predict_next_bill(_history(make_bill, [0, 0, 0]), 700, 5)
        assert prediction.predicted_units == 0
        assert prediction.predicted_amount == 0
        assert prediction.confidence == 0

    def test_threshold_counts_all_bills(self, make_bill):
        """Three bills in total is enough even if only one is approved"""
        bills = _history(make_bill, [300, 310], status=BillStatus.PENDING)
        bills.append(make_bill(month="2023-03", units=90, status=BillStatus.APPROVED))
        prediction = predict_next_bill(bills, 0, 10)
        assert prediction.predicted_units == 90
        assert prediction.predicted_amount == 900
        assert prediction.sample_size == 1

    def test_no_approved_bills(self, make_bill):
        bills = _history(make_bill, [100, 110, 120], status=BillStatus.PENDING)
        prediction = predict_next_bill(bills, 0, 10)
        assert prediction.predicted_units == 0
        assert prediction.confidence == 0

    def test_half_units_round_up(self, make_bill):
        prediction = predict_next_bill(_history(make_bill, [100, 101, 100, 101]), 0, 3)
        assert prediction.predicted_units == 101
        assert prediction.predicted_amount == 303


class TestConsumptionHistory:
    """Test consumption_history"""

    def test_per_month_table(self, make_bill):
        bills = _history(make_bill, [100, 120])
        bills.append(make_bill(month="2023-03", units=80, status=BillStatus.REJECTED))
        df = consumption_history(bills)
        assert list(df["month"]) == ["2023-01", "2023-02"]
        assert list(df["units"]) == [100, 120]
        assert list(df["amount"]) == [800, 960]
