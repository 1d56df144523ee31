"""Unit tests for reading validation and bill calculation"""

import pytest

from billing_engine.agents.reading_validation.bill_calculator import (
    HIGH_USAGE_WARNING,
    build_bill,
    calculate_bill,
    recalculate_bill,
)
from billing_engine.models.schemas import BillStatus, ElectricitySettings


class TestCalculateBill:
    """Test calculate_bill"""

    def test_units_and_amount(self):
        """Units are the reading difference and amount is units × rate"""
        result = calculate_bill(1200, 1350, 8.5)
        assert result.is_valid
        assert result.errors == []
        assert result.units == 150
        assert result.amount == 150 * 8.5
        assert result.previous_reading == 1200
        assert result.current_reading == 1350
        assert result.rate_per_unit == 8.5

    def test_equal_readings_are_valid_without_settings(self):
        """A meter that did not move is valid when no minimum applies"""
        result = calculate_bill(500, 500, 7)
        assert result.is_valid
        assert result.units == 0
        assert result.amount == 0

    def test_meter_regression_is_invalid(self):
        """Current below previous is always rejected"""
        result = calculate_bill(1500, 1400, 8)
        assert not result.is_valid
        assert "Current reading cannot be less than previous reading" in result.errors

    def test_meter_regression_invalid_regardless_of_settings(self, settings):
        """Regression is rejected even when settings are supplied"""
        loose = settings.model_copy(update={"minimum_units": -1000})
        result = calculate_bill(1500, 1400, 8, loose)
        assert not result.is_valid
        assert "Current reading cannot be less than previous reading" in result.errors

    def test_negative_readings(self):
        """Each negative reading gets its own message"""
        result = calculate_bill(-10, -5, 8)
        assert not result.is_valid
        assert "Previous reading cannot be negative" in result.errors
        assert "Current reading cannot be negative" in result.errors

    def test_invalid_result_still_carries_calculation(self):
        """Units and amount are returned even when rejected"""
        result = calculate_bill(300, 200, 5)
        assert not result.is_valid
        assert result.units == -100
        assert result.amount == -500

    def test_below_minimum_units(self, settings):
        """5 units against a minimum of 10 is invalid"""
        result = calculate_bill(1000, 1005, 8, settings)
        assert not result.is_valid
        assert "Units consumed (5) is below minimum threshold (10)" in result.errors

    def test_above_maximum_units(self, settings):
        """1500 units against a maximum of 1000 is invalid"""
        result = calculate_bill(1000, 2500, 8, settings)
        assert not result.is_valid
        assert "Units consumed (1500) exceeds maximum threshold (1000)" in result.errors
        # the advisory is still reported alongside
        assert HIGH_USAGE_WARNING in result.errors

    def test_exactly_500_units_is_valid(self, settings):
        """500 units sits inside the bounds and at the high-usage threshold"""
        result = calculate_bill(1000, 1500, 8, settings)
        assert result.is_valid
        assert result.units == 500
        assert result.amount == 4000

    def test_high_usage_is_only_a_warning(self, settings):
        """Consumption above 500 units warns but stays valid"""
        result = calculate_bill(1000, 1600, 8, settings)
        assert result.is_valid
        assert result.errors == [HIGH_USAGE_WARNING]

    def test_high_usage_warning_without_settings(self):
        """The warning does not depend on settings"""
        result = calculate_bill(0, 501, 1)
        assert result.is_valid
        assert HIGH_USAGE_WARNING in result.errors

    @pytest.mark.parametrize("previous,current", [(0, 10), (100, 437), (12345.5, 12400.25)])
    def test_amount_invariant(self, previous, current):
        """amount == units × rate for any non-regressing pair"""
        result = calculate_bill(previous, current, 6.5)
        assert result.units == current - previous
        assert result.amount == (current - previous) * 6.5


class TestBuildBill:
    """Test build_bill"""

    def test_valid_submission_creates_pending_bill(self, settings, now):
        """A valid reading becomes a PENDING bill at the owner's rate"""
        bill, calculation = build_bill(
            "owner-1", "tenant-1", "2024-03", 1000, 1120, settings, bill_id="bill-42", now=now
        )
        assert calculation.is_valid
        assert bill is not None
        assert bill.id == "bill-42"
        assert bill.status == BillStatus.PENDING
        assert bill.units == 120
        assert bill.rate_per_unit == 8.0
        assert bill.amount == 960
        assert bill.submitted_at == now

    def test_generates_bill_id(self, settings, now):
        """Bills without an id get a generated one"""
        bill, _ = build_bill("owner-1", "tenant-1", "2024-03", 1000, 1120, settings, now=now)
        assert bill.id.startswith("bill-")

    def test_rejected_reading_returns_no_bill(self, settings, now):
        """Invalid readings return the calculation without a bill"""
        bill, calculation = build_bill("owner-1", "tenant-1", "2024-03", 1000, 900, settings, now=now)
        assert bill is None
        assert not calculation.is_valid
        assert calculation.units == -100

    def test_malformed_month_is_rejected(self, settings, now):
        """The period key must be YYYY-MM"""
        bill, calculation = build_bill("owner-1", "tenant-1", "March 2024", 1000, 1100, settings, now=now)
        assert bill is None
        assert not calculation.is_valid
        assert "Billing month 'March 2024' must be in YYYY-MM format" in calculation.errors


class TestRecalculateBill:
    """Test recalculate_bill"""

    def test_approved_bill_is_not_changed(self, make_bill):
        """Approved amounts are fixed"""
        bill = make_bill(units=100, rate=8.0, status=BillStatus.APPROVED)
        result = recalculate_bill(bill, rate_per_unit=12.0)
        assert result.amount == 800
        assert result.rate_per_unit == 8.0

    def test_paid_bill_is_not_changed(self, make_bill):
        bill = make_bill(units=100, rate=8.0, status=BillStatus.PAID)
        assert recalculate_bill(bill, rate_per_unit=12.0).amount == 800

    def test_pending_bill_uses_new_rate(self, make_bill):
        """Open bills are repriced"""
        bill = make_bill(units=100, rate=8.0, status=BillStatus.PENDING)
        result = recalculate_bill(bill, rate_per_unit=12.0)
        assert result.units == 100
        assert result.rate_per_unit == 12.0
        assert result.amount == 1200
        # input bill untouched
        assert bill.amount == 800

    def test_pending_bill_keeps_its_rate_by_default(self, make_bill):
        bill = make_bill(units=50, rate=9.0, status=BillStatus.REJECTED)
        result = recalculate_bill(bill)
        assert result.amount == 450


class TestSettingsModel:
    """Settings accept the camelCase payload of the API layer"""

    def test_camel_case_payload(self):
        settings = ElectricitySettings.model_validate(
            {"ratePerUnit": 6, "dueDate": 10, "lateFeePercentage": 1.5, "minimumUnits": 0, "maximumUnits": 800}
        )
        assert settings.rate_per_unit == 6
        assert settings.due_date == 10
        assert settings.maximum_units == 800
