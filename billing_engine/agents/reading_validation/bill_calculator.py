"""
bill_calculator.py
------------------
🧮 Turns a pair of meter readings into a priced consumption record.

Purpose:
--------
Given the previous and current meter readings and a rate per unit,
this module computes the consumed units and their cost, and describes
every reason the reading pair should be rejected.

Workflow:
---------
1️⃣ Check readings are non-negative and the meter did not regress.
2️⃣ units = current - previous; amount = units × rate.
3️⃣ If owner settings are given, enforce minimum / maximum units.
4️⃣ Append an advisory warning for unusually high consumption
   (does not affect validity).

Inputs:
-------
- previous_reading, current_reading, rate_per_unit (float)
- ElectricitySettings (optional)

Outputs:
--------
- BillCalculationResult (units and amount are always filled, even when invalid)

Depends On:
-----------
- billing_engine.models.schemas
- billing_engine.utils.config
- billing_engine.utils.logger
"""

from datetime import datetime
from typing import Optional, Tuple

from billing_engine.models.schemas import (
    BillCalculationResult,
    BillStatus,
    ElectricityBill,
    ElectricitySettings,
)
from billing_engine.utils.config import HIGH_USAGE_THRESHOLD
from billing_engine.utils.helpers import is_valid_month, new_bill_id, resolve_now
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)

HIGH_USAGE_WARNING = "Warning: Unusually high consumption detected"

# Bills in these states keep the amount they were approved with
LOCKED_STATUSES = (BillStatus.APPROVED, BillStatus.PAID)


def _num(value):
    return int(value) if float(value).is_integer() else value


def calculate_bill(
    previous_reading: float,
    current_reading: float,
    rate_per_unit: float,
    settings: Optional[ElectricitySettings] = None,
) -> BillCalculationResult:
    """
    Validate a reading pair and compute consumed units and cost.

    Hard errors flip ``is_valid``; the high-usage warning shares the same
    error list but leaves the result valid.
    """
    errors = []
    is_valid = True

    if previous_reading < 0:
        errors.append("Previous reading cannot be negative")
        is_valid = False

    if current_reading < 0:
        errors.append("Current reading cannot be negative")
        is_valid = False

    if current_reading < previous_reading:
        errors.append("Current reading cannot be less than previous reading")
        is_valid = False

    units = current_reading - previous_reading

    if settings is not None:
        if units < settings.minimum_units:
            errors.append(
                f"Units consumed ({_num(units)}) is below minimum threshold ({_num(settings.minimum_units)})"
            )
            is_valid = False

        if units > settings.maximum_units:
            errors.append(
                f"Units consumed ({_num(units)}) exceeds maximum threshold ({_num(settings.maximum_units)})"
            )
            is_valid = False

    if units > HIGH_USAGE_THRESHOLD:
        logger.debug(f"⚠️ {units} units exceeds high-usage threshold of {HIGH_USAGE_THRESHOLD}")
        errors.append(HIGH_USAGE_WARNING)

    amount = units * rate_per_unit

    if is_valid:
        logger.info(f"✅ Bill calculated: {units} units × {rate_per_unit} = {amount}")
    else:
        logger.warning(f"⚠️ Reading rejected ({previous_reading} → {current_reading}): {'; '.join(errors)}")

    return BillCalculationResult(
        units=units,
        amount=amount,
        rate_per_unit=rate_per_unit,
        previous_reading=previous_reading,
        current_reading=current_reading,
        is_valid=is_valid,
        errors=errors,
    )


def build_bill(
    owner_id: str,
    tenant_id: str,
    month: str,
    previous_reading: float,
    current_reading: float,
    settings: ElectricitySettings,
    bill_id: Optional[str] = None,
    image_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[Optional[ElectricityBill], BillCalculationResult]:
    """
    Build a PENDING bill record from a tenant's reading submission.

    Returns ``(None, calculation)`` when the readings are rejected, so the
    caller can show the attempted calculation next to the reasons.
    """
    calculation = calculate_bill(previous_reading, current_reading, settings.rate_per_unit, settings)

    if not is_valid_month(month):
        calculation.errors.append(f"Billing month '{month}' must be in YYYY-MM format")
        calculation.is_valid = False

    if not calculation.is_valid:
        return None, calculation

    bill = ElectricityBill(
        id=bill_id or new_bill_id(),
        owner_id=owner_id,
        tenant_id=tenant_id,
        month=month,
        previous_reading=previous_reading,
        current_reading=current_reading,
        units=calculation.units,
        rate_per_unit=settings.rate_per_unit,
        amount=calculation.amount,
        status=BillStatus.PENDING,
        submitted_at=resolve_now(now),
        image_url=image_url,
    )
    logger.info(f"📄 Built pending bill for tenant {tenant_id}, month {month}: {bill.amount}")
    return bill, calculation


def recalculate_bill(bill: ElectricityBill, rate_per_unit: Optional[float] = None) -> ElectricityBill:
    """
    Recompute units and amount for a bill that is still open.

    Approved (and paid) bills are returned unchanged: their amount is
    fixed at approval time.
    """
    if bill.status in LOCKED_STATUSES:
        logger.info(f"🔒 Bill {bill.id} is {bill.status.value}; keeping amount {bill.amount}")
        return bill

    rate = bill.rate_per_unit if rate_per_unit is None else rate_per_unit
    units = bill.current_reading - bill.previous_reading
    return bill.model_copy(update={"units": units, "rate_per_unit": rate, "amount": units * rate})
