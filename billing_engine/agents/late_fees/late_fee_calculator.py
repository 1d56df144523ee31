"""
late_fee_calculator.py
----------------------
⏰ Computes the penalty on an overdue electricity bill.

Purpose:
--------
The late fee is the bill's percentage charge applied once per day
overdue, capped at half the bill.

Workflow:
---------
1️⃣ Return 0 when "now" is on or before the due date (the due day itself is not late).
2️⃣ days_overdue = ceil(now - due) in days.
3️⃣ fee = bill_amount × percentage / 100 × days_overdue.
4️⃣ Cap at LATE_FEE_CAP_RATIO × bill_amount.

Inputs:
-------
- bill_amount (float)
- due_date ("YYYY-MM-DD", ISO datetime string, date or datetime)
- late_fee_percentage (float)
- now (optional datetime; wall clock when omitted)

Outputs:
--------
- Float (late fee)

Depends On:
-----------
- billing_engine.utils.config
- billing_engine.utils.helpers
- billing_engine.utils.logger
"""

import math
from datetime import date, datetime
from typing import Optional, Union

from billing_engine.utils.config import LATE_FEE_CAP_RATIO
from billing_engine.utils.helpers import parse_due_date, resolve_now
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def days_overdue(due_date: Union[str, date, datetime], now: Optional[datetime] = None) -> int:
    """
    Whole days past the due date, rounded up; 0 when not overdue.

    Date-only due dates are compared by calendar day. Due datetimes are
    compared to the instant and partial days count as a full day.
    """
    now = resolve_now(now)
    due = parse_due_date(due_date)

    if not isinstance(due, datetime):
        return max(0, (now.date() - due).days)

    if due.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=due.tzinfo)
    elif due.tzinfo is None and now.tzinfo is not None:
        due = due.replace(tzinfo=now.tzinfo)

    elapsed = (now - due).total_seconds()
    if elapsed <= 0:
        return 0
    return math.ceil(elapsed / SECONDS_PER_DAY)


def calculate_late_fees(
    bill_amount: float,
    due_date: Union[str, date, datetime],
    late_fee_percentage: float,
    now: Optional[datetime] = None,
) -> float:
    """
    Late fee for ``bill_amount`` as of ``now``.

    The percentage is charged per day overdue (2% for 10 days is 20%),
    never exceeding half of the bill.
    """
    overdue = days_overdue(due_date, now)
    if overdue == 0:
        return 0

    daily_fee = (bill_amount * late_fee_percentage) / 100
    max_late_fee = bill_amount * LATE_FEE_CAP_RATIO
    fee = min(daily_fee * overdue, max_late_fee)

    logger.info(f"⏰ {overdue} day(s) overdue on {bill_amount}: late fee {fee}")
    return fee
