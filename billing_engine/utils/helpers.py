"""
helpers.py
-----------
🧰 Common utility functions shared by the billing calculators.

Purpose:
--------
Centralized helper methods used by all agents and the record store.
Includes:
- Clock resolution (injectable "now")
- Date / billing-period parsing and due-date arithmetic
- Rounding helpers
- Conversion of bill records into pandas DataFrames

Dependencies:
-------------
- pandas
- python-dateutil
- billing_engine.utils.logger

Usage Example:
--------------
from billing_engine.utils.helpers import bills_to_frame
df = bills_to_frame(bills)
"""

import math
import re
import uuid
from datetime import date, datetime
from typing import Iterable, Optional, Tuple, Union

import pandas as pd
from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")
BILL_FRAME_COLUMNS = ["id", "month", "previous_reading", "current_reading", "units", "amount", "status"]


# ----------------------------------------------------------------------
# 1️⃣ Clock
# ----------------------------------------------------------------------
def resolve_now(now: Optional[datetime] = None) -> datetime:
    """
    Returns the given clock value, or the wall-clock time when none is supplied.
    """
    return now if now is not None else datetime.now()


# ----------------------------------------------------------------------
# 2️⃣ Dates and billing periods
# ----------------------------------------------------------------------
def parse_due_date(value: Union[str, date, datetime]) -> Union[date, datetime]:
    """
    Normalizes a due date.

    Date-only inputs ("2024-03-05" or a ``date``) stay dates, so they are
    compared by calendar day; anything carrying a time of day becomes a
    ``datetime``.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value
    text = str(value).strip()
    parsed = dateparser.isoparse(text)
    if len(text) <= 10:
        return parsed.date()
    return parsed


def to_iso_date(value: Union[date, datetime]) -> str:
    """Formats a date as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_month(month: str) -> Tuple[int, int]:
    """
    Splits a "YYYY-MM" billing period key into (year, month).
    Raises ValueError on a malformed key.
    """
    match = MONTH_KEY_PATTERN.match(str(month))
    if not match:
        raise ValueError(f"Invalid billing month '{month}', expected YYYY-MM")
    return int(match.group(1)), int(match.group(2))


def is_valid_month(month: str) -> bool:
    return bool(MONTH_KEY_PATTERN.match(str(month)))


def format_month_year(value: Union[date, datetime]) -> str:
    """Formats a date as a YYYY-MM billing period key."""
    return f"{value.year}-{value.month:02d}"


def get_due_date_for_month(month: str, due_day: int) -> date:
    """
    Due date for a billing period: ``due_day`` of the month after the period,
    clamped to that month's last day.

    Example: get_due_date_for_month("2024-01", 31) -> 2024-02-29
    """
    year, month_num = parse_month(month)
    return date(year, month_num, 1) + relativedelta(months=1, day=due_day)


# ----------------------------------------------------------------------
# 3️⃣ Numbers and identifiers
# ----------------------------------------------------------------------
def round_half_up(value: float) -> int:
    """Rounds .5 upwards (towards +inf) instead of to the nearest even number."""
    return int(math.floor(value + 0.5))


def round_to_two(value: float) -> float:
    return round(float(value), 2)


def generate_invoice_id(now: Optional[datetime] = None) -> str:
    """
    Time-based invoice id with a random suffix, unique across concurrent
    calls within the same millisecond.
    """
    millis = int(resolve_now(now).timestamp() * 1000)
    return f"invoice-{millis}-{uuid.uuid4().hex[:8]}"


def new_bill_id() -> str:
    return f"bill-{uuid.uuid4().hex}"


# ----------------------------------------------------------------------
# 4️⃣ DataFrame conversion
# ----------------------------------------------------------------------
def bills_to_frame(bills: Iterable) -> pd.DataFrame:
    """
    Converts bill records (pydantic models, ORM rows or plain dicts) into a
    DataFrame, preserving the caller's order.
    """
    rows = []
    for bill in bills:
        if hasattr(bill, "model_dump"):
            data = bill.model_dump()
        elif isinstance(bill, dict):
            data = {_snake(k): v for k, v in bill.items()}
        else:
            data = {col: getattr(bill, col, None) for col in BILL_FRAME_COLUMNS}
        status = data.get("status")
        data["status"] = getattr(status, "value", status)
        rows.append({col: data.get(col) for col in BILL_FRAME_COLUMNS})

    df = pd.DataFrame(rows, columns=BILL_FRAME_COLUMNS)
    df["units"] = pd.to_numeric(df["units"]).astype(float)
    df["amount"] = pd.to_numeric(df["amount"]).astype(float)
    logger.debug(f"📄 Built bill frame | Rows: {len(df)}")
    return df


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()
