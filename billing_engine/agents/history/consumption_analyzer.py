"""
consumption_analyzer.py
-----------------------
📊 Aggregate statistics and a next-period forecast from a tenant's bills.

Purpose:
--------
Summarizes approved electricity bills (totals, averages, extremes) and
predicts next period's consumption from the most recent approved bills.

Workflow:
---------
1️⃣ Load bills into a DataFrame (order preserved).
2️⃣ Keep APPROVED bills only.
3️⃣ Stats: sums / means over units and amount, min / max over units.
4️⃣ Prediction: mean and population std-dev of the last 6 approved bills'
   units; confidence = 1 - std/mean, floored at 0, capped at 0.95.

Preconditions:
--------------
``bills`` must be sorted ascending by billing period (oldest first).
The forecast window is taken from the end of the list.

Outputs:
--------
- ConsumptionStats
- BillPrediction
- DataFrame (per-month history of approved bills)

Depends On:
-----------
- pandas
- billing_engine.utils.helpers
- billing_engine.utils.config
- billing_engine.utils.logger
"""

from typing import Sequence

import pandas as pd

from billing_engine.models.schemas import BillPrediction, BillStatus, ConsumptionStats
from billing_engine.utils.config import (
    CONFIDENCE_CEILING,
    PREDICTION_MIN_HISTORY,
    PREDICTION_WINDOW,
)
from billing_engine.utils.helpers import bills_to_frame, round_half_up
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)


def _approved(bills: Sequence) -> pd.DataFrame:
    df = bills_to_frame(bills)
    return df[df["status"] == BillStatus.APPROVED.value]


def get_consumption_stats(bills: Sequence) -> ConsumptionStats:
    """
    Totals, averages and extremes over the approved bills.

    No bills (or none approved) gives all-zero stats.
    """
    approved = _approved(bills)
    if approved.empty:
        logger.info("ℹ️ No approved bills; returning empty consumption stats.")
        return ConsumptionStats()

    units = approved["units"]
    amounts = approved["amount"]

    stats = ConsumptionStats(
        total_units=float(units.sum()),
        average_units=float(units.mean()),
        total_amount=float(amounts.sum()),
        average_amount=float(amounts.mean()),
        highest_consumption=float(units.max()),
        lowest_consumption=float(units.min()),
    )
    logger.info(f"📊 Stats over {len(approved)} approved bill(s): avg {stats.average_units} units")
    return stats


def predict_next_bill(bills: Sequence, current_reading: float, rate_per_unit: float) -> BillPrediction:
    """
    Forecast next period's units and amount.

    ``bills`` must be ordered oldest to newest. At least
    PREDICTION_MIN_HISTORY bills are required; this count is taken over
    all bills, before filtering to approved ones.
    """
    if len(bills) < PREDICTION_MIN_HISTORY:
        logger.info(f"ℹ️ Only {len(bills)} bill(s); need {PREDICTION_MIN_HISTORY} to predict.")
        return BillPrediction()

    recent = _approved(bills)["units"].tail(PREDICTION_WINDOW)
    if recent.empty:
        logger.info("ℹ️ No approved bills in history; cannot predict.")
        return BillPrediction()

    mean = float(recent.mean())
    std_dev = float(recent.std(ddof=0))

    if mean == 0:
        confidence = 0.0
    else:
        confidence = max(0.0, 1 - std_dev / mean)
    confidence = min(confidence, CONFIDENCE_CEILING)

    predicted_units = round_half_up(mean)
    prediction = BillPrediction(
        predicted_units=predicted_units,
        predicted_amount=round_half_up(predicted_units * rate_per_unit),
        confidence=confidence,
        predicted_reading=current_reading + predicted_units,
        sample_size=len(recent),
    )
    logger.info(
        f"🔮 Predicted {prediction.predicted_units} units / {prediction.predicted_amount} "
        f"(confidence {confidence:.2f}, n={len(recent)})"
    )
    return prediction


def consumption_history(bills: Sequence) -> pd.DataFrame:
    """
    Per-month units and amount of the approved bills, oldest first.
    """
    approved = _approved(bills)
    return (
        approved.groupby("month", sort=True)[["units", "amount"]]
        .sum()
        .reset_index()
    )
