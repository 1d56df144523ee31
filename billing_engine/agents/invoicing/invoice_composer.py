"""
invoice_composer.py
-------------------
🧾 Merges base rent, electricity and late fees into one payable invoice.

Purpose:
--------
Composes the rent-plus-electricity total for a tenant-month with an
itemized breakdown, and materializes it into an Invoice record.

Workflow:
---------
1️⃣ breakdown = base rent + electricity amount (+ late fees, other charges).
2️⃣ Late fees accrue only for APPROVED bills and only when settings are given.
3️⃣ The due date is derived from the owner's due day: this month, or next
   month once that day has started (any moment past its midnight).
4️⃣ final_amount is the exact sum of the breakdown.

Inputs:
-------
- base_rent (float)
- ElectricityBill
- ElectricitySettings (optional)

Outputs:
--------
- RentIntegrationResult
- Invoice (status DUE, receipt number traceable to the bill)

Depends On:
-----------
- python-dateutil
- billing_engine.agents.late_fees.late_fee_calculator
- billing_engine.models.schemas
- billing_engine.utils.helpers
- billing_engine.utils.logger
"""

from datetime import date, datetime, time
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from billing_engine.agents.late_fees.late_fee_calculator import calculate_late_fees
from billing_engine.models.schemas import (
    BillStatus,
    ElectricityBill,
    ElectricitySettings,
    Invoice,
    InvoiceStatus,
    RentBreakdown,
    RentIntegrationResult,
)
from billing_engine.utils.helpers import generate_invoice_id, resolve_now, to_iso_date
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)


def _calculate_due_date(due_day_of_month: int, now: datetime) -> str:
    """
    Next occurrence of the due day: this month if its start (midnight) is not
    behind ``now``, otherwise the same day next month. Days past a month's end
    are clamped to its last day.
    """
    today = now.date()
    due = today + relativedelta(day=due_day_of_month)
    if datetime.combine(due, time.min, tzinfo=now.tzinfo) < now:
        due = today + relativedelta(months=1, day=due_day_of_month)
    return due.isoformat()


def integrate_with_rent(
    base_rent: float,
    electricity_bill: ElectricityBill,
    settings: Optional[ElectricitySettings] = None,
    due_date: Optional[Union[str, date, datetime]] = None,
    now: Optional[datetime] = None,
) -> RentIntegrationResult:
    """
    Combine base rent with an electricity bill.

    ``due_date`` overrides the due date derived from ``settings.due_date``;
    use it when invoicing a period whose due date is already known.
    """
    now = resolve_now(now)
    breakdown = RentBreakdown(
        base_rent=base_rent,
        electricity=electricity_bill.amount,
        late_fees=0,
        other_charges=0,
    )

    if settings is not None and electricity_bill.status == BillStatus.APPROVED:
        effective_due = due_date if due_date is not None else _calculate_due_date(settings.due_date, now)
        breakdown.late_fees = calculate_late_fees(
            electricity_bill.amount,
            effective_due,
            settings.late_fee_percentage,
            now=now,
        )

    final_amount = breakdown.base_rent + breakdown.electricity + breakdown.late_fees + breakdown.other_charges

    logger.info(
        f"🧾 Rent {base_rent} + electricity {electricity_bill.amount} "
        f"+ late fees {breakdown.late_fees} = {final_amount}"
    )
    return RentIntegrationResult(
        total_rent=base_rent,
        electricity_amount=electricity_bill.amount,
        final_amount=final_amount,
        breakdown=breakdown,
    )


def generate_electricity_invoice(
    electricity_bill: ElectricityBill,
    base_rent: float,
    settings: Optional[ElectricitySettings] = None,
    due_date: Optional[Union[str, date, datetime]] = None,
    invoice_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Invoice:
    """
    Build a DUE invoice for a tenant-month.

    Without settings the invoice falls due today. The receipt number is
    ``EL-<bill id>``; ``invoice_id`` defaults to a time-based unique id.
    """
    now = resolve_now(now)
    integration = integrate_with_rent(base_rent, electricity_bill, settings, due_date=due_date, now=now)

    if due_date is not None:
        invoice_due = to_iso_date(due_date) if not isinstance(due_date, str) else due_date[:10]
    elif settings is not None:
        invoice_due = _calculate_due_date(settings.due_date, now)
    else:
        invoice_due = now.date().isoformat()

    invoice = Invoice(
        id=invoice_id or generate_invoice_id(now),
        owner_id=electricity_bill.owner_id,
        tenant_id=electricity_bill.tenant_id,
        month=electricity_bill.month,
        amount=integration.final_amount,
        status=InvoiceStatus.DUE,
        due_date=invoice_due,
        receipt_no=f"EL-{electricity_bill.id}",
        breakdown=integration.breakdown,
    )
    logger.info(f"✅ Invoice {invoice.id} for tenant {invoice.tenant_id}, month {invoice.month}: {invoice.amount}")
    return invoice
