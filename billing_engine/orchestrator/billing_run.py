"""
billing_run.py
--------------
🧠 Monthly billing run: composes and stores an invoice for every approved bill.

Purpose:
--------
Controls the end-to-end flow for one owner and one billing period:
    1️⃣ Load the owner's electricity settings (defaults if none saved)
    2️⃣ Load the approved bills for the month
    3️⃣ Skip tenants already invoiced or without a base rent
    4️⃣ Compose each invoice (rent + electricity + late fees)
    5️⃣ Persist it (unless dry run) and summarize the run

A failure on one bill is logged and recorded in the summary; the run
continues with the next bill. A malformed month aborts the run with a
single failed entry.

Usage Example:
--------------
python -m billing_engine.orchestrator.billing_run --owner owner-1 --month 2024-01 --rents rents.json
python -m billing_engine.orchestrator.billing_run --owner owner-1 --rents rents.json --dry-run
"""

import argparse
import json
from datetime import datetime
from typing import Dict, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from billing_engine.agents.invoicing.invoice_composer import generate_electricity_invoice
from billing_engine.database.db_utils import (
    fetch_approved_bills_for_month,
    fetch_settings,
    insert_invoice,
    invoice_exists,
)
from billing_engine.utils.helpers import (
    format_month_year,
    get_due_date_for_month,
    is_valid_month,
    resolve_now,
    round_to_two,
)
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)


def run_monthly_billing(
    owner_id: str,
    month: str,
    base_rents: Dict[str, float],
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> dict:
    """
    Generate invoices for an owner's approved bills of ``month``.

    ``base_rents`` maps tenant id to monthly base rent.
    """
    logger.info(f"📅 Billing run for owner {owner_id}, month {month}{' (dry run)' if dry_run else ''}")
    now = resolve_now(now)
    summary = {
        "owner_id": owner_id,
        "month": month,
        "generated": [],
        "skipped": [],
        "failed": [],
        "total_amount": 0.0,
    }

    if not is_valid_month(month):
        logger.error(f"❌ Invalid billing month '{month}', expected YYYY-MM; aborting run.")
        summary["failed"].append({"tenant_id": None, "reason": f"invalid month '{month}'"})
        return summary

    settings = fetch_settings(owner_id)
    if settings is None:
        logger.error(f"❌ Could not load settings for owner {owner_id}; aborting run.")
        summary["failed"].append({"tenant_id": None, "reason": "settings unavailable"})
        return summary

    due_date = get_due_date_for_month(month, settings.due_date)
    bills = fetch_approved_bills_for_month(owner_id, month)

    for bill in bills:
        if bill.tenant_id not in base_rents:
            logger.warning(f"⚠️ No base rent for tenant {bill.tenant_id}, skipping")
            summary["skipped"].append({"tenant_id": bill.tenant_id, "reason": "no base rent"})
            continue

        if invoice_exists(bill.tenant_id, month):
            logger.info(f"ℹ️ Invoice already exists for tenant {bill.tenant_id}, month {month}")
            summary["skipped"].append({"tenant_id": bill.tenant_id, "reason": "already invoiced"})
            continue

        try:
            invoice = generate_electricity_invoice(
                bill,
                base_rents[bill.tenant_id],
                settings,
                due_date=due_date,
                now=now,
            )
            if not dry_run and not insert_invoice(invoice):
                summary["failed"].append({"tenant_id": bill.tenant_id, "reason": "insert failed"})
                continue
        except (ValidationError, SQLAlchemyError, ValueError) as e:
            logger.error(f"❌ Failed to invoice tenant {bill.tenant_id}: {e}")
            summary["failed"].append({"tenant_id": bill.tenant_id, "reason": str(e)})
            continue

        summary["generated"].append(invoice)
        summary["total_amount"] = round_to_two(summary["total_amount"] + invoice.amount)

    logger.info(
        f"✅ Billing run complete: {len(summary['generated'])} generated, "
        f"{len(summary['skipped'])} skipped, {len(summary['failed'])} failed"
    )
    return summary


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate monthly rent + electricity invoices")
    parser.add_argument("--owner", required=True, help="Owner id")
    parser.add_argument("--month", help="Billing period YYYY-MM (defaults to the current month)")
    parser.add_argument("--rents", required=True, help="JSON file mapping tenant id to base rent")
    parser.add_argument("--dry-run", action="store_true", help="Compose invoices without saving them")
    args = parser.parse_args(argv)
    if args.month is not None and not is_valid_month(args.month):
        parser.error(f"--month must be YYYY-MM, got '{args.month}'")

    with open(args.rents, "r", encoding="utf-8") as f:
        base_rents = json.load(f)

    month = args.month or format_month_year(datetime.now())
    summary = run_monthly_billing(args.owner, month, base_rents, dry_run=args.dry_run)

    for invoice in summary["generated"]:
        print(f"  {invoice.receipt_no}  tenant={invoice.tenant_id}  amount={invoice.amount}  due={invoice.due_date}")
    print(
        f"Generated {len(summary['generated'])}, skipped {len(summary['skipped'])}, "
        f"failed {len(summary['failed'])} | total {summary['total_amount']}"
    )
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
