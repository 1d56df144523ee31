"""
db_utils.py
------------
🗄️ Record store helpers for electricity settings, bills and invoices.

Purpose:
--------
Provides the CRUD operations the monthly billing run needs. The
calculators never import this module; it exists so invoices composed by
the engine can be persisted and history can be loaded in period order.

Dependencies:
-------------
- SQLAlchemy ORM
- billing_engine.utils.config (for DB_URL and owner defaults)
- billing_engine.database.models (ORM classes)
- billing_engine.models.schemas (pydantic records returned to callers)
"""
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from billing_engine.database.models import (
    ElectricityBillRecord,
    ElectricitySettingsRecord,
    InvoiceRecord,
)
from billing_engine.models.schemas import (
    BillStatus,
    ElectricityBill,
    ElectricitySettings,
    Invoice,
    RentBreakdown,
)
from billing_engine.utils import config
from billing_engine.utils.helpers import new_bill_id
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)

# ----------------------------------------------------------------------
# 1️⃣ Setup Engine and Session Factory (Lazy-loaded)
# ----------------------------------------------------------------------
_engine = None
_SessionLocal = None


def configure_engine(db_url=None, **engine_kwargs):
    """
    Replace the engine (e.g. to point tests at a temporary database).
    """
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(db_url or config.DB_URL, **engine_kwargs)
    _SessionLocal = sessionmaker(bind=_engine)
    return _engine


def get_engine():
    """Lazily create and return the SQLAlchemy engine."""
    global _engine
    if _engine is None:
        configure_engine()
    return _engine


def get_session():
    """Lazily create and return a new database session."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine())
    return _SessionLocal()


# ----------------------------------------------------------------------
# 2️⃣ Settings
# ----------------------------------------------------------------------
def default_settings(owner_id: str) -> ElectricitySettings:
    """Settings an owner gets before saving their own."""
    return ElectricitySettings(
        owner_id=owner_id,
        rate_per_unit=config.DEFAULT_RATE_PER_UNIT,
        due_date=config.DEFAULT_DUE_DAY,
        late_fee_percentage=config.DEFAULT_LATE_FEE_PERCENTAGE,
        minimum_units=config.DEFAULT_MINIMUM_UNITS,
        maximum_units=config.DEFAULT_MAXIMUM_UNITS,
    )


def upsert_settings(settings: ElectricitySettings) -> bool:
    """
    Creates or replaces the settings row for ``settings.owner_id``.
    """
    session = get_session()
    try:
        values = settings.model_dump(exclude={"id"})
        values["billing_cycle"] = settings.billing_cycle.value
        row = session.query(ElectricitySettingsRecord).filter_by(owner_id=settings.owner_id).first()
        if row is None:
            session.add(ElectricitySettingsRecord(**values))
        else:
            for key, value in values.items():
                setattr(row, key, value)
        session.commit()
        logger.info(f"💾 Saved electricity settings for owner {settings.owner_id}")
        return True
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to save settings for owner {settings.owner_id}: {e}")
        session.rollback()
        return False
    finally:
        session.close()


def fetch_settings(owner_id: str) -> Optional[ElectricitySettings]:
    """
    Returns the owner's settings, or the configured defaults when none are saved.
    Returns None on database failure.
    """
    session = get_session()
    try:
        row = session.query(ElectricitySettingsRecord).filter_by(owner_id=owner_id).first()
        if row is None:
            logger.info(f"ℹ️ No settings for owner {owner_id}; using defaults.")
            return default_settings(owner_id)
        return ElectricitySettings(
            id=str(row.id),
            owner_id=row.owner_id,
            rate_per_unit=row.rate_per_unit,
            due_date=row.due_date,
            is_enabled=row.is_enabled,
            late_fee_percentage=row.late_fee_percentage,
            minimum_units=row.minimum_units,
            maximum_units=row.maximum_units,
            billing_cycle=row.billing_cycle,
        )
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to fetch settings for owner {owner_id}: {e}")
        return None
    finally:
        session.close()


# ----------------------------------------------------------------------
# 3️⃣ Bills
# ----------------------------------------------------------------------
def insert_bill(bill: ElectricityBill) -> bool:
    """
    Inserts a bill. Returns False if the tenant already has a bill for the month.
    """
    bill_id = bill.id or new_bill_id()
    session = get_session()
    try:
        values = bill.model_dump()
        values["id"] = bill_id
        values["status"] = bill.status.value
        session.add(ElectricityBillRecord(**values))
        session.commit()
        logger.info(f"📄 Inserted bill {bill_id} for tenant {bill.tenant_id}, month {bill.month}")
        return True
    except IntegrityError:
        logger.warning(f"⚠️ Bill already submitted for tenant {bill.tenant_id}, month {bill.month}")
        session.rollback()
        return False
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to insert bill {bill_id}: {e}")
        session.rollback()
        return False
    finally:
        session.close()


def _bill_from_row(row: ElectricityBillRecord) -> ElectricityBill:
    return ElectricityBill(
        id=row.id,
        owner_id=row.owner_id,
        tenant_id=row.tenant_id,
        month=row.month,
        previous_reading=row.previous_reading,
        current_reading=row.current_reading,
        units=row.units,
        rate_per_unit=row.rate_per_unit,
        amount=row.amount,
        status=row.status,
        submitted_at=row.submitted_at,
        approved_at=row.approved_at,
        image_url=row.image_url,
        notes=row.notes,
    )


def fetch_bills_for_tenant(tenant_id: str) -> List[ElectricityBill]:
    """
    All bills of a tenant, oldest billing period first (the order the
    history analyzer expects).
    """
    session = get_session()
    try:
        rows = (
            session.query(ElectricityBillRecord)
            .filter_by(tenant_id=tenant_id)
            .order_by(ElectricityBillRecord.month.asc())
            .all()
        )
        bills = [_bill_from_row(row) for row in rows]
        logger.info(f"📂 Retrieved {len(bills)} bill(s) for tenant {tenant_id}.")
        return bills
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to fetch bills for tenant {tenant_id}: {e}")
        return []
    finally:
        session.close()


def fetch_approved_bills_for_month(owner_id: str, month: str) -> List[ElectricityBill]:
    """Approved bills of an owner's tenants for one billing period."""
    session = get_session()
    try:
        rows = (
            session.query(ElectricityBillRecord)
            .filter_by(owner_id=owner_id, month=month, status=BillStatus.APPROVED.value)
            .order_by(ElectricityBillRecord.tenant_id.asc())
            .all()
        )
        bills = [_bill_from_row(row) for row in rows]
        logger.info(f"📂 Retrieved {len(bills)} approved bill(s) for owner {owner_id}, month {month}.")
        return bills
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to fetch approved bills for owner {owner_id}: {e}")
        return []
    finally:
        session.close()


# ----------------------------------------------------------------------
# 4️⃣ Invoices
# ----------------------------------------------------------------------
def invoice_exists(tenant_id: str, month: str) -> bool:
    session = get_session()
    try:
        return session.query(InvoiceRecord).filter_by(tenant_id=tenant_id, month=month).first() is not None
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to look up invoice for tenant {tenant_id}, month {month}: {e}")
        return False
    finally:
        session.close()


def insert_invoice(invoice: Invoice) -> bool:
    """
    Persists a composed invoice with its breakdown columns.
    Returns False if the tenant is already invoiced for the month.
    """
    session = get_session()
    try:
        breakdown = invoice.breakdown or RentBreakdown(base_rent=invoice.amount, electricity=0)
        session.add(
            InvoiceRecord(
                id=invoice.id,
                owner_id=invoice.owner_id,
                tenant_id=invoice.tenant_id,
                month=invoice.month,
                amount=invoice.amount,
                base_rent=breakdown.base_rent,
                electricity=breakdown.electricity,
                late_fees=breakdown.late_fees,
                other_charges=breakdown.other_charges,
                status=invoice.status.value,
                due_date=invoice.due_date,
                receipt_no=invoice.receipt_no,
            )
        )
        session.commit()
        logger.info(f"💾 Inserted invoice {invoice.id} ({invoice.receipt_no}) amount {invoice.amount}")
        return True
    except IntegrityError:
        logger.warning(f"⚠️ Invoice already exists for tenant {invoice.tenant_id}, month {invoice.month}")
        session.rollback()
        return False
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to insert invoice {invoice.id}: {e}")
        session.rollback()
        return False
    finally:
        session.close()


def fetch_invoices_for_owner(owner_id: str, month: Optional[str] = None) -> List[Invoice]:
    """Invoices of an owner, optionally for one month."""
    session = get_session()
    try:
        query = session.query(InvoiceRecord).filter_by(owner_id=owner_id)
        if month:
            query = query.filter_by(month=month)
        invoices = []
        for row in query.order_by(InvoiceRecord.month.asc(), InvoiceRecord.tenant_id.asc()).all():
            invoices.append(
                Invoice(
                    id=row.id,
                    owner_id=row.owner_id,
                    tenant_id=row.tenant_id,
                    month=row.month,
                    amount=row.amount,
                    status=row.status,
                    due_date=row.due_date,
                    receipt_no=row.receipt_no,
                    breakdown=RentBreakdown(
                        base_rent=row.base_rent or 0.0,
                        electricity=row.electricity or 0.0,
                        late_fees=row.late_fees or 0.0,
                        other_charges=row.other_charges or 0.0,
                    ),
                )
            )
        logger.info(f"📂 Retrieved {len(invoices)} invoice(s) for owner {owner_id}.")
        return invoices
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to fetch invoices for owner {owner_id}: {e}")
        return []
    finally:
        session.close()
