# billing_engine/database/models.py


from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime
from sqlalchemy import Index, UniqueConstraint
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()


class ElectricitySettingsRecord(Base):
    """
    Owner-level electricity configuration (one row per owner).
    """
    __tablename__ = "electricity_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(100), nullable=False, unique=True)
    rate_per_unit = Column(Float, nullable=False)
    due_date = Column(Integer, nullable=False)
    is_enabled = Column(Boolean, default=True)
    late_fee_percentage = Column(Float, default=0.0)
    minimum_units = Column(Float, default=0.0)
    maximum_units = Column(Float, default=1000.0)
    billing_cycle = Column(String(20), default="MONTHLY")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ElectricityBillRecord(Base):
    """
    One tenant-month meter reading submission.
    """
    __tablename__ = "electricity_bills"
    __table_args__ = (
        UniqueConstraint("tenant_id", "month", name="uq_electricity_bill_tenant_month"),
        Index("ix_electricity_bills_owner_month", "owner_id", "month"),
    )

    id = Column(String(64), primary_key=True)
    owner_id = Column(String(100), nullable=False)
    tenant_id = Column(String(100), nullable=False)
    month = Column(String(7), nullable=False)
    previous_reading = Column(Float, nullable=False)
    current_reading = Column(Float, nullable=False)
    units = Column(Float, nullable=False)
    rate_per_unit = Column(Float, nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(String(20), default="PENDING")
    image_url = Column(String(500))
    notes = Column(String(500))
    submitted_at = Column(DateTime, default=datetime.utcnow)
    approved_at = Column(DateTime)


class InvoiceRecord(Base):
    """
    Payable rent + electricity invoice for a tenant-month.
    """
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("tenant_id", "month", name="uq_invoice_tenant_month"),
    )

    id = Column(String(64), primary_key=True)
    owner_id = Column(String(100), nullable=False)
    tenant_id = Column(String(100), nullable=False)
    month = Column(String(7), nullable=False)
    amount = Column(Float, nullable=False)
    base_rent = Column(Float)
    electricity = Column(Float)
    late_fees = Column(Float, default=0.0)
    other_charges = Column(Float, default=0.0)
    status = Column(String(20), default="DUE")
    due_date = Column(String(10), nullable=False)
    receipt_no = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)
