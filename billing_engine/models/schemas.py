"""Pydantic models for electricity settings, bills, invoices and calculation results"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BillStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


class InvoiceStatus(str, Enum):
    DUE = "DUE"
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    OVERDUE = "OVERDUE"


class BillingCycle(str, Enum):
    MONTHLY = "MONTHLY"
    BI_MONTHLY = "BI_MONTHLY"
    QUARTERLY = "QUARTERLY"


class BillingModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ----- Records -----
class ElectricitySettings(BillingModel):
    """Owner-level electricity configuration (read-only here)"""
    id: Optional[str] = None
    owner_id: Optional[str] = None
    rate_per_unit: float
    due_date: int = Field(description="Day of month the bill falls due")
    is_enabled: bool = True
    late_fee_percentage: float = 0.0
    minimum_units: float = 0.0
    maximum_units: float = 1000.0
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class ElectricitySettingsUpdate(BillingModel):
    """Partial settings as submitted from an owner's edit form"""
    rate_per_unit: Optional[float] = None
    due_date: Optional[int] = None
    is_enabled: Optional[bool] = None
    late_fee_percentage: Optional[float] = None
    minimum_units: Optional[float] = None
    maximum_units: Optional[float] = None
    billing_cycle: Optional[BillingCycle] = None


class ElectricityBill(BillingModel):
    """One tenant-month meter reading submission"""
    id: Optional[str] = None
    owner_id: str
    tenant_id: str
    month: str = Field(description="Billing period key, YYYY-MM")
    previous_reading: float
    current_reading: float
    units: float
    rate_per_unit: float
    amount: float
    status: BillStatus = BillStatus.PENDING
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None


class RentBreakdown(BillingModel):
    base_rent: float
    electricity: float
    late_fees: float = 0.0
    other_charges: float = 0.0

    @property
    def total(self) -> float:
        return self.base_rent + self.electricity + self.late_fees + self.other_charges


class Invoice(BillingModel):
    """Payable unit handed over to billing/collection"""
    id: str
    owner_id: str
    tenant_id: str
    month: str
    amount: float
    status: InvoiceStatus = InvoiceStatus.DUE
    due_date: str
    receipt_no: Optional[str] = None
    breakdown: Optional[RentBreakdown] = None


# ----- Calculation results -----
class BillCalculationResult(BillingModel):
    units: float
    amount: float
    rate_per_unit: float
    previous_reading: float
    current_reading: float
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class RentIntegrationResult(BillingModel):
    total_rent: float
    electricity_amount: float
    final_amount: float
    breakdown: RentBreakdown


class SettingsValidationResult(BillingModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class ConsumptionStats(BillingModel):
    total_units: float = 0.0
    average_units: float = 0.0
    total_amount: float = 0.0
    average_amount: float = 0.0
    highest_consumption: float = 0.0
    lowest_consumption: float = 0.0


class BillPrediction(BillingModel):
    predicted_units: int = 0
    predicted_amount: int = 0
    confidence: float = 0.0
    predicted_reading: Optional[float] = None
    sample_size: int = 0
