"""Pydantic models for electricity billing records and results"""

from .schemas import (
    BillCalculationResult,
    BillingCycle,
    BillPrediction,
    BillStatus,
    ConsumptionStats,
    ElectricityBill,
    ElectricitySettings,
    ElectricitySettingsUpdate,
    Invoice,
    InvoiceStatus,
    RentBreakdown,
    RentIntegrationResult,
    SettingsValidationResult,
)

__all__ = [
    'BillCalculationResult',
    'BillingCycle',
    'BillPrediction',
    'BillStatus',
    'ConsumptionStats',
    'ElectricityBill',
    'ElectricitySettings',
    'ElectricitySettingsUpdate',
    'Invoice',
    'InvoiceStatus',
    'RentBreakdown',
    'RentIntegrationResult',
    'SettingsValidationResult',
]
