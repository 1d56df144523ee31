"""
Electricity billing engine.

Turns meter readings into validated, priced consumption records, composes
them with base rent and late fees into payable invoices, and derives
consumption statistics and forecasts from a tenant's billing history.

The calculators live under ``billing_engine.agents``; the optional record
store and the monthly billing run are under ``billing_engine.database`` and
``billing_engine.orchestrator``.
"""

from billing_engine.agents.reading_validation.bill_calculator import (
    build_bill,
    calculate_bill,
    recalculate_bill,
)
from billing_engine.agents.reading_validation.settings_validator import validate_settings
from billing_engine.agents.late_fees.late_fee_calculator import calculate_late_fees
from billing_engine.agents.invoicing.invoice_composer import (
    generate_electricity_invoice,
    integrate_with_rent,
)
from billing_engine.agents.history.consumption_analyzer import (
    consumption_history,
    get_consumption_stats,
    predict_next_bill,
)

__all__ = [
    "build_bill",
    "calculate_bill",
    "recalculate_bill",
    "validate_settings",
    "calculate_late_fees",
    "integrate_with_rent",
    "generate_electricity_invoice",
    "get_consumption_stats",
    "predict_next_bill",
    "consumption_history",
]
