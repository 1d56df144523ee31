"""
settings_validator.py
---------------------
✔️ Validates an owner's electricity settings before they are saved.

Purpose:
--------
Standalone guard used when an owner edits settings. Works on partial
input: only the fields present are checked, and every violated rule is
reported (no short-circuiting).

Inputs:
-------
- ElectricitySettings, ElectricitySettingsUpdate or a plain dict
  (camelCase or snake_case keys)

Outputs:
--------
- SettingsValidationResult(is_valid, errors)

Depends On:
-----------
- billing_engine.models.schemas
- billing_engine.utils.logger
"""

from typing import Union

from billing_engine.models.schemas import (
    ElectricitySettings,
    ElectricitySettingsUpdate,
    SettingsValidationResult,
)
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)


def validate_settings(
    settings: Union[ElectricitySettings, ElectricitySettingsUpdate, dict],
) -> SettingsValidationResult:
    """
    Check the rate, due day, late fee percentage and unit bounds that are present.
    """
    if isinstance(settings, dict):
        settings = ElectricitySettingsUpdate.model_validate(settings)

    errors = []

    rate = settings.rate_per_unit
    due_day = settings.due_date
    late_fee = settings.late_fee_percentage
    minimum = settings.minimum_units
    maximum = settings.maximum_units

    if rate is not None and rate <= 0:
        errors.append("Rate per unit must be greater than 0")

    if due_day is not None and (due_day < 1 or due_day > 31):
        errors.append("Due date must be between 1 and 31")

    if late_fee is not None and late_fee < 0:
        errors.append("Late fee percentage cannot be negative")

    if minimum is not None and minimum < 0:
        errors.append("Minimum units cannot be negative")

    if maximum is not None and maximum < 0:
        errors.append("Maximum units cannot be negative")

    if minimum is not None and maximum is not None and minimum > maximum:
        errors.append("Minimum units cannot be greater than maximum units")

    if errors:
        logger.warning(f"⚠️ Settings rejected: {'; '.join(errors)}")

    return SettingsValidationResult(is_valid=not errors, errors=errors)
