"""Shared fixtures: fixed clock, owner settings, bill factory and a temporary record store"""

from datetime import datetime

import pytest

from billing_engine.database import db_utils
from billing_engine.database.init_db import init_db
from billing_engine.models.schemas import BillStatus, ElectricityBill, ElectricitySettings

# Friday 15 March 2024, mid-morning
NOW = datetime(2024, 3, 15, 10, 30, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return ElectricitySettings(
        id="settings-1",
        owner_id="owner-1",
        rate_per_unit=8.0,
        due_date=5,
        late_fee_percentage=2.0,
        minimum_units=10,
        maximum_units=1000,
    )


def build_test_bill(
    month="2024-02",
    units=100.0,
    status=BillStatus.APPROVED,
    rate=8.0,
    tenant_id="tenant-1",
    owner_id="owner-1",
    bill_id=None,
    previous_reading=1000.0,
):
    return ElectricityBill(
        id=bill_id or f"bill-{tenant_id}-{month}",
        owner_id=owner_id,
        tenant_id=tenant_id,
        month=month,
        previous_reading=previous_reading,
        current_reading=previous_reading + units,
        units=units,
        rate_per_unit=rate,
        amount=units * rate,
        status=status,
    )


@pytest.fixture
def make_bill():
    return build_test_bill


@pytest.fixture
def store(tmp_path):
    """Fresh SQLite record store for one test."""
    engine = init_db(f"sqlite:///{tmp_path / 'billing.db'}")
    yield engine
    engine.dispose()
    db_utils._engine = None
    db_utils._SessionLocal = None
