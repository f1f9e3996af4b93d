"""Pytest configuration and shared fixtures."""

import os

# Tests run against explicit in-memory engines, never a configured store.
# Must happen before any servicepay import builds the module-level engine.
os.environ.pop("DATABASE_URL", None)

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from servicepay.models import Base, Bill, BillStatus, ServiceAccount, ServiceProvider  # noqa: E402


@pytest.fixture
def db_session():
    """Provide an in-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def make_bill():
    """Factory for in-memory bills."""

    def _make_bill(month: int, year: int, status: BillStatus, amount=None) -> Bill:
        if amount is not None:
            amount = Decimal(str(amount))
        return Bill(month=month, year=year, status=status, amount=amount)

    return _make_bill


@pytest.fixture
def make_account(make_bill):
    """Factory for in-memory accounts from (month, year, status, amount) tuples."""

    def _make_account(bills=(), provider=ServiceProvider.AYSAM, account_id="acc-1", **kwargs):
        account = ServiceAccount(
            id=account_id,
            provider=provider,
            account_number=kwargs.pop("account_number", "1234567"),
            alias=kwargs.pop("alias", None),
            owner_id=kwargs.pop("owner_id", None),
        )
        account.bills = [make_bill(*bill_args) for bill_args in bills]
        return account

    return _make_account


@pytest.fixture
def fixed_clock():
    """Clock pinned to 18 October 2026."""
    return lambda: date(2026, 10, 18)
