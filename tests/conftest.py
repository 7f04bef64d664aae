"""
Shared pytest fixtures for House Duties tests.
Every test gets its own in-memory SQLite database and a controllable clock.
"""

import os
import sys
from datetime import datetime
from decimal import Decimal

import pytest

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from database.db_manager import DatabaseManager
from database.bill_dao import BillDAO
from database.payment_dao import PaymentDAO
from services.bill_service import BillService
from services.payment_service import PaymentService


class FixedClock:
    """Callable clock whose time the test sets explicitly."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 6, 1, 9, 30))


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def bill_dao(db):
    return BillDAO(db)


@pytest.fixture
def payment_dao(db):
    return PaymentDAO(db)


@pytest.fixture
def bill_service(bill_dao):
    return BillService(bill_dao)


@pytest.fixture
def payment_service(payment_dao, bill_dao, clock):
    return PaymentService(payment_dao, bill_dao, clock=clock)


@pytest.fixture
def rent(bill_service):
    return bill_service.create_bill("Rent", "RENT", "1500", 31)


@pytest.fixture
def make_payment(payment_service):
    """Create a payment and force it into the requested status."""

    def _make(bill, due_date, amount, status="PENDING"):
        payment = payment_service.create_payment(bill.id, Decimal(str(amount)), due_date)
        if status == "PAID":
            payment = payment_service.mark_as_paid(payment.id, due_date)
        elif status == "OVERDUE":
            payment = payment_service.update_payment(payment.id, status="OVERDUE")
        return payment

    return _make
