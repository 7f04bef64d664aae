"""
Tests for the monthly summary aggregation.
"""

from datetime import date
from decimal import Decimal

from models.summary import PaymentSummary


class TestSummary:

    def test_empty_month_is_all_zero(self, payment_service):
        summary = payment_service.get_payments_summary(2024, 7)
        assert summary == PaymentSummary()
        assert summary.total == Decimal("0")

    def test_buckets_by_status(self, payment_service, bill_service, rent, make_payment):
        power = bill_service.create_bill("Power", "ELECTRICITY", "80", 12)
        gas = bill_service.create_bill("Gas", "GAS", "25", 20)
        make_payment(rent, date(2024, 3, 31), 1500, status="PAID")
        make_payment(power, date(2024, 3, 12), "80.40", status="OVERDUE")
        make_payment(gas, date(2024, 3, 20), "25.10")

        summary = payment_service.get_payments_summary(2024, 3)

        assert summary.paid == Decimal("1500")
        assert summary.overdue == Decimal("80.40")
        assert summary.pending == Decimal("25.10")
        assert summary.total == Decimal("1605.50")

    def test_total_equals_sum_of_buckets_exactly(self, payment_service, rent, make_payment):
        for day, amount, status in [
            (1, "0.10", "PENDING"), (2, "0.20", "PAID"), (3, "0.30", "OVERDUE"),
            (4, "19.99", "PAID"), (5, "0.01", "PENDING"), (6, "333.33", "OVERDUE"),
        ]:
            make_payment(rent, date(2024, 2, day), amount, status=status)

        s = payment_service.get_payments_summary(2024, 2)

        assert s.total == s.paid + s.pending + s.overdue
        assert s.total == Decimal("353.93")

    def test_month_boundaries(self, payment_service, rent, make_payment):
        make_payment(rent, date(2024, 1, 31), 10)
        make_payment(rent, date(2024, 2, 1), 20)
        make_payment(rent, date(2024, 2, 29), 40)
        make_payment(rent, date(2024, 3, 1), 80)

        assert payment_service.get_payments_summary(2024, 2).total == Decimal("60")

    def test_payments_by_month_are_ordered_by_due_date(self, payment_service, bill_service, rent, make_payment):
        phone = bill_service.create_bill("Phone", "PHONE", "20", 3)
        make_payment(rent, date(2024, 2, 29), 1500)
        make_payment(phone, date(2024, 2, 3), 20)

        payments = payment_service.get_payments_by_month(2024, 2)

        assert [p.bill_name for p in payments] == ["Phone", "Rent"]
