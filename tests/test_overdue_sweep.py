"""
Tests for the overdue sweep and its use of the injected clock.
"""

from datetime import date, datetime

from models.summary import PaymentSummary


class TestOverdueSweep:

    def test_old_pending_payment_becomes_overdue(self, payment_service, rent, make_payment, clock):
        clock.moment = datetime(2024, 6, 1)
        payment = make_payment(rent, date(2024, 1, 1), 1500)

        before = payment_service.get_payments_summary(2024, 1)
        count = payment_service.update_overdue_payments()
        after = payment_service.get_payments_summary(2024, 1)

        assert count == 1
        assert payment_service.get_payment_by_id(payment.id).status == "OVERDUE"
        assert before.pending == 1500 and before.overdue == 0
        assert after.pending == 0 and after.overdue == 1500
        assert after.total == before.total

    def test_paid_payments_are_never_touched(self, payment_service, rent, make_payment):
        paid = make_payment(rent, date(2024, 1, 31), 1500, status="PAID")

        assert payment_service.update_overdue_payments() == 0
        reloaded = payment_service.get_payment_by_id(paid.id)
        assert reloaded.status == "PAID"
        assert reloaded.paid_date == date(2024, 1, 31)

    def test_overdue_stays_overdue(self, payment_service, rent, make_payment):
        overdue = make_payment(rent, date(2024, 2, 29), 1500, status="OVERDUE")

        assert payment_service.update_overdue_payments() == 0
        assert payment_service.get_payment_by_id(overdue.id).status == "OVERDUE"

    def test_future_payments_stay_pending(self, payment_service, rent, make_payment, clock):
        clock.moment = datetime(2024, 6, 1, 9, 30)
        future = make_payment(rent, date(2024, 6, 2), 1500)

        assert payment_service.update_overdue_payments() == 0
        assert payment_service.get_payment_by_id(future.id).status == "PENDING"

    def test_due_today_is_overdue_once_the_day_has_started(self, payment_service, rent, make_payment, clock):
        today = make_payment(rent, date(2024, 6, 1), 1500)

        clock.moment = datetime(2024, 6, 1, 0, 0)
        assert payment_service.update_overdue_payments() == 0

        clock.moment = datetime(2024, 6, 1, 0, 0, 1)
        assert payment_service.update_overdue_payments() == 1
        assert payment_service.get_payment_by_id(today.id).status == "OVERDUE"

    def test_sweep_is_global_and_counts_rows(self, payment_service, bill_service, rent, make_payment):
        water = bill_service.create_bill("Water", "WATER", "30", 5)
        make_payment(rent, date(2023, 11, 30), 1500)
        make_payment(water, date(2024, 3, 5), 30)
        make_payment(water, date(2024, 4, 5), 30, status="PAID")

        assert payment_service.update_overdue_payments() == 2
        assert payment_service.update_overdue_payments() == 0

    def test_summary_does_not_sweep(self, payment_service, rent, make_payment):
        make_payment(rent, date(2024, 1, 1), 1500)

        summary = payment_service.get_payments_summary(2024, 1)

        assert summary == PaymentSummary(total=1500, paid=0, pending=1500, overdue=0)
        assert payment_service.get_payments_by_status("PENDING")
