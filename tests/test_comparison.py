"""
Tests for the three-month comparison report.
"""

from datetime import date
from decimal import Decimal

import pytest

from services.errors import ValidationError
from services.payment_service import PaymentService
from utils.date_helpers import previous_months


class TestPeriods:

    def test_three_months_oldest_first(self):
        assert previous_months(2024, 5, 3) == [(2024, 3), (2024, 4), (2024, 5)]

    @pytest.mark.parametrize("month,expected", [
        (1, [(2023, 11), (2023, 12), (2024, 1)]),
        (2, [(2023, 12), (2024, 1), (2024, 2)]),
    ])
    def test_year_rollover(self, month, expected):
        assert previous_months(2024, month, 3) == expected

    def test_report_labels(self, payment_service):
        comparison = payment_service.get_payment_comparison(2024, 1)
        assert [(m.year, m.month) for m in comparison.months] == [(2023, 11), (2023, 12), (2024, 1)]
        assert [m.month_label for m in comparison.months] == [
            "November 2023", "December 2023", "January 2024",
        ]

    @pytest.mark.parametrize("month", [1, 2])
    def test_rejects_months_without_two_earlier_months(self, payment_service, month):
        with pytest.raises(ValidationError, match="1900-03"):
            payment_service.get_payment_comparison(1900, month)

    def test_earliest_comparable_month(self, payment_service):
        comparison = payment_service.get_payment_comparison(1900, 3)
        assert [(m.year, m.month) for m in comparison.months] == [(1900, 1), (1900, 2), (1900, 3)]


class TestMetrics:

    def test_pending_trend_down(self, payment_service, rent, make_payment):
        make_payment(rent, date(2024, 1, 31), 100)
        make_payment(rent, date(2024, 2, 29), 200)
        make_payment(rent, date(2024, 3, 31), 150)

        pending = payment_service.get_payment_comparison(2024, 3).metrics["pending"]

        assert pending.metric_name == "Pending"
        assert pending.values == [Decimal("100"), Decimal("200"), Decimal("150")]
        assert pending.change == Decimal("-50")
        assert pending.percentage_change == Decimal("-25")
        assert pending.trend == "DOWN"

    def test_from_zero_to_positive(self, payment_service, rent, make_payment):
        make_payment(rent, date(2024, 3, 10), 50)

        pending = payment_service.get_payment_comparison(2024, 3).metrics["pending"]

        assert pending.values == [0, 0, Decimal("50")]
        assert pending.change == Decimal("50")
        assert pending.percentage_change is None
        assert pending.trend == "UP"

    def test_zero_to_zero_is_stable(self, payment_service):
        overdue = payment_service.get_payment_comparison(2024, 3).metrics["overdue"]
        assert overdue.change == 0
        assert overdue.percentage_change is None
        assert overdue.trend == "STABLE"

    def test_oldest_month_is_context_only(self):
        metric = PaymentService.build_metric("Total", [Decimal("999"), Decimal("100"), Decimal("110")])
        assert metric.change == Decimal("10")
        assert metric.percentage_change == Decimal("10")
        assert metric.trend == "UP"

    @pytest.mark.parametrize("middle,newest,trend", [
        ("100.00", "100.009", "STABLE"),
        ("100.00", "99.991", "STABLE"),
        ("100.00", "100.01", "UP"),
        ("100.00", "99.99", "DOWN"),
    ])
    def test_trend_epsilon(self, middle, newest, trend):
        metric = PaymentService.build_metric("Paid", [Decimal("0"), Decimal(middle), Decimal(newest)])
        assert metric.trend == trend

    def test_all_four_metrics(self, payment_service, rent, make_payment):
        make_payment(rent, date(2024, 2, 29), 1500, status="PAID")
        make_payment(rent, date(2024, 3, 31), 1500, status="OVERDUE")

        metrics = payment_service.get_payment_comparison(2024, 3).metrics

        assert list(metrics) == ["total", "paid", "pending", "overdue"]
        assert metrics["total"].trend == "STABLE"
        assert metrics["paid"].trend == "DOWN"
        assert metrics["paid"].percentage_change == Decimal("-100")
        assert metrics["overdue"].trend == "UP"

    def test_comparison_is_read_only(self, payment_service, rent, make_payment):
        payment = make_payment(rent, date(2024, 1, 5), 100)
        payment_service.get_payment_comparison(2024, 3)
        assert payment_service.get_payment_by_id(payment.id).status == "PENDING"
