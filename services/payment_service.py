import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable
from models.payment import Payment
from models.summary import (
    ComparisonMetric, MonthSummary, PaymentComparison, PaymentSummary,
)
from database.bill_dao import BillDAO
from database.payment_dao import PaymentDAO
from services.errors import NotFoundError, ValidationError
from services.validators import (
    optional_text, to_amount, to_date, to_status, to_year_month,
)
from utils.constants import (
    COMPARISON_MONTHS, MIN_YEAR, STATUS_TRANSITIONS, TREND_EPSILON,
)
from utils.date_helpers import (
    clamp_day_to_month, first_of_next_month, friendly_month, month_range,
    now, overdue_cutoff, previous_months,
)

logger = logging.getLogger(__name__)

METRICS = (
    ("total", "Total"),
    ("paid", "Paid"),
    ("pending", "Pending"),
    ("overdue", "Overdue"),
)


class PaymentService:
    """Payment bookkeeping plus the monthly generation and reporting logic.

    `clock` supplies the current time for the overdue sweep and for default
    paid dates; tests pass a fixed one.
    """

    def __init__(
        self,
        payment_dao: PaymentDAO,
        bill_dao: BillDAO,
        clock: Callable[[], datetime] = now,
    ):
        self._dao = payment_dao
        self._bill_dao = bill_dao
        self._clock = clock

    # ── Queries ───────────────────────────────────────────────────────────────

    def get_all_payments(self) -> list[Payment]:
        return self._dao.get_all()

    def get_payment_by_id(self, payment_id: str) -> Payment:
        payment = self._dao.get_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        return payment

    def find_payment(self, key: str) -> Payment:
        """Resolve a full payment id or a unique id prefix."""
        key = key.strip()
        payment = self._dao.get_by_id(key)
        if payment:
            return payment
        matches = self._dao.find_by_id_prefix(key) if key else []
        if len(matches) > 1:
            raise ValidationError(f"Payment id prefix '{key}' is ambiguous.")
        if not matches:
            raise NotFoundError("Payment", key)
        return matches[0]

    def get_payments_by_month(self, year: int, month: int) -> list[Payment]:
        year, month = to_year_month(year, month)
        start, end = month_range(year, month)
        return self._dao.get_between(start, end)

    def get_payments_by_status(self, status: str) -> list[Payment]:
        return self._dao.get_by_status(to_status(status))

    def get_payments_by_bill(self, bill_id: str) -> list[Payment]:
        return self._dao.get_by_bill(bill_id)

    def get_unpaid_payments(self) -> list[Payment]:
        return self._dao.get_by_status("PENDING") + self._dao.get_by_status("OVERDUE")

    # ── Mutations ─────────────────────────────────────────────────────────────

    def create_payment(
        self,
        bill_id: str,
        amount: Decimal | str | float,
        due_date: date | str,
        notes: str | None = None,
    ) -> Payment:
        amount = to_amount(amount)
        due = to_date(due_date)
        if self._bill_dao.get_by_id(bill_id) is None:
            raise NotFoundError("Bill", bill_id)
        payment = self._dao.create(bill_id, amount, due, optional_text(notes))
        logger.info("Created payment %s for bill %s due %s", payment.id, bill_id, due)
        return payment

    def update_payment(
        self,
        payment_id: str,
        amount: Decimal | str | float | None = None,
        status: str | None = None,
        paid_date: date | str | None = None,
        notes: str | None = None,
    ) -> Payment:
        """Update a payment. None leaves a field as it is; notes='' clears notes.

        Status may only move PENDING -> PAID, PENDING -> OVERDUE or
        OVERDUE -> PAID. paid_date exists exactly when the status is PAID.
        """
        current = self.get_payment_by_id(payment_id)

        new_status = current.status if status is None else to_status(status)
        if new_status != current.status and new_status not in STATUS_TRANSITIONS[current.status]:
            raise ValidationError(
                f"Cannot change payment status from {current.status} to {new_status}."
            )

        if new_status == "PAID":
            if paid_date is not None:
                new_paid_date = to_date(paid_date)
            else:
                new_paid_date = current.paid_date or self._clock().date()
        else:
            if paid_date is not None:
                raise ValidationError("A paid date can only be set on a PAID payment.")
            new_paid_date = None

        payment = self._dao.update(
            payment_id,
            amount=current.amount if amount is None else to_amount(amount),
            status=new_status,
            paid_date=new_paid_date,
            notes=current.notes if notes is None else optional_text(notes),
        )
        if new_status != current.status:
            logger.info("Payment %s: %s -> %s", payment_id, current.status, new_status)
        return payment

    def mark_as_paid(self, payment_id: str, paid_date: date | str | None = None) -> Payment:
        return self.update_payment(payment_id, status="PAID", paid_date=paid_date)

    def delete_payment(self, payment_id: str) -> Payment:
        payment = self.get_payment_by_id(payment_id)
        self._dao.delete(payment_id)
        logger.info("Deleted payment %s", payment_id)
        return payment

    # ── Monthly generation ────────────────────────────────────────────────────

    def generate_monthly_payments(self, year: int, month: int) -> list[Payment]:
        """
        Make sure every active bill has a payment due in year/month.
        Returns only the payments created by this call, so a repeat call
        for the same month returns [].

        Check-then-insert per bill, committed one at a time: assumes a single
        writer, and a failure part-way leaves earlier inserts in place.
        """
        year, month = to_year_month(year, month)
        start = date(year, month, 1)
        end = first_of_next_month(year, month)
        created: list[Payment] = []

        for bill in self._bill_dao.get_active():
            existing = self._dao.find_for_bill_in_range(bill.id, start, end)
            if existing:
                logger.debug("Bill %s already has payment %s for %d-%02d",
                             bill.id, existing.id, year, month)
                continue
            due = date(year, month, clamp_day_to_month(year, month, bill.due_day))
            created.append(self._dao.create(bill.id, bill.amount, due))

        logger.info("Generated %d payment(s) for %d-%02d", len(created), year, month)
        return created

    # ── Overdue sweep ─────────────────────────────────────────────────────────

    def update_overdue_payments(self) -> int:
        """Move every PENDING payment whose due date has started before now to
        OVERDUE. PAID and OVERDUE rows are never touched. Returns the count.

        Summaries and comparisons do not call this; run it first when they
        should reflect the current overdue state.
        """
        moment = self._clock()
        count = self._dao.mark_overdue_before(overdue_cutoff(moment))
        logger.info("Marked %d payment(s) overdue as of %s", count, moment.isoformat(" "))
        return count

    # ── Reporting ─────────────────────────────────────────────────────────────

    def get_payments_summary(self, year: int, month: int) -> PaymentSummary:
        summary = PaymentSummary()
        for payment in self.get_payments_by_month(year, month):
            summary.total += payment.amount
            if payment.status == "PAID":
                summary.paid += payment.amount
            elif payment.status == "PENDING":
                summary.pending += payment.amount
            elif payment.status == "OVERDUE":
                summary.overdue += payment.amount
        return summary

    def get_month_summary(self, year: int, month: int) -> MonthSummary:
        s = self.get_payments_summary(year, month)
        return MonthSummary(
            year=year,
            month=month,
            month_label=friendly_month(year, month),
            total=s.total,
            paid=s.paid,
            pending=s.pending,
            overdue=s.overdue,
        )

    def get_payment_comparison(self, year: int, month: int) -> PaymentComparison:
        """Compare year/month against the two months before it (read-only)."""
        year, month = to_year_month(year, month)
        periods = previous_months(year, month, COMPARISON_MONTHS)
        if periods[0][0] < MIN_YEAR:
            raise ValidationError(
                f"Comparison needs {COMPARISON_MONTHS - 1} earlier months; "
                f"the earliest month that can be compared is {MIN_YEAR}-{COMPARISON_MONTHS:02d}."
            )
        months = [self.get_month_summary(y, m) for y, m in periods]
        metrics = {
            key: self.build_metric(label, [getattr(s, key) for s in months])
            for key, label in METRICS
        }
        return PaymentComparison(months=months, metrics=metrics)

    @staticmethod
    def build_metric(metric_name: str, values: list[Decimal]) -> ComparisonMetric:
        """Change and trend between the last two values; earlier values are context."""
        previous, current = values[-2], values[-1]
        change = current - previous

        percentage_change = None
        if previous != 0:
            percentage_change = change / previous * 100

        if abs(change) < TREND_EPSILON:
            trend = "STABLE"
        elif change > 0:
            trend = "UP"
        else:
            trend = "DOWN"

        return ComparisonMetric(
            metric_name=metric_name,
            values=list(values),
            change=change,
            percentage_change=percentage_change,
            trend=trend,
        )
