import sys
from typing import Callable, TextIO

from database.db_manager import DatabaseManager
from models.bill import Bill
from models.payment import Payment
from services.bill_service import BillService
from services.errors import ValidationError
from services.payment_service import PaymentService
from services.validators import (
    to_amount, to_bill_type, to_date, to_due_day, to_name, to_status,
)
from ui import display
from ui.prompts import Prompter
from utils.app_config import database_path_from_url, set_database_url
from utils.constants import APP_NAME, APP_VERSION, BILL_TYPE_LABELS, BILL_TYPES, PAYMENT_STATUSES
from utils.currency import format_currency
from utils.date_helpers import (
    format_date, format_month, friendly_month, parse_month, today,
)


class ConsoleApp:
    """Command handlers shared by the one-shot subcommands and the menu.

    Any argument left as None is asked for interactively.
    """

    def __init__(
        self,
        bill_service: BillService,
        payment_service: PaymentService,
        db: DatabaseManager,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
        today_fn=today,
    ):
        self._bills = bill_service
        self._payments = payment_service
        self._db = db
        self._out = out or sys.stdout
        self._prompt = Prompter(input_fn, self._out)
        self._today = today_fn

    # ── Output helpers ────────────────────────────────────────────────────────

    def _print(self, text: str = ""):
        print(text, file=self._out)

    def success(self, message: str):
        self._print(f"\n✓ {message}")

    def info(self, message: str):
        self._print(f"\nℹ {message}")

    def error(self, message: str):
        self._print(f"\n✗ {message}")

    @property
    def _symbol(self) -> str:
        return self._db.get_setting("currency_symbol", "$")

    def _money(self, amount) -> str:
        return format_currency(amount, self._symbol)

    def resolve_month(self, month_str: str | None) -> tuple[int, int]:
        if not month_str:
            current = self._today()
            return current.year, current.month
        d = parse_month(month_str)
        if d is None:
            raise ValidationError(f"Invalid month '{month_str}'. Use YYYY-MM.")
        return d.year, d.month

    def _ask_month(self) -> tuple[int, int]:
        default = format_month(self._today())
        return self._prompt.ask(
            "Enter month and year (YYYY-MM)", default=default, validate=self.resolve_month
        )

    # ── Selection ─────────────────────────────────────────────────────────────

    def _select_bill(self, key: str | None, message: str, active_only: bool = False) -> Bill | None:
        if key:
            return self._bills.find_bill(key)
        bills = self._bills.get_all_bills(active_only=active_only)
        if not bills:
            self.info("No active bills available." if active_only else "No bills available.")
            return None
        options = [
            (f"{b.name} - {self._money(b.amount)} (Due: {b.due_day})", b) for b in bills
        ]
        return self._prompt.choose(message, options)

    def _select_payment(self, key: str | None, message: str, candidates=None) -> Payment | None:
        if key:
            return self._payments.find_payment(key)
        if candidates is None:
            year, month = self.resolve_month(None)
            candidates = self._payments.get_payments_by_month(year, month)
        if not candidates:
            self.info("No payments available.")
            return None
        options = [
            (f"{p.bill_name} - {self._money(p.amount)} - {format_date(p.due_date)} - {p.status}", p)
            for p in candidates
        ]
        return self._prompt.choose(message, options)

    # ── Bills ─────────────────────────────────────────────────────────────────

    def list_bills(self, active_only: bool = False) -> int:
        bills = self._bills.get_all_bills(active_only=active_only)
        self._print()
        self._print(display.bills_table(bills, self._symbol))
        return 0

    def add_bill(self, name=None, type_=None, amount=None, due_day=None, description=None) -> int:
        interactive = name is None
        if name is None:
            name = self._prompt.ask("Bill name", validate=to_name)
        if type_ is None:
            type_ = self._prompt.choose(
                "Bill type:", [(BILL_TYPE_LABELS[t], t) for t in BILL_TYPES]
            )
        if amount is None:
            amount = self._prompt.ask("Amount", validate=to_amount)
        if due_day is None:
            due_day = self._prompt.ask("Due day of month (1-31)", validate=to_due_day)
        if description is None and interactive:
            description = self._prompt.ask("Description (optional)", default="")

        bill = self._bills.create_bill(name, type_, amount, due_day, description)
        self.success(
            f'Bill "{bill.name}" created successfully '
            f"({self._money(bill.amount)} due on day {bill.due_day})"
        )
        return 0

    def update_bill(self, key: str | None = None, **changes) -> int:
        bill = self._select_bill(key, "Select bill to update:")
        if bill is None:
            return 0
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            changes = self._ask_bill_changes(bill)
            if not changes:
                self.info("No fields selected to update")
                return 0
        updated = self._bills.update_bill(bill.id, **changes)
        self.success(f'Bill "{updated.name}" updated successfully')
        return 0

    def _ask_bill_changes(self, bill: Bill) -> dict:
        p = self._prompt
        changes = {}
        if p.confirm("Change name?"):
            changes["name"] = p.ask("New name", default=bill.name, validate=to_name)
        if p.confirm("Change type?"):
            changes["type"] = p.ask(
                f"New type ({', '.join(BILL_TYPES)})", default=bill.type, validate=to_bill_type
            )
        if p.confirm("Change amount?"):
            changes["amount"] = p.ask("New amount", default=str(bill.amount), validate=to_amount)
        if p.confirm("Change due day?"):
            changes["due_day"] = p.ask(
                "New due day (1-31)", default=str(bill.due_day), validate=to_due_day
            )
        if p.confirm("Change description?"):
            changes["description"] = p.ask("New description", default=bill.description or "")
        if p.confirm("Change status (active/inactive)?"):
            changes["active"] = p.confirm("Is this bill active?", default=bill.active)
        return changes

    def toggle_bill(self, key: str | None = None) -> int:
        bill = self._select_bill(key, "Select bill to activate/deactivate:")
        if bill is None:
            return 0
        updated = self._bills.toggle_bill_status(bill.id)
        state = "active" if updated.active else "inactive"
        self.success(f'Bill "{updated.name}" is now {state}')
        return 0

    def delete_bill(self, key: str | None = None, assume_yes: bool = False) -> int:
        bill = self._select_bill(key, "Select bill to delete:")
        if bill is None:
            return 0
        if not assume_yes and not self._prompt.confirm(
            f'Are you sure you want to delete "{bill.name}"? '
            "This will also delete all associated payments."
        ):
            self.info("Deletion cancelled")
            return 0
        self._bills.delete_bill(bill.id)
        self.success(f'Bill "{bill.name}" deleted successfully')
        return 0

    # ── Payments ──────────────────────────────────────────────────────────────

    def list_payments(self, month: str | None = None) -> int:
        year, month_num = self.resolve_month(month)
        self._payments.update_overdue_payments()
        payments = self._payments.get_payments_by_month(year, month_num)
        self._print(f"\nPayments for {friendly_month(year, month_num)}")
        self._print(display.payments_table(payments, self._symbol))
        return 0

    def add_payment(self, bill_key=None, amount=None, due_date=None, notes=None) -> int:
        bill = self._select_bill(bill_key, "Select bill:", active_only=True)
        if bill is None:
            return 0
        interactive = bill_key is None
        if amount is None:
            amount = self._prompt.ask("Payment amount", default=str(bill.amount), validate=to_amount)
        if due_date is None:
            due_date = self._prompt.ask(
                "Due date (YYYY-MM-DD)", default=format_date(self._today()), validate=to_date
            )
        if notes is None and interactive:
            notes = self._prompt.ask("Notes (optional)", default="")

        payment = self._payments.create_payment(bill.id, amount, due_date, notes)
        self.success(f"Payment created successfully ({self._money(payment.amount)})")
        return 0

    def update_payment(self, key=None, amount=None, status=None, paid_date=None, notes=None) -> int:
        payment = self._select_payment(key, "Select payment to update:")
        if payment is None:
            return 0
        if all(v is None for v in (amount, status, paid_date, notes)):
            p = self._prompt
            if p.confirm("Change amount?"):
                amount = p.ask("New amount", default=str(payment.amount), validate=to_amount)
            if p.confirm("Change status?"):
                status = p.ask(
                    f"New status ({', '.join(PAYMENT_STATUSES)})",
                    default=payment.status, validate=to_status,
                )
            if (status or payment.status) == "PAID" and p.confirm("Change paid date?"):
                default = payment.paid_date or self._today()
                paid_date = p.ask("Paid date (YYYY-MM-DD)", default=format_date(default), validate=to_date)
            if p.confirm("Change notes?"):
                notes = p.ask("New notes", default=payment.notes or "")
            if all(v is None for v in (amount, status, paid_date, notes)):
                self.info("No fields selected to update")
                return 0

        self._payments.update_payment(
            payment.id, amount=amount, status=status, paid_date=paid_date, notes=notes
        )
        self.success("Payment updated successfully")
        return 0

    def mark_paid(self, key: str | None = None, paid_date=None) -> int:
        if key is None:
            unpaid = self._payments.get_unpaid_payments()
            if not unpaid:
                self.info("No unpaid payments found")
                return 0
            payment = self._select_payment(None, "Select payment to mark as paid:", unpaid)
            if paid_date is None:
                paid_date = self._prompt.ask(
                    "Paid date (YYYY-MM-DD)", default=format_date(self._today()), validate=to_date
                )
        else:
            payment = self._payments.find_payment(key)
        self._payments.mark_as_paid(payment.id, paid_date)
        self.success("Payment marked as paid")
        return 0

    def delete_payment(self, key: str | None = None, assume_yes: bool = False) -> int:
        payment = self._select_payment(key, "Select payment to delete:")
        if payment is None:
            return 0
        if not assume_yes and not self._prompt.confirm(
            f'Are you sure you want to delete this payment for "{payment.bill_name}"?'
        ):
            self.info("Deletion cancelled")
            return 0
        self._payments.delete_payment(payment.id)
        self.success("Payment deleted successfully")
        return 0

    # ── Monthly operations ───────────────────────────────────────────────────

    def generate(self, month: str | None = None, ask: bool = False) -> int:
        year, month_num = self._ask_month() if ask else self.resolve_month(month)
        created = self._payments.generate_monthly_payments(year, month_num)
        if not created:
            self.info("All payments for this month already exist")
        else:
            self.success(
                f"Generated {len(created)} payment(s) for {friendly_month(year, month_num)}"
            )
        return 0

    def sweep(self) -> int:
        count = self._payments.update_overdue_payments()
        if count:
            self.success(f"Marked {count} payment(s) as overdue")
        else:
            self.info("No pending payments are past due")
        return 0

    def summary(self, month: str | None = None, ask: bool = False) -> int:
        year, month_num = self._ask_month() if ask else self.resolve_month(month)
        # Sweep first so the overdue bucket reflects today.
        self._payments.update_overdue_payments()
        summary = self._payments.get_payments_summary(year, month_num)
        payments = self._payments.get_payments_by_month(year, month_num)
        self._print(f"\n{friendly_month(year, month_num)}")
        self._print(display.payments_table(payments, self._symbol))
        self._print()
        self._print(display.summary_block(summary, self._symbol))
        return 0

    def compare(self, month: str | None = None, ask: bool = False) -> int:
        year, month_num = self._ask_month() if ask else self.resolve_month(month)
        self._payments.update_overdue_payments()
        comparison = self._payments.get_payment_comparison(year, month_num)
        self._print("\n=== Payment Comparison (Last 3 Months) ===\n")
        self._print(display.comparison_table(comparison, self._symbol))
        self._print()
        self._print(display.COMPARISON_LEGEND)
        return 0

    # ── Settings ─────────────────────────────────────────────────────────────

    def show_config(self, database_url: str) -> int:
        self._print(f"Database URL: {database_url}")
        self._print(f"Currency symbol: {self._symbol}")
        return 0

    def save_database_url(self, url: str | None) -> int:
        """Persist (or with None, forget) the database URL in the user config file."""
        if url is not None:
            try:
                database_path_from_url(url)
            except ValueError as exc:
                raise ValidationError(str(exc)) from None
        set_database_url(url)
        self.success("Database URL cleared" if url is None else f"Database URL saved: {url}")
        return 0

    def set_currency(self, symbol: str) -> int:
        if not symbol.strip():
            raise ValidationError("Currency symbol cannot be empty.")
        self._db.set_setting("currency_symbol", symbol)
        self.success(f"Currency symbol set to {symbol}")
        return 0

    # ── Interactive menu ─────────────────────────────────────────────────────

    def run_menu(self, run_action: Callable[[Callable[[], int]], int]) -> int:
        """Loop over the main menu; `run_action` wraps each handler with the
        same error reporting the subcommands get."""
        actions = [
            ("Show Monthly Summary", lambda: self.summary(ask=True)),
            ("List Bills", self.list_bills),
            ("Add Bill", self.add_bill),
            ("Update Bill", self.update_bill),
            ("Activate/Deactivate Bill", self.toggle_bill),
            ("Delete Bill", self.delete_bill),
            ("List Payments", self.list_payments),
            ("Add Payment", self.add_payment),
            ("Update Payment", self.update_payment),
            ("Mark Payment as Paid", self.mark_paid),
            ("Delete Payment", self.delete_payment),
            ("Generate Monthly Payments", lambda: self.generate(ask=True)),
            ("Compare Payments (Last 3 Months)", lambda: self.compare(ask=True)),
            ("Exit", None),
        ]
        while True:
            self._print(f"\n=== {APP_NAME} - Bill Tracker (v{APP_VERSION}) ===\n")
            action = self._prompt.choose("What would you like to do?", actions)
            if action is None:
                break
            run_action(action)
            if not self._prompt.confirm("Continue?", default=True):
                break
        self._print("\nGoodbye!")
        return 0
