import argparse
import logging
import os
import sqlite3
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.bill_dao import BillDAO
from database.payment_dao import PaymentDAO

from services.bill_service import BillService
from services.errors import BillTrackerError
from services.payment_service import PaymentService

from ui.console import ConsoleApp
from utils.app_config import get_database_url, get_log_level
from utils.constants import APP_VERSION, BILL_TYPES, PAYMENT_STATUSES, PROG_NAME
from utils.date_helpers import now
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Console application to track rent and utility bills.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--database-url", help="Overrides DATABASE_URL, e.g. sqlite:///bills.db")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING (default from LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("menu", help="Start the interactive menu (default)")

    # ── bills ────────────────────────────────────────────────────────────────
    bills = sub.add_parser("bills", help="Manage bills").add_subparsers(dest="action", required=True)

    p = bills.add_parser("list", help="List bills")
    p.add_argument("-a", "--active", action="store_true", help="Only active bills")

    p = bills.add_parser("add", help="Add a bill (prompts for anything omitted)")
    p.add_argument("--name")
    p.add_argument("--type", dest="type_", choices=BILL_TYPES, type=str.upper)
    p.add_argument("--amount")
    p.add_argument("--due-day")
    p.add_argument("--description")

    p = bills.add_parser("update", help="Update a bill")
    p.add_argument("bill", nargs="?", help="Bill id, id prefix or name")
    p.add_argument("--name")
    p.add_argument("--type", choices=BILL_TYPES, type=str.upper)
    p.add_argument("--amount")
    p.add_argument("--due-day")
    p.add_argument("--description")
    state = p.add_mutually_exclusive_group()
    state.add_argument("--active", dest="active", action="store_const", const=True)
    state.add_argument("--inactive", dest="active", action="store_const", const=False)

    p = bills.add_parser("toggle", help="Activate or deactivate a bill")
    p.add_argument("bill", nargs="?")

    p = bills.add_parser("delete", help="Delete a bill and its payments")
    p.add_argument("bill", nargs="?")
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    # ── payments ─────────────────────────────────────────────────────────────
    payments = sub.add_parser("payments", help="Manage payments").add_subparsers(
        dest="action", required=True
    )

    p = payments.add_parser("list", help="List payments for a month")
    p.add_argument("--month", help="YYYY-MM (default: current month)")

    p = payments.add_parser("add", help="Add a payment")
    p.add_argument("bill", nargs="?", help="Bill id, id prefix or name")
    p.add_argument("--amount")
    p.add_argument("--due-date", help="YYYY-MM-DD")
    p.add_argument("--notes")

    p = payments.add_parser("update", help="Update a payment")
    p.add_argument("payment", nargs="?", help="Payment id or id prefix")
    p.add_argument("--amount")
    p.add_argument("--status", choices=PAYMENT_STATUSES, type=str.upper)
    p.add_argument("--paid-date", help="YYYY-MM-DD")
    p.add_argument("--notes")

    p = payments.add_parser("pay", help="Mark a payment as paid")
    p.add_argument("payment", nargs="?")
    p.add_argument("--date", dest="paid_date", help="YYYY-MM-DD (default: today)")

    p = payments.add_parser("delete", help="Delete a payment")
    p.add_argument("payment", nargs="?")
    p.add_argument("-y", "--yes", action="store_true")

    # ── monthly ──────────────────────────────────────────────────────────────
    for name, help_text in (
        ("generate", "Create this month's payments for all active bills"),
        ("summary", "Show payments and totals for a month"),
        ("compare", "Compare a month with the two before it"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--month", help="YYYY-MM (default: current month)")

    sub.add_parser("sweep", help="Mark past-due pending payments as overdue")

    # ── settings ─────────────────────────────────────────────────────────────
    config = sub.add_parser("config", help="Show or change saved settings").add_subparsers(
        dest="action", required=True
    )
    config.add_parser("show", help="Show the database URL in use and display settings")
    p = config.add_parser("set-database-url", help="Save a database URL to ~/.house_duties/config.json")
    p.add_argument("url")
    config.add_parser("clear-database-url", help="Forget the saved database URL")
    p = config.add_parser("set-currency", help="Set the currency symbol used for display")
    p.add_argument("symbol")
    return parser


def build_app(database_url: str, clock=now) -> tuple[DatabaseManager, ConsoleApp]:
    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.from_url(database_url)
    db.initialize()

    # ── DAOs ─────────────────────────────────────────────────────────────────
    bill_dao = BillDAO(db)
    payment_dao = PaymentDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    bill_svc = BillService(bill_dao)
    payment_svc = PaymentService(payment_dao, bill_dao, clock=clock)

    return db, ConsoleApp(bill_svc, payment_svc, db, today_fn=lambda: clock().date())


def dispatch(app: ConsoleApp, args: argparse.Namespace) -> int:
    command, action = args.command, getattr(args, "action", None)
    if command == "bills":
        if action == "list":
            return app.list_bills(active_only=args.active)
        if action == "add":
            return app.add_bill(args.name, args.type_, args.amount, args.due_day, args.description)
        if action == "update":
            return app.update_bill(
                args.bill, name=args.name, type=args.type, amount=args.amount,
                due_day=args.due_day, description=args.description, active=args.active,
            )
        if action == "toggle":
            return app.toggle_bill(args.bill)
        if action == "delete":
            return app.delete_bill(args.bill, assume_yes=args.yes)
    elif command == "payments":
        if action == "list":
            return app.list_payments(args.month)
        if action == "add":
            return app.add_payment(args.bill, args.amount, args.due_date, args.notes)
        if action == "update":
            return app.update_payment(
                args.payment, amount=args.amount, status=args.status,
                paid_date=args.paid_date, notes=args.notes,
            )
        if action == "pay":
            return app.mark_paid(args.payment, args.paid_date)
        if action == "delete":
            return app.delete_payment(args.payment, assume_yes=args.yes)
    elif command == "generate":
        return app.generate(args.month)
    elif command == "summary":
        return app.summary(args.month)
    elif command == "compare":
        return app.compare(args.month)
    elif command == "sweep":
        return app.sweep()
    elif command == "config":
        if action == "show":
            return app.show_config(args.resolved_url)
        if action == "set-database-url":
            return app.save_database_url(args.url)
        if action == "clear-database-url":
            return app.save_database_url(None)
        if action == "set-currency":
            return app.set_currency(args.symbol)
    raise ValueError(f"Unknown command: {command} {action or ''}".strip())


def run_guarded(app: ConsoleApp, action) -> int:
    """Run one handler, reporting domain and database errors instead of crashing."""
    try:
        return action()
    except BillTrackerError as exc:
        app.error(str(exc))
        return 1
    except sqlite3.Error as exc:
        logger.debug("Database error", exc_info=True)
        app.error(f"Database error: {exc}")
        return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or get_log_level())

    try:
        args.resolved_url = args.database_url or get_database_url()
        db, app = build_app(args.resolved_url)
    except (ValueError, sqlite3.Error) as exc:
        print(f"✗ Could not open database: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command in (None, "menu"):
            return app.run_menu(lambda action: run_guarded(app, action))
        return run_guarded(app, lambda: dispatch(app, args))
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")
        return 130
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
