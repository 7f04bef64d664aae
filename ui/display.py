"""Plain-text rendering for the console. Every function returns a string."""
from models.bill import Bill
from models.payment import Payment
from models.summary import ComparisonMetric, PaymentComparison, PaymentSummary
from utils.constants import BILL_TYPE_LABELS, STATUS_LABELS
from utils.currency import format_currency, format_percentage, format_signed
from utils.date_helpers import format_date

TREND_ARROWS = {"UP": "↑", "DOWN": "↓", "STABLE": "→"}
COMPARISON_LEGEND = "Legend: ↑ = Increase  ↓ = Decrease  → = No change"


def render_table(headers: list[str], rows: list[list[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(cells):
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    rule = "  ".join("-" * w for w in widths)
    return "\n".join([line(headers), rule] + [line(r) for r in rows])


def bills_table(bills: list[Bill], symbol: str = "$") -> str:
    if not bills:
        return "No bills found."
    rows = [
        [
            b.id[:8],
            b.name,
            BILL_TYPE_LABELS.get(b.type, b.type),
            format_currency(b.amount, symbol),
            str(b.due_day),
            "Active" if b.active else "Inactive",
        ]
        for b in bills
    ]
    return render_table(["ID", "Name", "Type", "Amount", "Due Day", "Status"], rows)


def payments_table(payments: list[Payment], symbol: str = "$") -> str:
    if not payments:
        return "No payments found."
    rows = [
        [
            p.id[:8],
            p.bill_name,
            format_currency(p.amount, symbol),
            format_date(p.due_date),
            STATUS_LABELS.get(p.status, p.status),
            format_date(p.paid_date) if p.paid_date else "-",
        ]
        for p in payments
    ]
    return render_table(["ID", "Bill", "Amount", "Due Date", "Status", "Paid Date"], rows)


def summary_block(summary: PaymentSummary, symbol: str = "$") -> str:
    return "\n".join([
        "=== Monthly Summary ===",
        f"Total Amount: {format_currency(summary.total, symbol)}",
        f"Paid: {format_currency(summary.paid, symbol)}",
        f"Pending: {format_currency(summary.pending, symbol)}",
        f"Overdue: {format_currency(summary.overdue, symbol)}",
    ])


def _change_cell(metric: ComparisonMetric, symbol: str) -> str:
    if metric.trend == "STABLE":
        return format_currency(0, symbol)
    return format_signed(metric.change, symbol)


def comparison_table(comparison: PaymentComparison, symbol: str = "$") -> str:
    headers = ["Metric"] + [m.month_label for m in comparison.months] + [
        "Change", "% Change", "Trend",
    ]
    rows = []
    for metric in comparison.metrics.values():
        rows.append(
            [metric.metric_name]
            + [format_currency(v, symbol) for v in metric.values]
            + [
                _change_cell(metric, symbol),
                format_percentage(metric.percentage_change),
                TREND_ARROWS[metric.trend],
            ]
        )
    return render_table(headers, rows)

