from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

ZERO = Decimal("0")


@dataclass
class PaymentSummary:
    total: Decimal = ZERO
    paid: Decimal = ZERO
    pending: Decimal = ZERO
    overdue: Decimal = ZERO


@dataclass
class MonthSummary:
    year: int
    month: int
    month_label: str
    total: Decimal = ZERO
    paid: Decimal = ZERO
    pending: Decimal = ZERO
    overdue: Decimal = ZERO


@dataclass
class ComparisonMetric:
    metric_name: str
    values: list[Decimal]           # oldest first
    change: Decimal
    percentage_change: Optional[Decimal]
    trend: str                      # 'UP' | 'DOWN' | 'STABLE'


@dataclass
class PaymentComparison:
    months: list[MonthSummary]
    metrics: dict[str, ComparisonMetric] = field(default_factory=dict)
