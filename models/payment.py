from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class Payment:
    id: str
    bill_id: str
    amount: Decimal
    status: str             # 'PENDING' | 'PAID' | 'OVERDUE'
    due_date: date
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    bill_name: str = ""
    created_at: str = ""
    updated_at: str = ""
