from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Bill:
    id: str
    name: str
    type: str               # one of BILL_TYPES
    amount: Decimal
    due_day: int            # 1-31, clamped to month length when generating
    description: Optional[str] = None
    active: bool = True
    created_at: str = ""
    updated_at: str = ""
