from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from services.errors import ValidationError
from utils.constants import (
    BILL_TYPES, MAX_DUE_DAY, MAX_YEAR, MIN_DUE_DAY, MIN_YEAR, PAYMENT_STATUSES,
)
from utils.date_helpers import parse_date


def to_amount(value) -> Decimal:
    """Coerce str/int/float/Decimal to a positive Decimal."""
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number.")
    try:
        # str() first so floats keep their printed value (0.1 -> Decimal('0.1'))
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0.")
    return amount


def to_due_day(value) -> int:
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid due day: {value!r}") from None
    if not MIN_DUE_DAY <= day <= MAX_DUE_DAY:
        raise ValidationError(f"Due day must be between {MIN_DUE_DAY} and {MAX_DUE_DAY}.")
    return day


def to_name(value) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError("Name cannot be empty.")
    return name


def to_bill_type(value) -> str:
    type_ = (value or "").strip().upper()
    if type_ not in BILL_TYPES:
        raise ValidationError(f"Bill type must be one of {', '.join(BILL_TYPES)}.")
    return type_


def to_status(value) -> str:
    status = (value or "").strip().upper()
    if status not in PAYMENT_STATUSES:
        raise ValidationError(f"Status must be one of {', '.join(PAYMENT_STATUSES)}.")
    return status


def to_date(value) -> date:
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    else:
        parsed = parse_date(value) if isinstance(value, str) else None
    if parsed is None:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD).")
    if not MIN_YEAR <= parsed.year <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}.")
    return parsed


def to_year_month(year, month) -> tuple[int, int]:
    try:
        y, m = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid period: {year!r}-{month!r}") from None
    if not 1 <= m <= 12:
        raise ValidationError("Month must be between 1 and 12.")
    if not MIN_YEAR <= y <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}.")
    return y, m


def optional_text(value) -> str | None:
    """Blank strings become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
