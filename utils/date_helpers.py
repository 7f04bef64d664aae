from datetime import date, datetime, time, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT


def today() -> date:
    return date.today()


def now() -> datetime:
    return datetime.now()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in (DATE_FORMAT, "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str.strip(), fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    # isoformat zero-pads the year; strftime("%Y") does not on every platform
    return d.isoformat()


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str.strip(), MONTH_FORMAT).date()
    except ValueError:
        return None


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return (first_day, last_day) for a calendar month, both inclusive."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def first_of_next_month(year: int, month: int) -> date:
    if month == 12:
        return date(year + 1, 1, 1)
    return date(year, month + 1, 1)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def previous_months(year: int, month: int, count: int) -> list[tuple[int, int]]:
    """Return `count` (year, month) pairs ending at year/month, oldest first."""
    result = []
    for back in range(count - 1, -1, -1):
        y, m = year, month - back
        while m < 1:
            m += 12
            y -= 1
        result.append((y, m))
    return result


def overdue_cutoff(moment: datetime) -> date:
    """First due date that is NOT overdue at `moment`.

    A payment is overdue once the start of its due date lies strictly before
    `moment`, so anything dated on or before moment's day counts unless the
    moment is exactly midnight.
    """
    if moment.time() == time.min:
        return moment.date()
    return moment.date() + timedelta(days=1)


def friendly_month(year: int, month: int) -> str:
    """Convert a year/month to e.g. 'February 2026'."""
    return date(year, month, 1).strftime("%B %Y")
