from decimal import Decimal


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{amount:,.2f}"


def format_signed(amount: Decimal, symbol: str = "$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percentage(value: Decimal | None) -> str:
    """One decimal place with sign, or 'N/A' when there is no baseline."""
    if value is None:
        return "N/A"
    return f"{value:+.1f}%"
