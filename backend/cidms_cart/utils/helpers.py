from typing import Optional

from cidms_cart.core.config import settings


def format_currency(amount: Optional[float], currency: Optional[str] = None) -> str:
    """
    Format an amount for display.

    USD amounts render as "$1,234.50"; other currencies as "1,234.50 EUR".
    A missing amount renders as zero.
    """
    currency = (currency or settings.CURRENCY).upper()
    amount = amount or 0.0

    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.2f}"

    if currency == "USD":
        return f"{sign}${digits}"
    return f"{sign}{digits} {currency}"
