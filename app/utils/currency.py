"""
PayDesk - Currency Helpers

Display formatting for dashboards and API summaries.

This is NOT the payslip money format. Payslips use the fixed
``{symbol}{value:.2f}`` rendering in app.services.payslip_formatter; the
display format here groups thousands and uses 0 decimals for RWF.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from app.models.company import Currency


# Symbol prefixed to payslip amounts
CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.RWF: "FRw",
}

# Fraction digits used for display formatting
DISPLAY_DECIMALS = {
    Currency.USD: 2,
    Currency.RWF: 0,
}

Number = Union[Decimal, int, float, str]


def _as_currency(currency: Union[Currency, str, None]) -> Currency:
    if currency is None:
        return Currency.USD
    return Currency(currency)


def currency_symbol(currency: Union[Currency, str, None]) -> str:
    """Get the symbol used on payslips. Defaults to ``$`` when unset."""
    return CURRENCY_SYMBOLS[_as_currency(currency)]


def format_display_currency(value: Number, currency: Union[Currency, str, None]) -> str:
    """
    Format an amount for on-screen display.

    USD -> ``$1,234.50`` ; RWF -> ``RWF 1,235``. Negative values carry a
    leading minus sign.
    """
    code = _as_currency(currency)
    decimals = DISPLAY_DECIMALS[code]
    quantum = Decimal(1).scaleb(-decimals)
    amount = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.{decimals}f}"

    if code == Currency.USD:
        return f"{sign}${grouped}"
    return f"{sign}{code.value} {grouped}"
