"""
PayDesk - Payslip Formatter

Renders a PayslipInput into the canonical fixed-layout text document. The
text is the artifact that is previewed, exported to PDF and archived, so the
section order and separator characters are fixed.

Money on the payslip is ``{symbol}{value}`` with exactly two decimals and no
grouping, independent of locale. Screen display formatting lives in
app.utils.currency and is intentionally different.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from app.services.payroll_aggregator import PayslipInput


SEPARATOR = "=" * 50
LINE_SEPARATOR = "-" * 50

TWO_PLACES = Decimal("0.01")


def format_money(value: Any, symbol: str) -> str:
    """``$1234.50`` style money for the payslip artifact."""
    amount = Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{symbol}{amount:f}"


def format_section(title: str, items: Dict[str, Any], symbol: str) -> List[str]:
    """
    Header plus one ``- label: money`` line per positive item.

    Emits nothing when no item is greater than zero.
    """
    positive = [(label, value) for label, value in items.items() if value > 0]
    if not positive:
        return []

    lines = [title]
    for label, value in positive:
        lines.append(f"- {label}: {format_money(value, symbol)}")
    return lines


def format_payslip_text(payslip: PayslipInput) -> str:
    """Render the payslip document. Lines are joined with ``\\n``."""
    symbol = payslip.currency_symbol

    content = [
        SEPARATOR,
        payslip.company_name,
        payslip.company_tagline,
        SEPARATOR,
        "",
        f"PAYSLIP FOR: {payslip.pay_period}",
        "",
        f"Employee Name: {payslip.employee_name}",
        f"Employee ID: {payslip.employee_id}",
        f"Job Title: {payslip.job_title}",
        "",
        LINE_SEPARATOR,
        "INCOME",
        LINE_SEPARATOR,
        f"Gross Pay: {format_money(payslip.gross_pay, symbol)}",
        *format_section("Allowances:", payslip.allowances, symbol),
        "",
        LINE_SEPARATOR,
        "DEDUCTIONS",
        LINE_SEPARATOR,
        *format_section("Deductions:", payslip.deductions, symbol),
        *format_section("Recurring Contributions:", payslip.recurring_contributions, symbol),
        f"Taxes: {format_money(payslip.taxes, symbol)}",
        "",
        LINE_SEPARATOR,
        "SUMMARY",
        LINE_SEPARATOR,
        f"Net Pay: {format_money(payslip.net_pay, symbol)}",
        "",
        "Payment to:",
        f"Bank Name: {payslip.bank_name}",
        f"Account Number: {payslip.account_number}",
        "",
        SEPARATOR,
        payslip.company_contact,
        SEPARATOR,
    ]

    return "\n".join(content)
