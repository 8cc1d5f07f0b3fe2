"""
PayDesk - Payslip Formatter Tests
"""

from decimal import Decimal

from app.services.payroll_aggregator import PayslipInput
from app.services.payslip_formatter import (
    LINE_SEPARATOR,
    SEPARATOR,
    format_money,
    format_payslip_text,
    format_section,
)


def make_payslip(**overrides) -> PayslipInput:
    values = dict(
        company_name="Acme Corp",
        company_tagline="Payroll for Acme Corp",
        company_contact="contact@acmecorp.com",
        employee_name="Jane Doe",
        employee_id="EMP001",
        job_title="Accountant",
        pay_period="October 2026",
        gross_pay=Decimal("1000"),
        allowances={"Holiday Bonus": Decimal("100")},
        deductions={"Loan Repayment": Decimal("50")},
        taxes=Decimal("100"),
        net_pay=Decimal("900"),
        bank_name="Bank of Kigali",
        account_number="000123456789",
        recurring_contributions={"Pension Fund": Decimal("50")},
        currency="USD",
        currency_symbol="$",
    )
    values.update(overrides)
    return PayslipInput(**values)


EXPECTED_TEXT = "\n".join([
    SEPARATOR,
    "Acme Corp",
    "Payroll for Acme Corp",
    SEPARATOR,
    "",
    "PAYSLIP FOR: October 2026",
    "",
    "Employee Name: Jane Doe",
    "Employee ID: EMP001",
    "Job Title: Accountant",
    "",
    LINE_SEPARATOR,
    "INCOME",
    LINE_SEPARATOR,
    "Gross Pay: $1000.00",
    "Allowances:",
    "- Holiday Bonus: $100.00",
    "",
    LINE_SEPARATOR,
    "DEDUCTIONS",
    LINE_SEPARATOR,
    "Deductions:",
    "- Loan Repayment: $50.00",
    "Recurring Contributions:",
    "- Pension Fund: $50.00",
    "Taxes: $100.00",
    "",
    LINE_SEPARATOR,
    "SUMMARY",
    LINE_SEPARATOR,
    "Net Pay: $900.00",
    "",
    "Payment to:",
    "Bank Name: Bank of Kigali",
    "Account Number: 000123456789",
    "",
    SEPARATOR,
    "contact@acmecorp.com",
    SEPARATOR,
])


class TestFormatMoney:
    """Test payslip money rendering."""

    def test_two_decimals(self):
        assert format_money(Decimal("1000"), "$") == "$1000.00"
        assert format_money(Decimal("12.5"), "$") == "$12.50"

    def test_no_grouping(self):
        """Thousands are never grouped on the payslip."""
        assert format_money(Decimal("1234567.891"), "$") == "$1234567.89"

    def test_half_up_rounding(self):
        assert format_money(Decimal("0.125"), "$") == "$0.13"
        assert format_money(Decimal("2.675"), "$") == "$2.68"

    def test_symbol_prefix_without_space(self):
        assert format_money(Decimal("1500"), "FRw") == "FRw1500.00"

    def test_accepts_plain_numbers(self):
        assert format_money(42, "$") == "$42.00"


class TestFormatSection:
    """Test itemized sections."""

    def test_empty_section_has_no_header(self):
        assert format_section("Allowances:", {}, "$") == []

    def test_zero_items_are_omitted(self):
        """Zero-valued items never render, and an all-zero section disappears."""
        assert format_section("Allowances:", {"Nothing": Decimal("0")}, "$") == []
        lines = format_section(
            "Deductions:", {"Nothing": Decimal("0"), "Loan": Decimal("10")}, "$"
        )
        assert lines == ["Deductions:", "- Loan: $10.00"]

    def test_item_order_is_preserved(self):
        lines = format_section(
            "Deductions:", {"B": Decimal("1"), "A": Decimal("2")}, "$"
        )
        assert lines[1:] == ["- B: $1.00", "- A: $2.00"]


class TestFormatPayslipText:
    """Test the full payslip document."""

    def test_exact_layout(self):
        assert format_payslip_text(make_payslip()) == EXPECTED_TEXT

    def test_deterministic(self):
        """Same input, same text."""
        payslip = make_payslip()
        assert format_payslip_text(payslip) == format_payslip_text(payslip)

    def test_empty_sections_omitted(self):
        """No allowances, deductions or contributions means no headers for them."""
        text = format_payslip_text(
            make_payslip(allowances={}, deductions={}, recurring_contributions={})
        )

        assert "Allowances:" not in text
        assert "Deductions:" not in text
        assert "Recurring Contributions:" not in text
        # the section banners and taxes stay
        assert "DEDUCTIONS" in text
        assert "Taxes: $100.00" in text

    def test_every_amount_has_two_decimals(self):
        text = format_payslip_text(
            make_payslip(gross_pay=Decimal("1000.5"), net_pay=Decimal("833.3333"))
        )

        assert "Gross Pay: $1000.50" in text
        assert "Net Pay: $833.33" in text

    def test_currency_symbol_used_throughout(self):
        text = format_payslip_text(make_payslip(currency="RWF", currency_symbol="FRw"))

        assert "Gross Pay: FRw1000.00" in text
        assert "Net Pay: FRw900.00" in text
        assert "$" not in text

    def test_no_trailing_newline(self):
        text = format_payslip_text(make_payslip())
        assert not text.endswith("\n")
        assert text.splitlines()[-1] == SEPARATOR
