"""
PayDesk - Payroll Aggregator Tests

Unit tests for period filtering, itemization, taxes, contributions and
net pay.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.models.company import Currency
from app.models.payroll import EmploymentType, TransactionStatus, TransactionType
from app.services.payroll_aggregator import (
    CompanySnapshot,
    ContributionSnapshot,
    EmployeeSnapshot,
    PayPeriod,
    TransactionSnapshot,
    aggregate_payslip,
    calculate_gross_pay,
    select_period_transactions,
)
from app.utils.error_handling import PayrollComputationException


OCTOBER = PayPeriod(month=10, year=2026)


def make_employee(salary="1000", employment_type=EmploymentType.SALARIED, employee_id="EMP001"):
    return EmployeeSnapshot(
        employee_id=employee_id,
        name="Jane Doe",
        job_title="Accountant",
        employment_type=employment_type,
        salary=Decimal(salary),
        bank_name="Bank of Kigali",
        account_number="000123456789",
    )


def make_company(tax_rate="20", contributions=(), flat_tax_amount=None, currency=Currency.USD):
    return CompanySnapshot(
        id="company-1",
        name="Acme Corp",
        currency=currency,
        tax_rate=Decimal(tax_rate),
        recurring_contributions=tuple(contributions),
        flat_tax_amount=Decimal(flat_tax_amount) if flat_tax_amount is not None else None,
        payslip_company_name="Acme Corp",
        payslip_company_tagline="Payroll for Acme Corp",
        payslip_company_contact="contact@acmecorp.com",
    )


_counter = iter(range(1, 10_000))


def make_txn(
    txn_type,
    amount,
    description,
    day=date(2026, 10, 15),
    status=TransactionStatus.APPROVED,
    employee_id="EMP001",
    txn_id=None,
):
    return TransactionSnapshot(
        id=txn_id or f"txn-{next(_counter):04d}",
        employee_id=employee_id,
        transaction_date=day,
        type=txn_type,
        amount=Decimal(str(amount)),
        description=description,
        status=status,
    )


PENSION = ContributionSnapshot(id="pension", name="Pension Fund", percentage=Decimal("5"))


class TestPayPeriod:
    """Test the pay period value object."""

    def test_label(self):
        """Label is 'Month Year'."""
        assert OCTOBER.label == "October 2026"

    def test_contains(self):
        """Only dates of the same month and year are inside."""
        assert OCTOBER.contains(date(2026, 10, 1))
        assert OCTOBER.contains(date(2026, 10, 31))
        assert not OCTOBER.contains(date(2026, 11, 1))
        assert not OCTOBER.contains(date(2025, 10, 15))

    def test_current_uses_reference_date(self):
        """Current period follows the reference date."""
        assert PayPeriod.current(date(2026, 3, 9)) == PayPeriod(month=3, year=2026)


class TestBasicComputation:
    """Test gross, taxes and net pay without transactions."""

    def test_salary_1000_tax_20(self):
        """Tax 20% of 1000 is 200, net 800."""
        payslip = aggregate_payslip(make_employee(), make_company(), [], OCTOBER)

        assert payslip.gross_pay == Decimal("1000")
        assert payslip.taxes == Decimal("200")
        assert payslip.net_pay == Decimal("800")
        assert payslip.allowances == {}
        assert payslip.deductions == {}
        assert payslip.recurring_contributions == {}

    def test_no_transactions_net_is_gross_minus_taxes_and_contributions(self):
        """With nothing in period, net = gross - taxes - contributions."""
        txns = [make_txn(TransactionType.BONUS, 100, "Old Bonus", day=date(2026, 9, 30))]
        payslip = aggregate_payslip(make_employee(), make_company(contributions=[PENSION]), txns, OCTOBER)

        assert payslip.recurring_contributions == {"Pension Fund": Decimal("50")}
        assert payslip.net_pay == Decimal("1000") - Decimal("200") - Decimal("50")

    def test_rendering_inputs(self):
        """Identity, bank, branding and currency fields are carried over."""
        payslip = aggregate_payslip(
            make_employee(), make_company(currency=Currency.RWF), [], OCTOBER
        )

        assert payslip.employee_name == "Jane Doe"
        assert payslip.employee_id == "EMP001"
        assert payslip.job_title == "Accountant"
        assert payslip.bank_name == "Bank of Kigali"
        assert payslip.account_number == "000123456789"
        assert payslip.company_name == "Acme Corp"
        assert payslip.company_tagline == "Payroll for Acme Corp"
        assert payslip.company_contact == "contact@acmecorp.com"
        assert payslip.pay_period == "October 2026"
        assert payslip.currency == "RWF"
        assert payslip.currency_symbol == "FRw"


class TestItemization:
    """Test categorization of transactions."""

    def test_bonus_and_deduction(self):
        """Bonus is an allowance, Deduction is a deduction."""
        txns = [
            make_txn(TransactionType.BONUS, 100, "Holiday Bonus"),
            make_txn(TransactionType.DEDUCTION, 50, "Loan Repayment"),
        ]
        payslip = aggregate_payslip(make_employee(), make_company(tax_rate="10"), txns, OCTOBER)

        assert payslip.allowances == {"Holiday Bonus": Decimal("100")}
        assert payslip.deductions == {"Loan Repayment": Decimal("50")}
        assert payslip.taxes == Decimal("100")
        assert payslip.net_pay == Decimal("950")

    def test_loans_and_advances_are_deductions(self):
        """Loan and Advance both reduce pay."""
        txns = [
            make_txn(TransactionType.LOAN, 200, "Car Loan"),
            make_txn(TransactionType.ADVANCE, 75, "Salary Advance"),
        ]
        payslip = aggregate_payslip(make_employee(), make_company(tax_rate="0"), txns, OCTOBER)

        assert payslip.allowances == {}
        assert payslip.deductions == {
            "Car Loan": Decimal("200"),
            "Salary Advance": Decimal("75"),
        }
        assert payslip.net_pay == Decimal("725")

    def test_same_label_is_summed(self):
        """Two entries with one description add up instead of overwriting."""
        txns = [
            make_txn(TransactionType.ADVANCE, 100, "Advance", day=date(2026, 10, 3)),
            make_txn(TransactionType.ADVANCE, 40, "Advance", day=date(2026, 10, 20)),
        ]
        payslip = aggregate_payslip(make_employee(), make_company(), txns, OCTOBER)

        assert payslip.deductions == {"Advance": Decimal("140")}

    def test_same_label_in_different_categories_stays_separate(self):
        """A label used for a bonus and a deduction appears in both sections."""
        txns = [
            make_txn(TransactionType.BONUS, 30, "Adjustment"),
            make_txn(TransactionType.DEDUCTION, 10, "Adjustment"),
        ]
        payslip = aggregate_payslip(make_employee(), make_company(), txns, OCTOBER)

        assert payslip.allowances == {"Adjustment": Decimal("30")}
        assert payslip.deductions == {"Adjustment": Decimal("10")}

    def test_items_ordered_by_date(self):
        """Item order follows transaction date, not input order."""
        txns = [
            make_txn(TransactionType.DEDUCTION, 10, "Late", day=date(2026, 10, 25)),
            make_txn(TransactionType.DEDUCTION, 20, "Early", day=date(2026, 10, 2)),
        ]
        payslip = aggregate_payslip(make_employee(), make_company(), txns, OCTOBER)

        assert list(payslip.deductions) == ["Early", "Late"]


class TestPeriodFilter:
    """Test which transactions count towards a period."""

    @pytest.mark.parametrize("status", [TransactionStatus.PENDING, TransactionStatus.REJECTED])
    def test_unrealized_statuses_excluded(self, status):
        """Pending and Rejected never contribute."""
        txns = [make_txn(TransactionType.BONUS, 100, "Bonus", status=status)]
        payslip = aggregate_payslip(make_employee(), make_company(), txns, OCTOBER)

        assert payslip.allowances == {}
        assert payslip.net_pay == Decimal("800")

    def test_paid_counts(self):
        """Paid transactions are realized."""
        txns = [make_txn(TransactionType.ADVANCE, 100, "Advance", status=TransactionStatus.PAID)]
        payslip = aggregate_payslip(make_employee(), make_company(), txns, OCTOBER)

        assert payslip.deductions == {"Advance": Decimal("100")}

    @pytest.mark.parametrize("status", [TransactionStatus.APPROVED, TransactionStatus.PAID])
    def test_out_of_period_excluded_for_every_realized_status(self, status):
        """A Paid or Approved transaction from another month never leaks in."""
        txns = [
            make_txn(TransactionType.BONUS, 100, "September Bonus", day=date(2026, 9, 15), status=status),
            make_txn(TransactionType.DEDUCTION, 50, "Last Year", day=date(2025, 10, 15), status=status),
        ]
        payslip = aggregate_payslip(make_employee(), make_company(), txns, OCTOBER)

        assert payslip.allowances == {}
        assert payslip.deductions == {}

    def test_other_employees_ignored(self):
        """Transactions of another employee are skipped."""
        txns = [make_txn(TransactionType.BONUS, 100, "Bonus", employee_id="EMP999")]
        selected = select_period_transactions(txns, "EMP001", OCTOBER)

        assert selected == ()


class TestTaxesAndContributions:
    """Test tax policy and recurring contributions."""

    def test_flat_tax_overrides_rate(self):
        """A flat tax amount replaces the percentage."""
        payslip = aggregate_payslip(
            make_employee(), make_company(tax_rate="20", flat_tax_amount="75"), [], OCTOBER
        )

        assert payslip.taxes == Decimal("75")
        assert payslip.net_pay == Decimal("925")

    def test_zero_flat_tax_still_overrides(self):
        """A flat tax of zero means no tax at all."""
        payslip = aggregate_payslip(
            make_employee(), make_company(flat_tax_amount="0"), [], OCTOBER
        )

        assert payslip.taxes == Decimal("0")

    def test_multiple_contributions(self):
        """Each contribution is a percentage of gross pay."""
        contributions = [
            PENSION,
            ContributionSnapshot(id="health", name="Health Insurance", percentage=Decimal("2.5")),
        ]
        payslip = aggregate_payslip(
            make_employee(salary="2000"), make_company(contributions=contributions), [], OCTOBER
        )

        assert payslip.recurring_contributions == {
            "Pension Fund": Decimal("100"),
            "Health Insurance": Decimal("50"),
        }
        assert payslip.net_pay == Decimal("2000") - Decimal("400") - Decimal("150")


class TestDailyRate:
    """Test daily-rate gross pay."""

    def test_days_worked_multiplies_rate(self):
        """Rate x days when days worked is supplied."""
        employee = make_employee(salary="50", employment_type=EmploymentType.DAILY_RATE)
        assert calculate_gross_pay(employee, Decimal("20")) == Decimal("1000")

    def test_stored_rate_without_days(self):
        """Without days worked the stored rate is the gross pay."""
        employee = make_employee(salary="50", employment_type=EmploymentType.DAILY_RATE)
        payslip = aggregate_payslip(employee, make_company(), [], OCTOBER)

        assert payslip.gross_pay == Decimal("50")

    def test_days_ignored_for_salaried(self):
        """Salaried employees always get their salary."""
        payslip = aggregate_payslip(make_employee(), make_company(), [], OCTOBER, days_worked=3)

        assert payslip.gross_pay == Decimal("1000")


class TestInvalidInput:
    """Test computation errors."""

    def test_missing_employee(self):
        with pytest.raises(PayrollComputationException):
            aggregate_payslip(None, make_company(), [], OCTOBER)

    def test_missing_company(self):
        with pytest.raises(PayrollComputationException):
            aggregate_payslip(make_employee(), None, [], OCTOBER)

    def test_negative_salary(self):
        with pytest.raises(PayrollComputationException) as exc_info:
            aggregate_payslip(make_employee(salary="-1"), make_company(), [], OCTOBER)
        assert exc_info.value.field == "salary"

    def test_negative_tax_rate(self):
        with pytest.raises(PayrollComputationException) as exc_info:
            aggregate_payslip(make_employee(), make_company(tax_rate="-5"), [], OCTOBER)
        assert exc_info.value.field == "tax_rate"

    def test_invalid_month(self):
        with pytest.raises(PayrollComputationException):
            aggregate_payslip(make_employee(), make_company(), [], PayPeriod(month=13, year=2026))

    def test_computation_error_is_a_400(self):
        """Computation errors surface as validation failures."""
        with pytest.raises(PayrollComputationException) as exc_info:
            aggregate_payslip(None, make_company(), [], OCTOBER)
        assert exc_info.value.status_code == 400
