"""
PayDesk - Payroll Aggregator

Turns (employee, company, transactions, pay period) into a fully itemized
pay computation.

Rules:
1. Period filter
   - A transaction counts only if its date falls in the requested
     (month, year) AND its status is Approved or Paid.
2. Categorization
   - Bonus -> allowances (added to pay)
   - Deduction, Loan, Advance -> deductions (subtracted from pay)
   - Items are keyed by description; same-label items are summed.
3. Gross pay
   - Salaried: the stored monthly salary
   - Daily rate: rate x days worked when supplied, else the stored rate
4. Taxes
   - Company flat tax amount when set, else gross x tax_rate / 100
5. Recurring contributions
   - gross x percentage / 100 for every configured contribution
6. Net pay
   - gross + allowances - deductions - taxes - contributions

The aggregator is pure: it works on immutable snapshots handed in by the
caller and never touches the database.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from app.models.company import Currency
from app.models.payroll import EmploymentType, TransactionStatus, TransactionType
from app.utils.currency import currency_symbol
from app.utils.error_handling import PayrollComputationException


# ===========================================
# CONSTANTS
# ===========================================

REALIZED_STATUSES = frozenset({TransactionStatus.APPROVED, TransactionStatus.PAID})

ALLOWANCE_TYPES = frozenset({TransactionType.BONUS})
DEDUCTION_TYPES = frozenset({
    TransactionType.DEDUCTION,
    TransactionType.LOAN,
    TransactionType.ADVANCE,
})

HUNDRED = Decimal("100")


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ===========================================
# SNAPSHOTS
# ===========================================

@dataclass(frozen=True)
class PayPeriod:
    """A (month, year) pair identifying the payslip window."""
    month: int
    year: int

    @classmethod
    def current(cls, reference: Optional[date] = None) -> "PayPeriod":
        reference = reference or date.today()
        return cls(month=reference.month, year=reference.year)

    @property
    def label(self) -> str:
        """e.g. ``October 2026``"""
        return f"{calendar.month_name[self.month]} {self.year}"

    def contains(self, day: date) -> bool:
        return day.month == self.month and day.year == self.year


@dataclass(frozen=True)
class ContributionSnapshot:
    id: str
    name: str
    percentage: Decimal


@dataclass(frozen=True)
class CompanySnapshot:
    """Read-only view of a company's payroll configuration."""
    id: str
    name: str
    currency: Currency
    tax_rate: Decimal
    recurring_contributions: Tuple[ContributionSnapshot, ...] = ()
    flat_tax_amount: Optional[Decimal] = None
    payslip_company_name: str = ""
    payslip_company_tagline: str = ""
    payslip_company_contact: str = ""

    @classmethod
    def from_model(cls, company) -> "CompanySnapshot":
        contributions = tuple(
            ContributionSnapshot(
                id=str(item["id"]),
                name=item["name"],
                percentage=_decimal(item["percentage"]),
            )
            for item in (company.recurring_contributions or [])
        )
        return cls(
            id=company.id,
            name=company.name,
            currency=Currency(company.currency),
            tax_rate=_decimal(company.tax_rate),
            recurring_contributions=contributions,
            flat_tax_amount=(
                _decimal(company.flat_tax_amount)
                if company.flat_tax_amount is not None else None
            ),
            payslip_company_name=company.payslip_company_name,
            payslip_company_tagline=company.payslip_company_tagline,
            payslip_company_contact=company.payslip_company_contact,
        )


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Read-only view of an employee's identity and compensation."""
    employee_id: str
    name: str
    job_title: str
    employment_type: EmploymentType
    salary: Decimal
    bank_name: str
    account_number: str

    @classmethod
    def from_model(cls, employee) -> "EmployeeSnapshot":
        return cls(
            employee_id=employee.employee_id,
            name=employee.name,
            job_title=employee.job_title,
            employment_type=EmploymentType(employee.employment_type),
            salary=_decimal(employee.salary),
            bank_name=employee.bank_name,
            account_number=employee.account_number,
        )


@dataclass(frozen=True)
class TransactionSnapshot:
    """Read-only view of a payroll transaction."""
    id: str
    employee_id: str
    transaction_date: date
    type: TransactionType
    amount: Decimal
    description: str
    status: TransactionStatus

    @classmethod
    def from_model(cls, transaction, employee_id: Optional[str] = None) -> "TransactionSnapshot":
        day = transaction.transaction_date
        if isinstance(day, datetime):
            day = day.date()
        return cls(
            id=transaction.id,
            employee_id=employee_id or transaction.employee_id,
            transaction_date=day,
            type=TransactionType(transaction.type),
            amount=_decimal(transaction.amount),
            description=transaction.description,
            status=TransactionStatus(transaction.status),
        )


@dataclass(frozen=True)
class PayslipInput:
    """Aggregator output and formatter input."""
    company_name: str
    company_tagline: str
    company_contact: str
    employee_name: str
    employee_id: str
    job_title: str
    pay_period: str
    gross_pay: Decimal
    allowances: Dict[str, Decimal]
    deductions: Dict[str, Decimal]
    taxes: Decimal
    net_pay: Decimal
    bank_name: str
    account_number: str
    recurring_contributions: Dict[str, Decimal]
    currency: str
    currency_symbol: str
    period: Optional[PayPeriod] = field(default=None, compare=False)

    @property
    def total_allowances(self) -> Decimal:
        return sum(self.allowances.values(), Decimal("0"))

    @property
    def total_deductions(self) -> Decimal:
        return sum(self.deductions.values(), Decimal("0"))

    @property
    def total_contributions(self) -> Decimal:
        return sum(self.recurring_contributions.values(), Decimal("0"))


# ===========================================
# AGGREGATION
# ===========================================

def select_period_transactions(
    transactions: Iterable[TransactionSnapshot],
    employee_id: str,
    period: PayPeriod,
) -> Tuple[TransactionSnapshot, ...]:
    """
    Realized transactions of one employee dated inside the period, ordered
    by (date, id).
    """
    selected = [
        t for t in transactions
        if t.employee_id == employee_id
        and period.contains(t.transaction_date)
        and t.status in REALIZED_STATUSES
    ]
    selected.sort(key=lambda t: (t.transaction_date, t.id))
    return tuple(selected)


def itemize(
    transactions: Iterable[TransactionSnapshot],
    types: frozenset,
) -> Dict[str, Decimal]:
    """Sum amounts per description for the given transaction types."""
    items: Dict[str, Decimal] = {}
    for t in transactions:
        if t.type in types:
            items[t.description] = items.get(t.description, Decimal("0")) + t.amount
    return items


def calculate_gross_pay(
    employee: EmployeeSnapshot,
    days_worked: Optional[Decimal] = None,
) -> Decimal:
    """Gross pay for the period."""
    if employee.employment_type == EmploymentType.DAILY_RATE and days_worked is not None:
        return employee.salary * days_worked
    return employee.salary


def calculate_taxes(gross_pay: Decimal, company: CompanySnapshot) -> Decimal:
    """Flat tax amount when configured, else the percentage of gross pay."""
    if company.flat_tax_amount is not None:
        return company.flat_tax_amount
    return gross_pay * company.tax_rate / HUNDRED


def calculate_contributions(
    gross_pay: Decimal,
    company: CompanySnapshot,
) -> Dict[str, Decimal]:
    """Recurring contribution amounts keyed by contribution name."""
    amounts: Dict[str, Decimal] = {}
    for contribution in company.recurring_contributions:
        amount = gross_pay * contribution.percentage / HUNDRED
        amounts[contribution.name] = amounts.get(contribution.name, Decimal("0")) + amount
    return amounts


def _validate_inputs(
    employee: Optional[EmployeeSnapshot],
    company: Optional[CompanySnapshot],
    period: Optional[PayPeriod],
    days_worked: Optional[Decimal],
) -> None:
    if employee is None:
        raise PayrollComputationException("Employee is required", field="employee")
    if company is None:
        raise PayrollComputationException("Company is required", field="company")
    if period is None or not 1 <= period.month <= 12:
        raise PayrollComputationException("Pay period month must be between 1 and 12", field="month")
    if employee.salary < 0:
        raise PayrollComputationException("Salary cannot be negative", field="salary")
    if company.tax_rate < 0:
        raise PayrollComputationException("Tax rate cannot be negative", field="tax_rate")
    if company.flat_tax_amount is not None and company.flat_tax_amount < 0:
        raise PayrollComputationException("Flat tax amount cannot be negative", field="flat_tax_amount")
    for contribution in company.recurring_contributions:
        if contribution.percentage < 0:
            raise PayrollComputationException(
                f"Contribution '{contribution.name}' percentage cannot be negative",
                field="recurring_contributions",
            )
    if days_worked is not None and days_worked < 0:
        raise PayrollComputationException("Days worked cannot be negative", field="days_worked")


def aggregate_payslip(
    employee: Optional[EmployeeSnapshot],
    company: Optional[CompanySnapshot],
    transactions: Iterable[TransactionSnapshot],
    period: PayPeriod,
    days_worked: Optional[Any] = None,
) -> PayslipInput:
    """
    Compute an itemized payslip for one employee and pay period.

    Raises:
        PayrollComputationException: missing employee/company or negative
            salary, rates or days worked.
    """
    days = _decimal(days_worked) if days_worked is not None else None
    _validate_inputs(employee, company, period, days)

    selected = select_period_transactions(transactions, employee.employee_id, period)
    allowances = itemize(selected, ALLOWANCE_TYPES)
    deductions = itemize(selected, DEDUCTION_TYPES)

    gross_pay = calculate_gross_pay(employee, days)
    taxes = calculate_taxes(gross_pay, company)
    contributions = calculate_contributions(gross_pay, company)

    net_pay = (
        gross_pay
        + sum(allowances.values(), Decimal("0"))
        - sum(deductions.values(), Decimal("0"))
        - taxes
        - sum(contributions.values(), Decimal("0"))
    )

    return PayslipInput(
        company_name=company.payslip_company_name or company.name,
        company_tagline=company.payslip_company_tagline,
        company_contact=company.payslip_company_contact,
        employee_name=employee.name,
        employee_id=employee.employee_id,
        job_title=employee.job_title,
        pay_period=period.label,
        gross_pay=gross_pay,
        allowances=allowances,
        deductions=deductions,
        taxes=taxes,
        net_pay=net_pay,
        bank_name=employee.bank_name,
        account_number=employee.account_number,
        recurring_contributions=contributions,
        currency=company.currency.value,
        currency_symbol=currency_symbol(company.currency),
        period=period,
    )
