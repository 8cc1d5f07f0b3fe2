"""
PayDesk - Payroll Models

Employees and the payroll transactions (advances, loans, bonuses and
deductions) recorded against them.

The employee name is never copied onto a transaction; it is resolved through
the employee relationship at read time.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Date, ForeignKey, Numeric, String, Text,
    Enum as SQLEnum, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, AuditMixin
from app.models.user import UserRole


# ===========================================
# ENUMS
# ===========================================

class EmploymentType(str, Enum):
    """How the stored salary is interpreted."""
    SALARIED = "salaried"        # salary is a monthly amount
    DAILY_RATE = "daily_rate"    # salary is a per-day rate


class TransactionType(str, Enum):
    """Payroll transaction type."""
    LOAN = "Loan"
    ADVANCE = "Advance"
    BONUS = "Bonus"
    DEDUCTION = "Deduction"


class TransactionStatus(str, Enum):
    """Payroll transaction status. Any status may be set by an editor."""
    PENDING = "Pending"
    APPROVED = "Approved"
    PAID = "Paid"
    REJECTED = "Rejected"


# ===========================================
# EMPLOYEE MODEL
# ===========================================

class Employee(BaseModel, AuditMixin):
    """
    Employee identity and compensation record.

    employee_id is the stable business identifier chosen by the company and
    is unique within the company.
    """

    __tablename__ = "employees"

    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Link to identity principal (optional)
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    employee_id: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Company-assigned employee ID",
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    job_title: Mapped[str] = mapped_column(String(150), nullable=False)

    employment_type: Mapped[EmploymentType] = mapped_column(
        SQLEnum(EmploymentType),
        default=EmploymentType.SALARIED,
        nullable=False,
    )
    salary: Mapped[Decimal] = mapped_column(
        Numeric(precision=15, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Monthly salary or daily rate depending on employment_type",
    )

    bank_name: Mapped[str] = mapped_column(String(150), nullable=False)
    account_number: Mapped[str] = mapped_column(String(50), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole),
        default=UserRole.EMPLOYEE,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("company_id", "employee_id", name="uq_employees_company_employee_id"),
        CheckConstraint("salary >= 0", name="salary_non_negative"),
    )


# ===========================================
# PAYROLL TRANSACTION MODEL
# ===========================================

class PayrollTransaction(BaseModel, AuditMixin):
    """A single payroll-affecting event tied to one employee."""

    __tablename__ = "payroll_transactions"

    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    employee_ref_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[TransactionType] = mapped_column(SQLEnum(TransactionType), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(
        SQLEnum(TransactionStatus),
        default=TransactionStatus.PENDING,
        nullable=False,
    )

    employee: Mapped["Employee"] = relationship("Employee")

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
    )

    @property
    def employee_id(self) -> str:
        """Business employee id, resolved through the employee row."""
        return self.employee.employee_id

    @property
    def employee_name(self) -> str:
        """Employee name, resolved at read time."""
        return self.employee.name
