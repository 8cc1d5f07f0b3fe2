"""
PayDesk - Dashboard Service

Headline payroll figures for a company, formatted for display.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Currency
from app.models.payroll import (
    Employee,
    EmploymentType,
    PayrollTransaction,
    TransactionStatus,
    TransactionType,
)
from app.services.company_service import CompanyService
from app.services.payroll_aggregator import PayPeriod
from app.utils.currency import format_display_currency


@dataclass
class DashboardSummary:
    total_employees: int
    total_payroll: Decimal
    pending_advances: Decimal
    pending_advances_count: int
    payslips_period: str
    currency: Currency

    @property
    def total_payroll_display(self) -> str:
        return format_display_currency(self.total_payroll, self.currency)

    @property
    def pending_advances_display(self) -> str:
        return format_display_currency(self.pending_advances, self.currency)


class DashboardService:
    """Service for dashboard aggregates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_summary(
        self,
        company_id: str,
        reference_date: Optional[date] = None,
    ) -> DashboardSummary:
        """
        Totals for the dashboard cards.

        total_payroll sums the monthly salaries of salaried employees only;
        daily rates are not a monthly figure.
        """
        company = await CompanyService(self.db).get_company(company_id)

        employees = await self.db.execute(
            select(
                func.count(Employee.id),
                func.coalesce(
                    func.sum(Employee.salary).filter(
                        Employee.employment_type == EmploymentType.SALARIED
                    ),
                    0,
                ),
            ).where(Employee.company_id == company_id)
        )
        total_employees, total_payroll = employees.one()

        advances = await self.db.execute(
            select(
                func.count(PayrollTransaction.id),
                func.coalesce(func.sum(PayrollTransaction.amount), 0),
            ).where(
                PayrollTransaction.company_id == company_id,
                PayrollTransaction.type == TransactionType.ADVANCE,
                PayrollTransaction.status == TransactionStatus.PENDING,
            )
        )
        pending_count, pending_total = advances.one()

        return DashboardSummary(
            total_employees=total_employees,
            total_payroll=Decimal(str(total_payroll)),
            pending_advances=Decimal(str(pending_total)),
            pending_advances_count=pending_count,
            payslips_period=PayPeriod.current(reference_date).label,
            currency=Currency(company.currency),
        )
