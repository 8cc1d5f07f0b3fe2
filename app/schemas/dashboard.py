"""
PayDesk - Dashboard Schemas
"""

from decimal import Decimal

from pydantic import BaseModel

from app.models.company import Currency


class DashboardResponse(BaseModel):
    """Dashboard headline figures."""
    total_employees: int
    total_payroll: Decimal
    total_payroll_display: str
    pending_advances: Decimal
    pending_advances_display: str
    pending_advances_count: int
    payslips_period: str
    currency: Currency

    class Config:
        from_attributes = True
