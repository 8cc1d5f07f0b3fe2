"""
PayDesk - Services Package

Business logic services.
"""

from app.services.auth_service import AuthService
from app.services.company_service import CompanyService
from app.services.employee_service import EmployeeService
from app.services.employee_account_service import EmployeeAccountService
from app.services.transaction_service import TransactionService
from app.services.payslip_service import PayslipService
from app.services.dashboard_service import DashboardService

__all__ = [
    "AuthService",
    "CompanyService",
    "EmployeeService",
    "EmployeeAccountService",
    "TransactionService",
    "PayslipService",
    "DashboardService",
]
