"""
PayDesk - SQLAlchemy Models Package

This package contains all database models for the application.
"""

from app.models.base import BaseModel, TimestampMixin, AuditMixin, generate_id
from app.models.company import Company, Currency
from app.models.user import User, UserRole, STAFF_MANAGER_ROLES
from app.models.payroll import (
    Employee,
    EmploymentType,
    PayrollTransaction,
    TransactionStatus,
    TransactionType,
)

__all__ = [
    # Base
    "BaseModel",
    "TimestampMixin",
    "AuditMixin",
    "generate_id",
    # Company
    "Company",
    "Currency",
    # Identity
    "User",
    "UserRole",
    "STAFF_MANAGER_ROLES",
    # Payroll
    "Employee",
    "EmploymentType",
    "PayrollTransaction",
    "TransactionStatus",
    "TransactionType",
]
